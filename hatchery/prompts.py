"""Command-line parsing and interactive prompting against an option schema.

The CLI accepts exactly one ``--<name>`` flag per schema entry plus the
``--interactive/--no-interactive`` toggle.  :func:`resolve_answers` then
fills in every schema key, asking the user only where the entry's prompt
policy allows it:

* ``never``     -- provided value, else default.  The user is never asked.
* ``if-no-arg`` -- provided value; the user is asked only when it is missing.
* ``always``    -- the user is always asked, with any provided value as the
  suggested default.

With ``--no-interactive`` nobody is asked and defaults fill the gaps.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt

from hatchery.options import OptionSchema, OptionSpec
from hatchery.utils import console

INTERACTIVE_KEY = "interactive"

Asker = Callable[[str, OptionSpec, Any], Any]

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


# ---------------------------------------------------------------------------
# CLI parsing
# ---------------------------------------------------------------------------


def _to_number(raw: str) -> int | float:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from None


def _cli_choices(spec: OptionSpec) -> list[str] | None:
    if spec.type != "list" or not spec.choices:
        return None
    return [str(choice) for choice in spec.choices]


def usage_line(prog: str) -> str:
    return f"Usage: {prog} <project_name> [args]"


def build_arg_parser(schema: OptionSchema, prog: str) -> argparse.ArgumentParser:
    """Build an ``argparse`` parser exposing one flag per schema entry."""
    parser = argparse.ArgumentParser(prog=prog, usage="%(prog)s <project_name> [args]")
    parser.add_argument(
        f"--{INTERACTIVE_KEY}",
        dest=INTERACTIVE_KEY,
        action=argparse.BooleanOptionalAction,
        default=True,
        help="prompt for missing values",
    )

    for name, spec in schema.items():
        if name == INTERACTIVE_KEY:
            continue
        flags = [f"--{name}"]
        if "_" in name:
            flags.append(f"--{name.replace('_', '-')}")
        help_text = spec.describe.replace("%", "%%")

        if spec.type == "confirm":
            parser.add_argument(
                *flags,
                dest=name,
                action=argparse.BooleanOptionalAction,
                default=argparse.SUPPRESS,
                help=help_text,
            )
        else:
            parser.add_argument(
                *flags,
                dest=name,
                type=_to_number if spec.type == "number" else str,
                choices=_cli_choices(spec),
                default=argparse.SUPPRESS,
                metavar=name.upper(),
                help=help_text,
            )

    return parser


def parse_cli_args(
    schema: OptionSchema, argv: Sequence[str], prog: str
) -> dict[str, Any]:
    """Parse option flags (everything after the project name).

    Returns:
        Only the values actually present on the command line, plus the
        ``interactive`` toggle.
    """
    parser = build_arg_parser(schema, prog)
    return vars(parser.parse_args(list(argv)))


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


def should_prompt(spec: OptionSpec, has_arg: bool, interactive: bool) -> bool:
    """Decide whether the user is asked for an option."""
    if not interactive or spec.prompt == "never":
        return False
    if spec.prompt == "always":
        return True
    return not has_arg


def coerce_answer(spec: OptionSpec, value: Any) -> Any:
    """Convert a raw answer to the option's declared type."""
    if value is None:
        return None
    if spec.type == "confirm" and isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    if spec.type == "confirm":
        return bool(value)
    if spec.type == "number" and isinstance(value, str):
        return _to_number(value)
    return value


def ask_with_rich(name: str, spec: OptionSpec, default: Any) -> Any:
    """Ask for a single option on the terminal using ``rich.prompt``."""
    message = spec.describe or name
    kwargs: dict[str, Any] = {"console": console}

    if spec.type == "confirm":
        return Confirm.ask(message, default=bool(default), **kwargs)

    if default is not None:
        kwargs["default"] = default

    if spec.type == "number":
        prompt_cls = FloatPrompt if isinstance(default, float) else IntPrompt
        return prompt_cls.ask(message, **kwargs)

    if spec.type == "list" and spec.choices:
        by_label = {str(choice): choice for choice in spec.choices}
        if default is not None and str(default) not in by_label:
            kwargs.pop("default")
        elif default is not None:
            kwargs["default"] = str(default)
        answer = Prompt.ask(message, choices=list(by_label), **kwargs)
        return by_label.get(answer, answer)

    return Prompt.ask(message, password=spec.type == "password", **kwargs)


async def resolve_answers(
    schema: OptionSchema,
    provided: Mapping[str, Any],
    ask: Asker | None = None,
) -> dict[str, Any]:
    """Resolve every schema entry into a concrete answer.

    Args:
        schema: The assembled option schema.
        provided: Values parsed from the command line, including the
            ``interactive`` toggle.
        ask: Callable used to ask the user; defaults to :func:`ask_with_rich`.
            It runs in a worker thread so blocking terminal input does not
            stall the event loop.

    Returns:
        A mapping holding ``interactive`` and every key of *schema*.
    """
    ask = ask or ask_with_rich
    values = dict(provided)
    interactive = bool(values.pop(INTERACTIVE_KEY, True))
    answers: dict[str, Any] = {INTERACTIVE_KEY: interactive}

    for name, spec in schema.items():
        if name == INTERACTIVE_KEY:
            continue
        has_arg = name in values
        if should_prompt(spec, has_arg, interactive):
            suggested = values[name] if has_arg else spec.default
            value = await asyncio.to_thread(ask, name, spec, suggested)
        else:
            value = values[name] if has_arg else spec.default
        answers[name] = coerce_answer(spec, value)

    return answers
