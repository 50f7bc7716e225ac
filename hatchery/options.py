"""Option schema assembly and answer projection.

The option schema describes every value the user may be asked for.  It is
assembled once per run from a fixed base (description, author, email,
template, license), the global git identity, the templates found on disk and
the caller's own additions.  After prompting, :func:`project_answers` strips
internal keys so the remaining answers can be handed to the renderer.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from hatchery.probe import get_git_user
from hatchery.scaffolder.licenses import available_licenses
from hatchery.scaffolder.templates import list_available_templates

PromptPolicy = Literal["always", "if-no-arg", "never"]
OptionType = Literal["input", "list", "confirm", "number", "password"]

UNLICENSED = "UNLICENSED"
DEFAULT_LICENSE = "MIT"

# Keys that drive the run itself and never reach templates.
META_KEYS = frozenset({"interactive", "template"})
_INTERNAL_KEY = re.compile(r"^[$_]")


class OptionSpec(BaseModel):
    """A single entry of the option schema."""

    type: OptionType = Field(default="input")
    describe: str = Field(default="", description="Prompt text and CLI help")
    default: Any = Field(default=None)
    prompt: PromptPolicy = Field(default="if-no-arg")
    choices: list[Any] | None = Field(default=None)


OptionSchema = dict[str, OptionSpec]


async def build_option_schema(
    template_root: str | Path | None,
    template_prefix: str = "",
    prompt_for_template: bool = False,
    default_template: str = "default",
    skip_license_prompts: bool = False,
    extra_options: Mapping[str, OptionSpec | Mapping[str, Any]] | None = None,
) -> OptionSchema:
    """Assemble the option schema presented to the prompt engine.

    Args:
        template_root: Directory holding one sub-directory per template.
        template_prefix: Directory-name prefix shared by every template.
        prompt_for_template: Whether the user may pick a template when more
            than one is available.
        default_template: Template used when the user is not asked.
        skip_license_prompts: Never ask for description, author, email or
            license.
        extra_options: Caller entries merged last; they add options or
            replace base options of the same name.

    Returns:
        An ordered mapping of option name to :class:`OptionSpec`.
    """
    git_user = await get_git_user()
    templates = list_available_templates(template_root, template_prefix)
    ask_for_template = len(templates) > 1 and prompt_for_template
    license_prompt: PromptPolicy = "never" if skip_license_prompts else "if-no-arg"

    schema: OptionSchema = {
        "description": OptionSpec(
            type="input",
            describe="description",
            default="description",
            prompt=license_prompt,
        ),
        "author": OptionSpec(
            type="input",
            describe="author name",
            default=git_user.name,
            prompt=license_prompt,
        ),
        "email": OptionSpec(
            type="input",
            describe="author email",
            default=git_user.email,
            prompt=license_prompt,
        ),
        "template": OptionSpec(
            type="list",
            describe="template",
            default=default_template,
            prompt="if-no-arg" if ask_for_template else "never",
            choices=templates,
        ),
        "license": OptionSpec(
            type="list",
            describe="license",
            default=DEFAULT_LICENSE,
            prompt=license_prompt,
            choices=[*available_licenses(), UNLICENSED],
        ),
    }

    for name, spec in (extra_options or {}).items():
        schema[name] = (
            spec if isinstance(spec, OptionSpec) else OptionSpec.model_validate(spec)
        )

    return schema


def is_internal_key(key: str) -> bool:
    """Return ``True`` for answer keys that must not reach templates."""
    return not key or key in META_KEYS or bool(_INTERNAL_KEY.match(key))


def project_answers(answers: Mapping[str, Any]) -> dict[str, Any]:
    """Drop meta and internal keys from a resolved answer set."""
    return {key: value for key, value in answers.items() if not is_internal_key(key)}


def get_contact(author: str | None, email: str | None) -> str:
    """Format ``Author <email>``, or just the author when there is no email."""
    contact = author or ""
    if email:
        contact += f" <{email}>"
    return contact
