"""hatchery configuration.

:class:`ScaffoldOptions` is what an embedding application passes to
:func:`hatchery.create`.  It is a Pydantic v2 model so plain values are
validated at construction; the callables (``modify_name``, ``after``,
``caveat``) are stored as given.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hatchery.options import OptionSpec
from hatchery.scaffolder.templates import BUNDLED_PROJECT_TEMPLATES

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


class ScaffoldOptions(BaseModel):
    """Options controlling a single ``create`` run.

    Attributes:
        template_root: Directory holding one sub-directory per template.
        template_prefix: Prefix shared by template directory names; it is
            not part of the template name shown to the user.
        prompt_for_template: Let the user pick among several templates.
        default_template: Template used when the user is not asked.
        skip_license: Do not write a ``LICENSE`` file, and do not ask for
            description, author, email or license.
        skip_git: Do not initialise a git repository.
        modify_name: ``fn(first_arg) -> name`` (sync or async) applied to the
            project name argument.
        default_path: Parent directory for new projects instead of the
            current directory.
        extra: Option schema additions and overrides.
        after: ``fn(HookContext)`` (sync or async) run after setup.
        caveat: Text printed at the end, or ``fn(HookContext) -> text``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    template_root: Path | None = Field(default=None)
    template_prefix: str = Field(default="")
    prompt_for_template: bool = Field(default=False)
    default_template: str = Field(default="default")
    skip_license: bool = Field(default=False)
    skip_git: bool = Field(default=False)
    modify_name: Callable[[str], Any] | None = Field(default=None)
    default_path: Path | None = Field(default=None)
    extra: dict[str, OptionSpec] = Field(default_factory=dict)
    after: Callable[..., Any] | None = Field(default=None)
    caveat: Any = Field(default=None)

    @classmethod
    def from_env(cls) -> "ScaffoldOptions":
        """Build options from environment variables.

        Recognised variables (all optional):
            HATCHERY_TEMPLATE_ROOT, HATCHERY_TEMPLATE_PREFIX,
            HATCHERY_DEFAULT_TEMPLATE, HATCHERY_PROMPT_FOR_TEMPLATE,
            HATCHERY_SKIP_LICENSE, HATCHERY_SKIP_GIT, HATCHERY_DEFAULT_PATH.

        The template root falls back to the templates bundled with hatchery.
        """
        default_path = os.environ.get("HATCHERY_DEFAULT_PATH")
        return cls(
            template_root=Path(
                os.environ.get("HATCHERY_TEMPLATE_ROOT") or BUNDLED_PROJECT_TEMPLATES
            ),
            template_prefix=os.environ.get("HATCHERY_TEMPLATE_PREFIX", ""),
            default_template=os.environ.get("HATCHERY_DEFAULT_TEMPLATE") or "default",
            prompt_for_template=_env_flag("HATCHERY_PROMPT_FOR_TEMPLATE", True),
            skip_license=_env_flag("HATCHERY_SKIP_LICENSE"),
            skip_git=_env_flag("HATCHERY_SKIP_GIT"),
            default_path=Path(default_path) if default_path else None,
        )
