"""Value types passed between the scaffolding stages."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union


@dataclass(frozen=True)
class StageResult:
    """Outcome of a best-effort stage.

    Best-effort stages never raise for the failures they own; they return a
    ``StageResult`` and the pipeline decides how to report it.
    """

    ok: bool
    error: Exception | None = None
    skipped: bool = False
    detail: str = ""

    @classmethod
    def success(cls, detail: str = "") -> "StageResult":
        return cls(ok=True, detail=detail)

    @classmethod
    def failure(cls, error: Exception) -> "StageResult":
        return cls(ok=False, error=error)

    @classmethod
    def skip(cls, detail: str = "") -> "StageResult":
        return cls(ok=False, skipped=True, detail=detail)


@dataclass(frozen=True)
class GitUser:
    """Global version-control identity used to default author fields."""

    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class ProjectContext:
    """Everything known about the project once the answers are final.

    Computed once after the template is validated and never mutated.
    """

    name: str
    project_dir: Path
    template: str
    template_dir: Path
    year: int
    contact: str
    answers: dict[str, Any]


RunCommand = Callable[..., Awaitable[int]]
InstallPackage = Callable[[str], Awaitable[None]]


@dataclass(frozen=True)
class HookContext(ProjectContext):
    """Project context plus the capabilities handed to the ``after`` hook.

    Attributes:
        run: ``await run("npm run build", env={...})`` splits the command on
            whitespace and spawns it in ``project_dir`` with inherited streams.
        install_package: ``await install_package("eslint")`` adds a dev
            dependency with the detected package manager.
    """

    run: RunCommand
    install_package: InstallPackage

    @classmethod
    def from_project(
        cls,
        project: ProjectContext,
        run: RunCommand,
        install_package: InstallPackage,
    ) -> "HookContext":
        return cls(
            name=project.name,
            project_dir=project.project_dir,
            template=project.template,
            template_dir=project.template_dir,
            year=project.year,
            contact=project.contact,
            answers=project.answers,
            run=run,
            install_package=install_package,
        )


# ---------------------------------------------------------------------------
# Caveat
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralCaveat:
    """A fixed message printed after the project is created."""

    text: str

    async def render(self, context: HookContext) -> str | None:
        return self.text


@dataclass(frozen=True)
class ComputedCaveat:
    """A message computed from the hook context; ``None`` prints nothing."""

    fn: Callable[[HookContext], Any]

    async def render(self, context: HookContext) -> str | None:
        result = self.fn(context)
        if inspect.isawaitable(result):
            result = await result
        return result or None


Caveat = Union[LiteralCaveat, ComputedCaveat]


def as_caveat(value: Any) -> Caveat | None:
    """Coerce a caller-supplied caveat into a tagged variant.

    Strings become :class:`LiteralCaveat`, callables become
    :class:`ComputedCaveat`.  Any other value yields ``None``.
    """
    if isinstance(value, (LiteralCaveat, ComputedCaveat)):
        return value
    if isinstance(value, str):
        return LiteralCaveat(value) if value else None
    if callable(value):
        return ComputedCaveat(value)
    return None
