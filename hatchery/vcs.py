"""Git repository initialisation for freshly created projects."""

from __future__ import annotations

import shutil
from pathlib import Path

from hatchery.models import StageResult
from hatchery.utils import EXIT_COMMAND_NOT_FOUND, ExternalToolError, spawn

# Exit statuses that mean "git is not installed" rather than "git failed":
# POSIX shells use 127, cmd.exe uses 9009.
GIT_UNAVAILABLE_EXIT_CODES = frozenset({EXIT_COMMAND_NOT_FOUND, 9009})


def is_git_unavailable(exc: ExternalToolError) -> bool:
    """Return ``True`` if *exc* signals a missing git executable."""
    return exc.exit_code in GIT_UNAVAILABLE_EXIT_CODES


async def init_git(project_dir: Path) -> StageResult:
    """Run ``git init`` inside *project_dir*.

    Returns a skipped result when git is not installed.

    Raises:
        ExternalToolError: If git is present but ``git init`` fails.
    """
    if shutil.which("git") is None:
        return StageResult.skip("git is not installed")

    try:
        await spawn(
            "git",
            ["init", "--quiet"],
            cwd=project_dir,
        )
    except ExternalToolError as exc:
        if is_git_unavailable(exc):
            return StageResult.skip("git is not installed")
        raise

    return StageResult.success(f"Initialized a git repository in {project_dir}")
