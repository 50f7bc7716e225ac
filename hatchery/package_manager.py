"""Dependency installation with npm or yarn.

The two managers differ in how they are pointed at the project: yarn takes a
``--cwd`` flag and runs from the caller's working directory, npm has no such
flag and is spawned with the project as its working directory.  Either way
the working directory is passed to the child process explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from hatchery.utils import ExternalToolError, format_command, spawn

MANIFEST_FILE = "package.json"


class PackageManager(str, Enum):
    """Supported package managers, valued by executable name."""

    YARN = "yarnpkg"
    NPM = "npm"

    @property
    def supports_cwd_flag(self) -> bool:
        return self is PackageManager.YARN


class InstallError(ExternalToolError):
    """Raised when a dependency install or package add exits non-zero."""

    def __init__(self, command: list[str], exit_code: int) -> None:
        super().__init__(
            command,
            exit_code,
            f"installDeps failed: {format_command(command)} (exit {exit_code})",
        )


@dataclass(frozen=True)
class Invocation:
    """A fully-resolved command line and the directory it runs in.

    ``cwd`` is ``None`` when the command inherits the caller's directory.
    """

    command: str
    args: list[str]
    cwd: Path | None

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


def install_invocation(manager: PackageManager, project_dir: Path) -> Invocation:
    """Build the command that installs every dependency of *project_dir*."""
    if manager.supports_cwd_flag:
        return Invocation(manager.value, ["install", "--cwd", str(project_dir)], None)
    return Invocation(manager.value, ["install"], project_dir)


def add_package_invocation(
    manager: PackageManager, project_dir: Path, package: str
) -> Invocation:
    """Build the command that adds *package* as a development dependency."""
    if manager.supports_cwd_flag:
        return Invocation(
            manager.value, ["--cwd", str(project_dir), "add", package], None
        )
    return Invocation(manager.value, ["install", "-D", package], project_dir)


async def _run(invocation: Invocation) -> None:
    try:
        await spawn(invocation.command, invocation.args, cwd=invocation.cwd)
    except ExternalToolError as exc:
        raise InstallError(invocation.argv, exc.exit_code) from exc


async def install_deps(project_dir: Path, manager: PackageManager) -> None:
    """Install the dependencies declared in the project's manifest.

    Raises:
        InstallError: If the package manager exits non-zero.
    """
    await _run(install_invocation(manager, project_dir))


async def install_package(
    project_dir: Path, package: str, manager: PackageManager
) -> None:
    """Add a single development dependency to the project.

    Raises:
        InstallError: If the package manager exits non-zero.
    """
    await _run(add_package_invocation(manager, project_dir, package))
