"""Environment probes: ambient git identity and package-manager detection.

All probes are read-only.  A probe that cannot run (tool missing, config
unset) degrades to an empty or negative answer instead of raising.
"""

from __future__ import annotations

import asyncio

from hatchery.models import GitUser
from hatchery.package_manager import PackageManager
from hatchery.utils import run_command


async def _git_config_value(key: str) -> str | None:
    try:
        returncode, stdout, _ = await run_command(
            ["git", "config", "--global", "--get", key]
        )
    except OSError:
        return None
    if returncode != 0 or not stdout:
        return None
    return stdout


async def get_git_user() -> GitUser:
    """Read ``user.name`` and ``user.email`` from the global git config."""
    name, email = await asyncio.gather(
        _git_config_value("user.name"),
        _git_config_value("user.email"),
    )
    return GitUser(name=name, email=email)


async def is_yarn_available() -> bool:
    """Return ``True`` if ``yarnpkg --version`` runs successfully."""
    try:
        returncode, _, _ = await run_command(["yarnpkg", "--version"])
    except OSError:
        return False
    return returncode == 0


async def detect_package_manager() -> PackageManager:
    """Prefer yarn when it is installed, npm otherwise."""
    if await is_yarn_available():
        return PackageManager.YARN
    return PackageManager.NPM
