"""Shared pytest fixtures for the hatchery test suite.

Provides reusable fixtures for:
- Template roots with one or several templates on disk
- Patched environment probes (git identity, package manager)
- A recording prompt asker
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hatchery.models import GitUser
from hatchery.options import OptionSpec
from hatchery.package_manager import PackageManager


# ---------------------------------------------------------------------------
# Template roots
# ---------------------------------------------------------------------------

def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """Template root holding ``default`` and ``ts`` templates.

    Neither template ships a ``package.json`` so no install is triggered.
    """
    root = tmp_path / "templates"
    _write(root / "default" / "README.md.j2", "# {{ name }}\n\n{{ description }}\n")
    _write(root / "default" / "src" / "{{ name }}.txt", "by {{ contact }} in {{ year }}\n")
    _write(root / "ts" / "index.ts", "export const name = '{{ name }}'\n")
    return root


@pytest.fixture
def single_template_root(tmp_path: Path) -> Path:
    """Template root holding only a ``default`` template."""
    root = tmp_path / "single"
    _write(root / "default" / "README.md", "# {{ name }}\n")
    return root


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory the test runs inside."""
    cwd = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


# ---------------------------------------------------------------------------
# Environment probes
# ---------------------------------------------------------------------------

@pytest.fixture
def git_user() -> GitUser:
    return GitUser(name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def patched_probes(git_user: GitUser):
    """Replace the git identity and package-manager probes.

    Yields the ``detect_package_manager`` mock so tests can switch managers.
    """
    detect = AsyncMock(return_value=PackageManager.NPM)
    with patch("hatchery.options.get_git_user", AsyncMock(return_value=git_user)), \
         patch("hatchery.pipeline.detect_package_manager", detect):
        yield detect


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

class RecordingAsker:
    """Prompt stand-in that records every question and replies from a table."""

    def __init__(self, replies: dict[str, Any] | None = None) -> None:
        self.replies = replies or {}
        self.asked: list[tuple[str, OptionSpec, Any]] = []

    def __call__(self, name: str, spec: OptionSpec, default: Any) -> Any:
        self.asked.append((name, spec, default))
        return self.replies.get(name, default)

    @property
    def asked_names(self) -> list[str]:
        return [name for name, _, _ in self.asked]


@pytest.fixture
def asker() -> RecordingAsker:
    return RecordingAsker()


# ---------------------------------------------------------------------------
# Fake child processes for spawn / run_command
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Factory for stand-ins of the object returned by ``create_subprocess_exec``.

    ``communicate()`` yields the encoded *stdout* / *stderr* (what
    :func:`hatchery.utils.run_command` reads) and ``wait()`` yields
    *returncode* (what :func:`hatchery.utils.spawn` reads).
    """
    def factory(stdout: str = "", stderr: str = "", returncode: int = 0) -> AsyncMock:
        proc = AsyncMock()
        proc.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
        proc.wait = AsyncMock(return_value=returncode)
        proc.returncode = returncode
        proc.kill = MagicMock()
        return proc

    return factory
