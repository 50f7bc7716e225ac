"""Unit tests for environment probes (hatchery.probe)."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from hatchery.models import GitUser
from hatchery.package_manager import PackageManager
from hatchery.probe import detect_package_manager, get_git_user, is_yarn_available

pytestmark = pytest.mark.unit


def _git_config(values: dict[str, str]):
    async def fake_run_command(cmd, **kwargs):
        key = cmd[-1]
        if key in values:
            return (0, values[key], "")
        return (1, "", "")

    return fake_run_command


class TestGetGitUser:
    async def test_reads_name_and_email(self):
        fake = _git_config({"user.name": "Ada Lovelace", "user.email": "ada@example.com"})
        with patch("hatchery.probe.run_command", side_effect=fake):
            user = await get_git_user()
        assert user == GitUser(name="Ada Lovelace", email="ada@example.com")

    async def test_unset_values_are_none(self):
        with patch("hatchery.probe.run_command", side_effect=_git_config({"user.name": "Ada"})):
            user = await get_git_user()
        assert user.name == "Ada"
        assert user.email is None

    async def test_missing_git_degrades_to_empty(self):
        with patch("hatchery.probe.run_command", AsyncMock(side_effect=FileNotFoundError("git"))):
            user = await get_git_user()
        assert user == GitUser()

    async def test_queries_global_config(self):
        with patch("hatchery.probe.run_command", AsyncMock(return_value=(0, "x", ""))) as run:
            await get_git_user()
        commands = [call.args[0] for call in run.call_args_list]
        assert ["git", "config", "--global", "--get", "user.name"] in commands
        assert ["git", "config", "--global", "--get", "user.email"] in commands


class TestYarnProbe:
    async def test_available(self):
        with patch("hatchery.probe.run_command", AsyncMock(return_value=(0, "1.22.19", ""))) as run:
            assert await is_yarn_available() is True
        run.assert_awaited_once_with(["yarnpkg", "--version"])

    async def test_nonzero_exit(self):
        with patch("hatchery.probe.run_command", AsyncMock(return_value=(1, "", "err"))):
            assert await is_yarn_available() is False

    async def test_not_installed(self):
        with patch("hatchery.probe.run_command", AsyncMock(side_effect=FileNotFoundError())):
            assert await is_yarn_available() is False


class TestDetectPackageManager:
    async def test_prefers_yarn(self):
        with patch("hatchery.probe.is_yarn_available", AsyncMock(return_value=True)):
            assert await detect_package_manager() is PackageManager.YARN

    async def test_falls_back_to_npm(self):
        with patch("hatchery.probe.is_yarn_available", AsyncMock(return_value=False)):
            assert await detect_package_manager() is PackageManager.NPM


class TestProbesThroughRunCommand:
    async def test_git_identity_output_is_stripped(self, mock_subprocess):
        procs = [
            mock_subprocess(stdout="Ada Lovelace\n"),
            mock_subprocess(stdout="ada@example.com\n"),
        ]
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=procs)):
            user = await get_git_user()
        assert user == GitUser(name="Ada Lovelace", email="ada@example.com")

    async def test_yarn_failure_exit(self, mock_subprocess):
        proc = mock_subprocess(stderr="yarnpkg: broken", returncode=1)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            assert await is_yarn_available() is False
