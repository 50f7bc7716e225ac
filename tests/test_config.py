"""Unit tests for ScaffoldOptions (hatchery.config)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from hatchery.config import ScaffoldOptions
from hatchery.options import OptionSpec
from hatchery.scaffolder.templates import BUNDLED_PROJECT_TEMPLATES

pytestmark = pytest.mark.unit

_ENV_VARS = (
    "HATCHERY_TEMPLATE_ROOT",
    "HATCHERY_TEMPLATE_PREFIX",
    "HATCHERY_DEFAULT_TEMPLATE",
    "HATCHERY_PROMPT_FOR_TEMPLATE",
    "HATCHERY_SKIP_LICENSE",
    "HATCHERY_SKIP_GIT",
    "HATCHERY_DEFAULT_PATH",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self):
        options = ScaffoldOptions()
        assert options.template_root is None
        assert options.template_prefix == ""
        assert options.prompt_for_template is False
        assert options.default_template == "default"
        assert options.skip_license is False
        assert options.skip_git is False
        assert options.extra == {}
        assert options.after is None
        assert options.caveat is None

    def test_template_root_coerced_to_path(self):
        assert ScaffoldOptions(template_root="templates").template_root == Path("templates")

    def test_extra_mappings_become_specs(self):
        options = ScaffoldOptions(extra={"port": {"type": "number", "default": 3000}})
        assert isinstance(options.extra["port"], OptionSpec)

    def test_invalid_prompt_policy_rejected(self):
        with pytest.raises(ValidationError):
            ScaffoldOptions(extra={"port": {"prompt": "sometimes"}})

    def test_callables_are_kept(self):
        def hook(context):
            return None

        options = ScaffoldOptions(after=hook, modify_name=str.lower, caveat=lambda ctx: "hi")
        assert options.after is hook
        assert options.modify_name("ABC") == "abc"
        assert callable(options.caveat)


class TestFromEnv:
    def test_bundled_root_by_default(self, clean_env):
        options = ScaffoldOptions.from_env()
        assert options.template_root == BUNDLED_PROJECT_TEMPLATES
        assert options.prompt_for_template is True
        assert options.default_path is None

    def test_reads_variables(self, clean_env, tmp_path: Path):
        clean_env.setenv("HATCHERY_TEMPLATE_ROOT", str(tmp_path))
        clean_env.setenv("HATCHERY_TEMPLATE_PREFIX", "tpl-")
        clean_env.setenv("HATCHERY_DEFAULT_TEMPLATE", "react")
        clean_env.setenv("HATCHERY_PROMPT_FOR_TEMPLATE", "no")
        clean_env.setenv("HATCHERY_SKIP_LICENSE", "1")
        clean_env.setenv("HATCHERY_SKIP_GIT", "true")
        clean_env.setenv("HATCHERY_DEFAULT_PATH", str(tmp_path / "projects"))

        options = ScaffoldOptions.from_env()
        assert options.template_root == tmp_path
        assert options.template_prefix == "tpl-"
        assert options.default_template == "react"
        assert options.prompt_for_template is False
        assert options.skip_license is True
        assert options.skip_git is True
        assert options.default_path == tmp_path / "projects"

    def test_blank_flag_uses_default(self, clean_env):
        clean_env.setenv("HATCHERY_SKIP_GIT", "  ")
        assert ScaffoldOptions.from_env().skip_git is False
