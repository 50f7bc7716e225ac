"""Unit tests for stage value types (hatchery.models)."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from hatchery.models import (
    ComputedCaveat,
    HookContext,
    LiteralCaveat,
    ProjectContext,
    StageResult,
    as_caveat,
)

pytestmark = pytest.mark.unit


def _project() -> ProjectContext:
    return ProjectContext(
        name="demo",
        project_dir=Path("/work/demo"),
        template="default",
        template_dir=Path("/templates/default"),
        year=2026,
        contact="Ada <ada@example.com>",
        answers={"description": "A demo", "contact": "Ada <ada@example.com>"},
    )


async def _noop_run(command: str, **options) -> int:
    return 0


async def _noop_install(package: str) -> None:
    return None


def _hook_context() -> HookContext:
    return HookContext.from_project(_project(), run=_noop_run, install_package=_noop_install)


class TestStageResult:
    def test_success(self):
        result = StageResult.success("done")
        assert result.ok and not result.skipped and result.error is None

    def test_failure_keeps_error(self):
        error = OSError("disk full")
        result = StageResult.failure(error)
        assert not result.ok
        assert result.error is error

    def test_skip(self):
        result = StageResult.skip("git is not installed")
        assert result.skipped and not result.ok
        assert result.detail == "git is not installed"


class TestContexts:
    def test_project_context_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            _project().name = "other"  # type: ignore[misc]

    def test_hook_context_copies_project_fields(self):
        context = _hook_context()
        assert context.name == "demo"
        assert context.template == "default"
        assert context.answers["contact"] == "Ada <ada@example.com>"
        assert context.run is _noop_run
        assert context.install_package is _noop_install
        assert isinstance(context, ProjectContext)


class TestCaveat:
    def test_string_becomes_literal(self):
        assert as_caveat("cd demo") == LiteralCaveat("cd demo")

    def test_callable_becomes_computed(self):
        def fn(ctx):
            return "hi"

        caveat = as_caveat(fn)
        assert isinstance(caveat, ComputedCaveat)
        assert caveat.fn is fn

    @pytest.mark.parametrize("value", [None, 42, ["a"], ""])
    def test_other_values_are_ignored(self, value):
        assert as_caveat(value) is None

    def test_variants_pass_through(self):
        literal = LiteralCaveat("x")
        assert as_caveat(literal) is literal

    async def test_literal_render(self):
        assert await LiteralCaveat("cd demo").render(_hook_context()) == "cd demo"

    async def test_computed_sync_render(self):
        caveat = ComputedCaveat(lambda ctx: f"cd {ctx.name}")
        assert await caveat.render(_hook_context()) == "cd demo"

    async def test_computed_async_render(self):
        async def fn(ctx):
            return f"run npm start in {ctx.project_dir.name}"

        assert await ComputedCaveat(fn).render(_hook_context()) == "run npm start in demo"

    async def test_computed_none_renders_nothing(self):
        assert await ComputedCaveat(lambda ctx: None).render(_hook_context()) is None
