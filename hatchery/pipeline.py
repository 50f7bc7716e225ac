"""hatchery scaffolding pipeline.

Turns a template directory and the user's answers into a ready-to-use
project.  Stages run strictly in order:

1.  NAME        -- project name and directory from the first argument.
2.  DESTINATION -- the directory must be missing or empty.
3.  SCHEMA      -- assemble the option schema (git identity, templates).
4.  PROMPT      -- CLI flags plus interactive answers.
5.  TEMPLATE    -- the chosen template directory must exist.
6.  PROJECT     -- project answers, contact and year become the view.
7.  RENDER      -- render the template tree into the project directory.
8.  LICENSE     -- best effort: write ``LICENSE``.
9.  INSTALL     -- ``npm``/``yarn`` install when ``package.json`` exists.
10. GIT         -- best effort: ``git init``; a missing git is ignored.
11. HOOK        -- the caller's ``after`` hook.
12. CAVEAT      -- the caller's closing message.
13. SUCCESS

Stages 8 and 10 return a :class:`~hatchery.models.StageResult`; every other
failure propagates to the caller of :func:`create`.

Usage::

    from hatchery import ScaffoldOptions, create

    await create("create-my-app", ScaffoldOptions(template_root="./templates"))
"""

from __future__ import annotations

import asyncio
import inspect
import sys
import time
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.markup import escape

from hatchery.config import ScaffoldOptions
from hatchery.models import HookContext, ProjectContext, StageResult, as_caveat
from hatchery.options import OptionSchema, build_option_schema, get_contact, project_answers
from hatchery.package_manager import (
    MANIFEST_FILE,
    PackageManager,
    install_deps,
    install_package,
)
from hatchery.probe import detect_package_manager
from hatchery.prompts import Asker, parse_cli_args, resolve_answers, usage_line
from hatchery.scaffolder.licenses import write_license
from hatchery.scaffolder.templates import copy_template, resolve_template_dir
from hatchery.utils import (
    ExternalToolError,
    console,
    format_duration,
    is_empty_dir,
    path_exists,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    spawn,
)
from hatchery.vcs import init_git

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ScaffoldError(Exception):
    """Base class for failures that abort the pipeline."""


class ScaffoldValidationError(ScaffoldError):
    """Raised when the destination or the chosen template is unusable."""


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """Drives one scaffolding run.

    Attributes:
        app_name: Name of the embedding tool, used in the usage line.
        options: Caller configuration.
        argv: Command-line arguments, project name first.
        package_manager: Detected while the schema is assembled.
        summary: Rows of the closing summary table.
    """

    def __init__(
        self,
        app_name: str,
        options: ScaffoldOptions,
        argv: Sequence[str] | None = None,
        ask: Asker | None = None,
    ) -> None:
        self.app_name = app_name
        self.options = options
        self.argv = list(sys.argv[1:] if argv is None else argv)
        self.ask = ask
        self.package_manager = PackageManager.NPM
        self.summary: dict[str, str] = {}

    async def execute(self) -> HookContext | None:
        """Run every stage.

        Returns:
            The hook context of the created project, or ``None`` when no
            project name was given.
        """
        started = time.monotonic()

        first_arg = self._first_arg()
        if first_arg is None:
            console.print(usage_line(self.app_name), markup=False)
            return None

        name, project_dir = await self.resolve_name(first_arg)
        console.print(
            f"\nNew project will be created in [green]{escape(str(project_dir))}[/green].\n"
        )
        await self.check_destination(project_dir)

        schema = await self.build_schema()
        answers = await self.prompt(schema)
        template, template_dir = await self.validate_template(answers)
        project = self.project_context(name, project_dir, template, template_dir, answers)

        await self.render(project)

        if not self.options.skip_license:
            self._report_best_effort("LICENSE", await self.generate_license(project))

        await self.install_dependencies(project)

        if not self.options.skip_git:
            self._report_best_effort("git", await self.init_repository(project))

        hook_context = HookContext.from_project(
            project,
            run=self._command_runner(project.project_dir),
            install_package=self._package_installer(project.project_dir),
        )
        if self.options.after is not None:
            await self.run_hook(hook_context)

        self.summary["Duration"] = format_duration(time.monotonic() - started)
        print_summary_table(self.summary, title="Project")

        await self.report_caveat(hook_context)
        print_success(f"\nSuccess! Created {escape(name)}.")
        return hook_context

    def _first_arg(self) -> str | None:
        if not self.argv or self.argv[0].startswith("-"):
            return None
        return self.argv[0]

    # ------------------------------------------------------------------
    # Stage 1-2: name and destination
    # ------------------------------------------------------------------

    async def resolve_name(self, first_arg: str) -> tuple[str, Path]:
        """Derive the project name and directory from the first argument.

        ``.`` scaffolds into the current directory under its own name.
        """
        if first_arg == ".":
            cwd = Path.cwd()
            return cwd.name, cwd

        name = first_arg
        if self.options.modify_name is not None:
            name = self.options.modify_name(first_arg)
            if inspect.isawaitable(name):
                name = await name

        if self.options.default_path is not None:
            project_dir = (self.options.default_path / name).resolve()
        else:
            project_dir = Path(name).resolve()
        return name, project_dir

    async def check_destination(self, project_dir: Path) -> None:
        """Refuse to scaffold into a directory that already has content."""
        try:
            empty = await is_empty_dir(project_dir)
        except NotADirectoryError as exc:
            raise ScaffoldValidationError(f"{project_dir} is not a directory.") from exc
        if not empty:
            raise ScaffoldValidationError(f"{project_dir} is not empty.")

    # ------------------------------------------------------------------
    # Stage 3-6: configuration
    # ------------------------------------------------------------------

    async def build_schema(self) -> OptionSchema:
        """Assemble the option schema and detect the package manager."""
        schema, self.package_manager = await asyncio.gather(
            build_option_schema(
                self.options.template_root,
                self.options.template_prefix,
                self.options.prompt_for_template,
                self.options.default_template,
                self.options.skip_license,
                self.options.extra,
            ),
            detect_package_manager(),
        )
        return schema

    async def prompt(self, schema: OptionSchema) -> dict[str, Any]:
        """Merge command-line flags with interactive answers."""
        provided = parse_cli_args(schema, self.argv[1:], self.app_name)
        return await resolve_answers(schema, provided, ask=self.ask)

    async def validate_template(self, answers: dict[str, Any]) -> tuple[str, Path]:
        """Return the chosen template and its directory."""
        template = answers.get("template")
        root = self.options.template_root
        if not template or root is None:
            raise ScaffoldValidationError("No template found")

        template_dir = resolve_template_dir(root, self.options.template_prefix, template)
        if not await path_exists(template_dir):
            raise ScaffoldValidationError(f"No template found: {template_dir}")
        return template, template_dir

    def project_context(
        self,
        name: str,
        project_dir: Path,
        template: str,
        template_dir: Path,
        answers: dict[str, Any],
    ) -> ProjectContext:
        """Build the immutable project context from the final answers."""
        projected = project_answers(answers)
        contact = get_contact(answers.get("author"), answers.get("email"))
        self.summary.update(
            {
                "Project": name,
                "Directory": str(project_dir),
                "Template": template,
            }
        )
        return ProjectContext(
            name=name,
            project_dir=project_dir,
            template=template,
            template_dir=template_dir,
            year=datetime.now().year,
            contact=contact,
            answers={**projected, "contact": contact},
        )

    @staticmethod
    def render_view(project: ProjectContext) -> dict[str, Any]:
        """The values substituted into template paths and files."""
        return {
            **project.answers,
            "name": project.name,
            "year": project.year,
            "contact": project.contact,
        }

    # ------------------------------------------------------------------
    # Stage 7-10: project setup
    # ------------------------------------------------------------------

    async def render(self, project: ProjectContext) -> None:
        console.print(
            f"\nCreating a new project in [green]{escape(str(project.project_dir))}[/green].\n"
        )
        await copy_template(project.project_dir, project.template_dir, self.render_view(project))

    async def generate_license(self, project: ProjectContext) -> StageResult:
        spdx = project.answers.get("license")
        result = await write_license(
            project.project_dir,
            spdx,
            year=project.year,
            project=project.name,
            description=project.answers.get("description"),
            organization=project.contact,
        )
        self.summary["License"] = spdx if result.ok else "none"
        return result

    async def install_dependencies(self, project: ProjectContext) -> None:
        """Install dependencies when the template produced a manifest."""
        self.summary["Package manager"] = self.package_manager.name.lower()
        if not await path_exists(project.project_dir / MANIFEST_FILE):
            return
        console.print("Installing dependencies.")
        await install_deps(project.project_dir, self.package_manager)

    async def init_repository(self, project: ProjectContext) -> StageResult:
        result = await init_git(project.project_dir)
        if result.ok:
            console.print("\nInitialized a git repository")
            self.summary["Git"] = "initialized"
        elif result.skipped:
            self.summary["Git"] = result.detail
        return result

    @staticmethod
    def _report_best_effort(stage: str, result: StageResult) -> None:
        if result.error is not None:
            print_warning(f"{stage} skipped: {escape(str(result.error))}")

    # ------------------------------------------------------------------
    # Stage 11-12: caller extensions
    # ------------------------------------------------------------------

    @staticmethod
    def _command_runner(project_dir: Path):
        async def run(command: str, **options: Any) -> int:
            parts = command.split()
            if not parts:
                raise ValueError("Cannot run an empty command")
            options.setdefault("cwd", project_dir)
            return await spawn(parts[0], parts[1:], **options)

        return run

    def _package_installer(self, project_dir: Path):
        manager = self.package_manager

        async def install(package: str) -> None:
            await install_package(project_dir, package, manager)

        return install

    async def run_hook(self, context: HookContext) -> None:
        """Invoke the caller's ``after`` hook; its errors propagate."""
        result = self.options.after(context)
        if inspect.isawaitable(result):
            await result

    async def report_caveat(self, context: HookContext) -> None:
        caveat = as_caveat(self.options.caveat)
        if caveat is None:
            return
        text = await caveat.render(context)
        if text:
            console.print(text, markup=False)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


async def create(
    app_name: str,
    options: ScaffoldOptions,
    argv: Sequence[str] | None = None,
    ask: Asker | None = None,
) -> HookContext | None:
    """Scaffold one project.

    Args:
        app_name: Name of the embedding tool.
        options: Caller configuration.
        argv: Arguments after the program name; defaults to ``sys.argv[1:]``.
        ask: Replacement for the terminal prompt (see
            :func:`hatchery.prompts.resolve_answers`).

    Returns:
        The hook context of the created project, or ``None`` if only the
        usage line was printed.
    """
    return await ScaffoldPipeline(app_name, options, argv, ask).execute()


def run(
    app_name: str,
    options: ScaffoldOptions,
    argv: Sequence[str] | None = None,
) -> HookContext | None:
    """Synchronous wrapper around :func:`create`."""
    return asyncio.run(create(app_name, options, argv))


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``hatchery`` and ``python -m hatchery``."""
    options = ScaffoldOptions.from_env()
    try:
        run("hatchery", options, argv)
    except (ScaffoldError, ExternalToolError) as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
