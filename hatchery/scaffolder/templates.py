"""Jinja2 rendering of template trees.

Provides template discovery (:func:`list_available_templates`,
:func:`resolve_template_dir`) and the :class:`TemplateRenderer`, which
renders a whole template directory into a project directory.  Path segments
and text file contents are both rendered with the view; a trailing ``.j2``
suffix is dropped from output names and files that are not UTF-8 text are
copied unchanged.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from hatchery.utils import ensure_dir

TEMPLATE_SUFFIX = ".j2"

_BUNDLED_TEMPLATE_DIR = Path(__file__).parent / "templates"
BUNDLED_PROJECT_TEMPLATES = _BUNDLED_TEMPLATE_DIR / "projects"


# ---------------------------------------------------------------------------
# Template discovery
# ---------------------------------------------------------------------------


def list_available_templates(root: str | Path | None, prefix: str = "") -> list[str]:
    """Return the sorted names of the templates under *root*.

    A template is any sub-directory whose name starts with *prefix*; the
    prefix is stripped from the returned names.  A missing root yields an
    empty list.
    """
    if not root:
        return []
    root_path = Path(root)
    if not root_path.is_dir():
        return []
    return sorted(
        entry.name[len(prefix):]
        for entry in root_path.iterdir()
        if entry.is_dir() and entry.name.startswith(prefix) and entry.name != prefix
    )


def resolve_template_dir(root: str | Path, prefix: str, name: str) -> Path:
    """Return the absolute directory of template *name*."""
    return (Path(root) / f"{prefix}{name}").resolve()


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates found under *template_dir*."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _BUNDLED_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template, addressed relative to the template directory."""
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    def render_path(self, relative: Path, context: dict[str, Any]) -> Path:
        """Render every segment of *relative* and drop a ``.j2`` suffix."""
        parts = [self.render_string(part, context) for part in relative.parts]
        if parts and parts[-1].endswith(TEMPLATE_SUFFIX):
            parts[-1] = parts[-1][: -len(TEMPLATE_SUFFIX)]
        return Path(*parts)

    async def render_tree(self, output_dir: str | Path, context: dict[str, Any]) -> list[Path]:
        """Render the whole template directory into *output_dir*.

        Returns:
            The written file paths, in template order.
        """
        out_base = ensure_dir(output_dir)
        written: list[Path] = []

        for source in sorted(self.template_dir.rglob("*")):
            relative = source.relative_to(self.template_dir)
            target = out_base / self.render_path(relative, context)
            if source.is_dir():
                await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
                continue
            await asyncio.to_thread(self._render_file, source, relative, target, context)
            written.append(target)

        return written

    def _render_file(
        self, source: Path, relative: Path, target: Path, context: dict[str, Any]
    ) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            source.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            shutil.copy2(source, target)
            return
        target.write_text(self.render(relative.as_posix(), context), encoding="utf-8")
        shutil.copymode(source, target)


async def copy_template(
    project_dir: str | Path, template_dir: str | Path, view: dict[str, Any]
) -> list[Path]:
    """Render *template_dir* into *project_dir* using *view* as the context.

    Any I/O or template error propagates to the caller.
    """
    renderer = TemplateRenderer(template_dir)
    return await renderer.render_tree(project_dir, view)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
