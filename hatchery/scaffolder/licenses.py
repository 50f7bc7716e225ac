"""License text generation from bundled Jinja2 templates.

Each license lives in ``templates/licenses/<SPDX id>.j2`` and defines up to
three blocks: ``header`` (title and copyright line), ``text`` (the grant) and
``warranty`` (the disclaimer).  The file written to a project is always
``header + text + warranty``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from jinja2 import TemplateError, TemplateNotFound

from hatchery.models import StageResult
from hatchery.scaffolder.templates import TEMPLATE_SUFFIX, TemplateRenderer

LICENSE_FILE = "LICENSE"

_LICENSE_TEMPLATE_DIR = Path(__file__).parent / "templates" / "licenses"
_SECTIONS = ("header", "text", "warranty")


class LicenseError(Exception):
    """Raised when no license text can be produced for an identifier."""


@dataclass(frozen=True)
class LicenseText:
    """The rendered sections of a license; absent sections are empty."""

    header: str = ""
    text: str = ""
    warranty: str = ""

    def compose(self) -> str:
        return f"{self.header or ''}{self.text or ''}{self.warranty or ''}"


def available_licenses() -> list[str]:
    """Return the SPDX identifiers of every bundled license, sorted."""
    return sorted(
        path.name[: -len(TEMPLATE_SUFFIX)]
        for path in _LICENSE_TEMPLATE_DIR.glob(f"*{TEMPLATE_SUFFIX}")
    )


def make_license(
    spdx: str | None,
    *,
    year: int,
    project: str,
    description: str | None = None,
    organization: str | None = None,
) -> LicenseText:
    """Render the license identified by *spdx*.

    Raises:
        LicenseError: If *spdx* is empty or not a bundled license.
    """
    if not spdx or spdx not in available_licenses():
        raise LicenseError(f"Unknown license: {spdx!r}")

    renderer = TemplateRenderer(_LICENSE_TEMPLATE_DIR)
    try:
        template = renderer.env.get_template(f"{spdx}{TEMPLATE_SUFFIX}")
    except TemplateNotFound as exc:
        raise LicenseError(f"Unknown license: {spdx!r}") from exc

    context = template.new_context(
        {
            "year": year,
            "project": project,
            "description": description or "",
            "organization": organization or "",
        }
    )
    sections: dict[str, str] = {}
    for name in _SECTIONS:
        block = template.blocks.get(name)
        sections[name] = "".join(block(context)) if block else ""
    return LicenseText(**sections)


async def write_license(
    project_dir: Path,
    spdx: str | None,
    *,
    year: int,
    project: str,
    description: str | None = None,
    organization: str | None = None,
) -> StageResult:
    """Write ``LICENSE`` into *project_dir*.

    Never raises for license or I/O problems; they are returned as a failed
    :class:`StageResult`.
    """
    try:
        license_text = make_license(
            spdx,
            year=year,
            project=project,
            description=description,
            organization=organization,
        )
        target = project_dir / LICENSE_FILE
        await asyncio.to_thread(target.write_text, license_text.compose(), "utf-8")
    except (LicenseError, TemplateError, OSError) as exc:
        return StageResult.failure(exc)
    return StageResult.success(f"Wrote {LICENSE_FILE} ({spdx})")
