"""hatchery -- scaffold new projects from template directories.

Collects configuration from the command line and interactive prompts, renders
a template tree into a new project directory, then writes a ``LICENSE``,
installs dependencies, initialises git and runs the caller's hook.

Quick usage::

    import asyncio

    from hatchery import ScaffoldOptions, create

    options = ScaffoldOptions(
        template_root="./templates",
        prompt_for_template=True,
        caveat="cd into the new directory and run `npm start`.",
    )
    asyncio.run(create("create-my-app", options))
"""

from hatchery.config import ScaffoldOptions
from hatchery.models import (
    ComputedCaveat,
    HookContext,
    LiteralCaveat,
    ProjectContext,
    StageResult,
)
from hatchery.options import OptionSpec
from hatchery.package_manager import InstallError, PackageManager
from hatchery.pipeline import (
    ScaffoldError,
    ScaffoldPipeline,
    ScaffoldValidationError,
    create,
    run,
)
from hatchery.utils import ExternalToolError

__all__ = [
    # Entry points
    "create",
    "run",
    "ScaffoldPipeline",
    # Configuration
    "ScaffoldOptions",
    "OptionSpec",
    # Contexts
    "ProjectContext",
    "HookContext",
    "StageResult",
    "LiteralCaveat",
    "ComputedCaveat",
    "PackageManager",
    # Errors
    "ScaffoldError",
    "ScaffoldValidationError",
    "ExternalToolError",
    "InstallError",
]
