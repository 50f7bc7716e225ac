"""hatchery scaffolder -- template discovery, tree rendering and licenses.

Quick usage::

    from hatchery.scaffolder import copy_template, list_available_templates

    names = list_available_templates("/path/to/templates", prefix="template-")
    await copy_template(
        project_dir="/tmp/my-app",
        template_dir="/path/to/templates/template-default",
        view={"name": "my-app", "year": 2026},
    )
"""

from hatchery.scaffolder.licenses import (
    LICENSE_FILE,
    LicenseError,
    LicenseText,
    available_licenses,
    make_license,
    write_license,
)
from hatchery.scaffolder.templates import (
    BUNDLED_PROJECT_TEMPLATES,
    TemplateRenderer,
    copy_template,
    list_available_templates,
    resolve_template_dir,
)

__all__ = [
    # Templates
    "BUNDLED_PROJECT_TEMPLATES",
    "TemplateRenderer",
    "copy_template",
    "list_available_templates",
    "resolve_template_dir",
    # Licenses
    "LICENSE_FILE",
    "LicenseError",
    "LicenseText",
    "available_licenses",
    "make_license",
    "write_license",
]
