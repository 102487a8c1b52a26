"""
Render Maven resource sets as `java-pkg-simple` `JAVA_RESOURCE_DIRS` entries.

Usage::

    from ebuild_resources import ResourceAction, ResourceSpec, WorkdirContext

    spec = ResourceSpec(origin="src/main/resources", target="META-INF")
    spec.add_files(["*.properties"])
    spec.set_action(ResourceAction.exclude)
    value = spec.serialize(WorkdirContext(root=Path.cwd()))
"""

from ebuild_resources.recipe import DEFAULT_VARIABLE, render_resource_dirs
from ebuild_resources.resource_spec import (
    FILTERING_WARNING,
    MutationResult,
    ResourceAction,
    ResourceSpec,
    WorkdirContext,
)

__all__ = [
    "DEFAULT_VARIABLE",
    "FILTERING_WARNING",
    "MutationResult",
    "ResourceAction",
    "ResourceSpec",
    "WorkdirContext",
    "render_resource_dirs",
]
