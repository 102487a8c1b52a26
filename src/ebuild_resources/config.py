"""
TOML-based config file loading for ebuild-resources.

Searches for `.ebuild-resources.toml`, `ebuild-resources.toml`, or
`pyproject.toml [tool.ebuild-resources]` walking up from the current directory.
Config values are merged with CLI flags using three-way precedence: explicit CLI
flags > config file > built-in defaults.

Example:

    workdir = "."

    [[resource]]
    directory = "src/main/resources"
    target-path = "META-INF"
    includes = ["**/*.properties"]
    filtering = true
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

from ebuild_resources.resource_spec import ResourceAction, ResourceSpec

TOOL_NAME = "ebuild-resources"


@dataclass
class ResourceDecl:
    """One `[[resource]]` table, as declared (nothing is checked against the filesystem)."""

    directory: str
    target_path: str | None = None
    includes: list[str] | None = None
    excludes: list[str] | None = None
    filtering: bool | None = None


@dataclass
class EbuildResourcesConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    workdir: Path | None = None
    resources: list[ResourceDecl] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [f".{TOOL_NAME}.toml", f"{TOOL_NAME}.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "target-path": "target_path",
}

_VALID_RESOURCE_FIELDS = {f.name for f in fields(ResourceDecl)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.ebuild-resources.toml` >
    `ebuild-resources.toml` > `pyproject.toml` (only if it has
    `[tool.ebuild-resources]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_tool_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_tool_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.ebuild-resources] section."""
    try:
        data = tomllib.loads(path.read_text())
        return TOOL_NAME in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> EbuildResourcesConfig:
    """
    Load an `EbuildResourcesConfig` from a TOML file. Supports standalone
    config files and `pyproject.toml` (extracts `[tool.ebuild-resources]`).
    A relative `workdir` is resolved against the config file's directory.

    Raises `ValueError` for malformed resource declarations.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get(TOOL_NAME, {})

    config = _parse_config_data(data)
    if config.workdir is not None and not config.workdir.is_absolute():
        config.workdir = (config_path.parent / config.workdir).resolve()
    return config


def _parse_config_data(data: dict[str, Any]) -> EbuildResourcesConfig:
    """Parse a TOML dict into EbuildResourcesConfig."""
    config = EbuildResourcesConfig()

    workdir = data.get("workdir")
    if workdir is not None:
        if not isinstance(workdir, str):
            raise ValueError(f"workdir must be a string, got {workdir!r}")
        config.workdir = Path(workdir)

    raw_resources = data.get("resource")
    if raw_resources is not None:
        if not isinstance(raw_resources, list):
            raise ValueError("resource must be an array of tables ([[resource]])")
        config.resources = [
            _parse_resource(cast(dict[str, Any], item), index)
            for index, item in enumerate(cast(list[Any], raw_resources))
        ]

    return config


def _parse_resource(item: dict[str, Any], index: int) -> ResourceDecl:
    """Parse one `[[resource]]` table, mapping kebab-case keys to snake_case."""
    if not isinstance(item, dict):
        raise ValueError(f"resource #{index + 1} must be a table")

    mapped: dict[str, Any] = {}
    for key, value in item.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _VALID_RESOURCE_FIELDS:
            mapped[snake_key] = value

    if "directory" not in mapped:
        raise ValueError(f"resource #{index + 1} has no directory")
    if not isinstance(mapped["directory"], str):
        raise ValueError(f"resource #{index + 1}: directory must be a string")
    if mapped.get("includes") is not None and mapped.get("excludes") is not None:
        raise ValueError(
            f"resource #{index + 1} ({mapped['directory']}) declares both includes and excludes"
        )
    for list_key in ("includes", "excludes"):
        value = mapped.get(list_key)
        if value is not None and not (
            isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value))
        ):
            raise ValueError(f"resource #{index + 1}: {list_key} must be a list of strings")

    return ResourceDecl(**mapped)


def build_resource_spec(decl: ResourceDecl, workdir: Path) -> ResourceSpec:
    """
    Build a `ResourceSpec` from a declaration, resolving a relative directory
    against `workdir`. Invalid directories and missing files are dropped silently,
    as `ResourceSpec` does.
    """
    origin = Path(decl.directory)
    if not origin.is_absolute():
        origin = workdir / origin

    if decl.excludes is not None:
        action, entries = ResourceAction.exclude, decl.excludes
    else:
        action, entries = ResourceAction.include, decl.includes or []

    return ResourceSpec(
        origin=origin,
        target=decl.target_path,
        files=entries,
        action=action,
        filtering=bool(decl.filtering),
    )


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: EbuildResourcesConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(EbuildResourcesConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
