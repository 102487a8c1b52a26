#!/usr/bin/env python3
"""
ebuild-resources: Render Maven resource sets as java-pkg-simple JAVA_RESOURCE_DIRS entries

Common usage:
  ebuild-resources
  ebuild-resources --variable JAVA_RESOURCE_DIRS
  ebuild-resources --origin src/main/resources --target META-INF --include '*.xml'
  ebuild-resources --list-files

Resource sets are read from `.ebuild-resources.toml`, `ebuild-resources.toml` or
`pyproject.toml [tool.ebuild-resources]` (searched upwards from the current
directory), plus at most one set given with --origin on the command line.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from ebuild_resources.config import (
    ResourceDecl,
    build_resource_spec,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from ebuild_resources.recipe import render_resource_dirs
from ebuild_resources.resource_spec import ResourceSpec, WorkdirContext


@dataclass
class Options:
    """Command-line options for the ebuild-resources tool."""

    workdir: Path | None
    config: str | None
    # Ad-hoc resource set
    origin: str | None
    target: str | None
    include: list[str] | None
    exclude: list[str] | None
    filtering: bool
    # Output
    variable: str | None
    list_files: bool
    version: bool
    # Filled from the config file
    resources: list[ResourceDecl] = field(default_factory=list)


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which config-backed flags the user explicitly passed.
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="ebuild-resources",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--workdir",
        type=Path,
        default=None,
        metavar="DIR",
        help="Project root that origin directories are made relative to "
        "(default: workdir from the config file, else the current directory)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="FILE",
        help="Config file to use instead of searching for one",
    )
    # Ad-hoc resource set
    parser.add_argument(
        "--origin",
        type=str,
        default=None,
        metavar="DIR",
        help="Resource directory of an extra resource set, relative to the workdir",
    )
    parser.add_argument(
        "--target",
        type=str,
        default=None,
        metavar="DIR",
        help="Target directory of the extra resource set, relative to the class output root",
    )
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        metavar="PATTERN",
        help="File name or pattern to include from --origin. Can be repeated",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="File name or pattern to exclude from --origin. Can be repeated",
    )
    parser.add_argument(
        "--filtering",
        action="store_true",
        help="Mark the extra resource set as filtered (prints a warning; not supported)",
    )
    # Output
    parser.add_argument(
        "--variable",
        type=str,
        default=None,
        metavar="NAME",
        help="Print a bash array assignment to NAME instead of one entry per line",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the files each resource set selects, relative to the workdir",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags: set[str] = set()
    if opts.workdir is not None:
        explicit_flags.add("workdir")

    return (
        Options(
            workdir=opts.workdir,
            config=opts.config,
            origin=opts.origin,
            target=opts.target,
            include=opts.include,
            exclude=opts.exclude,
            filtering=opts.filtering,
            variable=opts.variable,
            list_files=opts.list_files,
            version=opts.version,
        ),
        explicit_flags,
    )


def _cli_resource(options: Options) -> ResourceDecl | None:
    """The resource set declared with --origin, if any."""
    if options.origin is None:
        if options.target is not None or options.include or options.exclude or options.filtering:
            raise ValueError("--target, --include, --exclude and --filtering require --origin")
        return None
    if options.include and options.exclude:
        raise ValueError("--include and --exclude cannot be combined")
    return ResourceDecl(
        directory=options.origin,
        target_path=options.target,
        includes=options.include,
        excludes=options.exclude,
        filtering=options.filtering,
    )


def _build_specs(options: Options, workdir: Path) -> list[ResourceSpec]:
    decls = list(options.resources)
    extra = _cli_resource(options)
    if extra is not None:
        decls.append(extra)
    if not decls:
        raise ValueError(
            "No resource sets declared. Add [[resource]] tables to a config file"
            " or use --origin."
        )
    return [build_resource_spec(decl, workdir) for decl in decls]


def _list_files(specs: list[ResourceSpec], workdir: Path) -> None:
    for spec in specs:
        if spec.origin is None:
            continue
        for rel in spec.matched_files():
            shown = os.path.relpath((spec.origin / rel).absolute(), workdir.absolute())
            print(Path(shown).as_posix())


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the ebuild-resources CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("ebuild-resources")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    try:
        # Load and merge config file settings
        if options.config is not None:
            config_path: Path | None = Path(options.config)
        else:
            config_path = find_config_file(Path.cwd())
        if config_path:
            config = load_config(config_path)
            merge_cli_with_config(options, config, explicit_flags)

        workdir = options.workdir if options.workdir is not None else Path.cwd()
        specs = _build_specs(options, workdir)

        if options.list_files:
            _list_files(specs, workdir)
            return 0

        context = WorkdirContext(root=workdir, output=sys.stderr)
        values = [spec.serialize(context) for spec in specs]

        if options.variable is not None:
            print(render_resource_dirs(values, options.variable))
        else:
            for value in values:
                if value is not None:
                    print(value)
    except ValueError as e:
        # Malformed config or conflicting options.
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # Catch other potential file errors.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
