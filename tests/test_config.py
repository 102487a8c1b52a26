"""Tests for config file loading and merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from ebuild_resources import ResourceAction
from ebuild_resources.cli import Options
from ebuild_resources.config import (
    EbuildResourcesConfig,
    ResourceDecl,
    build_resource_spec,
    find_config_file,
    load_config,
    merge_cli_with_config,
)


def test_find_config_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text('workdir = "."\n')
    result = find_config_file(tmp_path)
    assert result == config_file


def test_find_config_dot_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "ebuild-resources.toml").write_text('workdir = "."\n')
    dot_config = tmp_path / ".ebuild-resources.toml"
    dot_config.write_text('workdir = "."\n')
    result = find_config_file(tmp_path)
    assert result == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.ebuild-resources]\nworkdir = "."\n')
    result = find_config_file(tmp_path)
    assert result == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    result = find_config_file(tmp_path)
    assert result is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text('workdir = "."\n')
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    result = find_config_file(subdir)
    assert result == config_file


def test_load_config_resources(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text(
        "[[resource]]\n"
        'directory = "src/main/resources"\n'
        'target-path = "META-INF"\n'
        'includes = ["*.xml", "app.properties"]\n'
        "filtering = true\n"
        "\n"
        "[[resource]]\n"
        'directory = "conf"\n'
        'excludes = ["*.bak"]\n'
    )
    config = load_config(config_file)
    assert config.workdir is None
    assert config.resources == [
        ResourceDecl(
            directory="src/main/resources",
            target_path="META-INF",
            includes=["*.xml", "app.properties"],
            filtering=True,
        ),
        ResourceDecl(directory="conf", excludes=["*.bak"]),
    ]


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text(
        '[tool.ebuild-resources]\nworkdir = "project"\n\n'
        '[[tool.ebuild-resources.resource]]\ndirectory = "res"\n'
    )
    config = load_config(config_file)
    assert config.workdir == (tmp_path / "project").resolve()
    assert config.resources == [ResourceDecl(directory="res")]


def test_load_config_absolute_workdir_kept(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    elsewhere = tmp_path / "elsewhere"
    config_file.write_text(f'workdir = "{elsewhere.as_posix()}"\n')
    config = load_config(config_file)
    assert config.workdir == tmp_path / "elsewhere"


def test_load_config_both_includes_and_excludes(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text(
        '[[resource]]\ndirectory = "res"\nincludes = ["a"]\nexcludes = ["b"]\n'
    )
    with pytest.raises(ValueError, match="both includes and excludes"):
        load_config(config_file)


def test_load_config_missing_directory(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text('[[resource]]\ntarget-path = "out"\n')
    with pytest.raises(ValueError, match="has no directory"):
        load_config(config_file)


def test_load_config_invalid_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text("[[resource]\n")
    with pytest.raises(ValueError, match="Invalid TOML"):
        load_config(config_file)


def test_load_config_ignores_unknown_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "ebuild-resources.toml"
    config_file.write_text('[[resource]]\ndirectory = "res"\nstrip-prefix = true\n')
    config = load_config(config_file)
    assert config.resources == [ResourceDecl(directory="res")]


def test_build_resource_spec_resolves_against_workdir(tmp_path: Path) -> None:
    res = tmp_path / "res"
    res.mkdir()
    (res / "a.txt").write_text("a")
    (res / "b.txt").write_text("b")

    decl = ResourceDecl(directory="res", target_path="out", excludes=["b.txt", "a.txt", "gone.txt"])
    spec = build_resource_spec(decl, tmp_path)
    assert spec.origin == res
    assert spec.action is ResourceAction.exclude
    assert spec.files == ("a.txt", "b.txt")
    assert spec.format(tmp_path) == "res:out:!a.txt|!b.txt"


def test_build_resource_spec_invalid_directory_is_absent(tmp_path: Path) -> None:
    spec = build_resource_spec(ResourceDecl(directory="missing", filtering=True), tmp_path)
    assert spec.origin is None
    assert spec.filtering is True
    assert spec.format(tmp_path) is None


def _make_options() -> Options:
    return Options(
        workdir=None,
        config=None,
        origin=None,
        target=None,
        include=None,
        exclude=None,
        filtering=False,
        variable=None,
        list_files=False,
        version=False,
    )


def test_merge_config_fills_unset_options(tmp_path: Path) -> None:
    config = EbuildResourcesConfig(workdir=tmp_path, resources=[ResourceDecl(directory="res")])
    options = merge_cli_with_config(_make_options(), config, set())
    assert options.workdir == tmp_path
    assert options.resources == [ResourceDecl(directory="res")]


def test_merge_explicit_cli_flag_wins(tmp_path: Path) -> None:
    options = _make_options()
    options.workdir = tmp_path / "cli"
    config = EbuildResourcesConfig(workdir=tmp_path / "config")
    merge_cli_with_config(options, config, {"workdir"})
    assert options.workdir == tmp_path / "cli"


def test_merge_without_config_is_noop() -> None:
    options = _make_options()
    assert merge_cli_with_config(options, None, set()) is options
    assert options.resources == []
