"""环节一：文件扫描、标识推导与命令行入口测试。"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from svg_sprite.cli.main import app
from svg_sprite.core.exceptions import NamespaceCollisionError
from svg_sprite.core.scanner import collect_source_svgs, ensure_unique_identifiers, source_from_path


def write_svg(path: Path, size: int = 4) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}">'
        f'<rect width="{size}" height="{size}"/></svg>',
        encoding="utf-8",
    )
    return path


def test_directory_scan_filters_non_svg_files(tmp_path: Path) -> None:
    source = tmp_path / "icons"
    write_svg(source / "b.svg")
    write_svg(source / "A.SVG")
    (source / "notes.txt").write_text("hello")
    write_svg(source / "nested" / "deep.svg")

    sources = collect_source_svgs([source])

    assert [item.identifier for item in sources] == ["A", "b"]


def test_recursive_scan_builds_identifiers_from_relative_paths(tmp_path: Path) -> None:
    source = tmp_path / "icons"
    write_svg(source / "home.svg")
    write_svg(source / "nav" / "arrow.svg")
    write_svg(source / "nav" / "arrow~hover.svg")

    sources = collect_source_svgs([source], recursive=True)

    assert sorted(item.identifier for item in sources) == ["home", "nav-arrow", "nav-arrow~hover"]


def test_include_and_exclude_patterns(tmp_path: Path) -> None:
    source = tmp_path / "icons"
    for name in ("icon-a.svg", "icon-b.svg", "logo.svg", "icon-draft.svg"):
        write_svg(source / name)

    sources = collect_source_svgs([source], include_patterns=("icon-*",), exclude_patterns=("*draft*",))

    assert [item.identifier for item in sources] == ["icon-a", "icon-b"]


def test_duplicate_paths_are_collected_once(tmp_path: Path) -> None:
    path = write_svg(tmp_path / "one.svg")

    sources = collect_source_svgs([path, tmp_path])

    assert len(sources) == 1
    assert sources[0].identifier == "one"


def test_missing_paths_are_ignored(tmp_path: Path) -> None:
    assert collect_source_svgs([tmp_path / "nowhere"]) == []


def test_identifier_collision_raises(tmp_path: Path) -> None:
    first = source_from_path(tmp_path / "a" / "arrow.svg")
    second = source_from_path(tmp_path / "b" / "arrow.svg")

    assert ensure_unique_identifiers([first]) == ["arrow"]
    with pytest.raises(NamespaceCollisionError) as excinfo:
        ensure_unique_identifiers([first, second])

    assert excinfo.value.path == second.source_path
    assert excinfo.value.kind == "namespace-collision"


def test_cli_writes_sprite_and_stylesheet(tmp_path: Path) -> None:
    source = tmp_path / "icons"
    write_svg(source / "a.svg", 8)
    write_svg(source / "b.svg", 6)
    output = tmp_path / "output"

    result = CliRunner().invoke(
        app,
        [str(source), "--output", str(output), "--no-clean", "--layout", "horizontal", "--render", "css,scss"],
    )

    assert result.exit_code == 0, result.output
    assert (output / "svg" / "sprite.svg").is_file()
    assert (output / "sprite.css").is_file()
    assert (output / "sprite.scss").is_file()
    assert "14x8" in result.output


def test_cli_reports_failures_with_exit_code(tmp_path: Path) -> None:
    source = tmp_path / "icons"
    source.mkdir()
    (source / "broken.svg").write_text("<svg", encoding="utf-8")

    result = CliRunner().invoke(app, [str(source), "--output", str(tmp_path / "output"), "--no-clean"])

    assert result.exit_code == 1
    assert not (tmp_path / "output").exists()


def test_cli_include_and_exclude_patterns(tmp_path: Path) -> None:
    source = tmp_path / "icons"
    for name in ("icon-a.svg", "icon-b.svg", "icon-draft.svg", "logo.svg"):
        write_svg(source / name)
    output = tmp_path / "output"

    result = CliRunner().invoke(
        app,
        [str(source), "-o", str(output), "--no-clean", "--include", "icon-*", "--exclude", "*draft*"],
    )

    assert result.exit_code == 0, result.output
    css = (output / "sprite.css").read_text(encoding="utf-8")
    assert ".svg-icon-a" in css and ".svg-icon-b" in css
    assert "draft" not in css and "logo" not in css
