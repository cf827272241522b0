"""命令行入口。"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from svg_sprite.core.config import LAYOUTS, SpriteConfig
from svg_sprite.core.exceptions import SvgSpriteError
from svg_sprite.core.progress import ProgressUpdate
from svg_sprite.core.scanner import collect_source_svgs
from svg_sprite.processing.pipeline import create_sprite
from svg_sprite.utils.logging import setup_logging, verbosity_to_level
from svg_sprite.utils.numbers import bytes_to_size, format_number

app = typer.Typer(help="将多个 SVG 图标合成为一张精灵图，并生成 CSS 等样式文件。")

LOGGER = logging.getLogger(__name__)


def _parse_render(value: str) -> dict[str, bool]:
    formats = [item.strip().lower() for item in value.split(",") if item.strip()]
    if not formats:
        raise typer.BadParameter("至少需要一个渲染格式，例如 css")
    return {item: True for item in formats}


def _build_progress_callback(progress: Progress, verbosity: int):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("合成 SVG", total=update.total)
        progress.update(task_id, completed=update.completed)
        if update.message and verbosity > 1:
            progress.log(update.message)

    return callback


@app.command("run")
def run_cli(  # noqa: PLR0913
    source: List[Path] = typer.Argument(..., help="源 SVG 文件或目录，可指定多个"),
    output: Path = typer.Option(..., "--output", "-o", help="输出目录"),
    layout: str = typer.Option("vertical", "--layout", "-l", help=f"布局方式：{' / '.join(LAYOUTS)}"),
    padding: int = typer.Option(0, "--padding", "-p", help="每个图标四周的留白（像素）"),
    prefix: str = typer.Option("svg", "--prefix", help="CSS 类名前缀"),
    common: Optional[str] = typer.Option(None, "--common", help="所有图标共用的 CSS 类名"),
    max_width: int = typer.Option(1000, "--max-width", help="单个图标最大宽度"),
    max_height: int = typer.Option(1000, "--max-height", help="单个图标最大高度"),
    pseudo: str = typer.Option("~", "--pseudo", help="文件名中表示伪类的分隔符"),
    dims: bool = typer.Option(False, "--dims/--no-dims", help="是否生成尺寸类选择器"),
    sprite_dir: str = typer.Option("svg", "--sprite-dir", help="精灵图所在的子目录"),
    sprite_name: str = typer.Option("sprite", "--sprite-name", help="精灵图文件名（不含扩展名）"),
    render: str = typer.Option("css", "--render", "-r", help="渲染格式，逗号分隔：css,scss,less,inline"),
    clean: bool = typer.Option(True, "--clean/--no-clean", help="是否使用 scour 清理 SVG"),
    recursive: bool = typer.Option(False, "--recursive/--no-recursive", help="是否递归扫描目录"),
    include: Optional[List[str]] = typer.Option(None, "--include", help="只收集匹配的文件名（glob），可重复"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", help="跳过匹配的文件名（glob），可重复"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="输出更详细的日志，可叠加 -vvv"),
) -> None:
    """执行精灵图合成。"""

    setup_logging(verbosity_to_level(verbose))

    try:
        config = SpriteConfig.from_mapping(
            {
                "sprite_directory": sprite_dir,
                "sprite_name": sprite_name,
                "class_prefix": prefix,
                "common_class": common,
                "max_width": max_width,
                "max_height": max_height,
                "padding": padding,
                "layout": layout,
                "pseudo_separator": pseudo,
                "include_dimensions": dims,
                "verbosity": verbose,
                "render": _parse_render(render),
                "clean_with": "scour" if clean else None,
            }
        )
        sources = collect_source_svgs(
            source,
            recursive=recursive,
            include_patterns=tuple(include or ()),
            exclude_patterns=tuple(exclude or ()),
        )
        LOGGER.info("发现 %d 个 SVG 文件", len(sources))
        output_dir = output.expanduser().resolve()

        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
        )
        with progress:
            outcome = asyncio.run(
                create_sprite(
                    sources,
                    config,
                    output_dir,
                    progress_callback=_build_progress_callback(progress, config.verbosity),
                )
            )
    except SvgSpriteError as exc:
        location = f" [{exc.path}]" if exc.path else ""
        typer.echo(f"合成失败（{exc.kind}）{location}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc

    data = outcome.data
    canvas = f"{format_number(data.canvas_width)}x{format_number(data.canvas_height)}"
    typer.echo(f"合成完成：{len(data.icons)} 个图标，画布 {canvas}。")
    for path, size in outcome.files.items():
        typer.echo(f"  {path} ({bytes_to_size(size)})")


if __name__ == "__main__":
    app()
