"""处理流水线：并发规范化、汇合、排序、布局与精灵图组装。"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from svg_sprite.core.config import SpriteConfig
from svg_sprite.core.exceptions import ConfigurationError
from svg_sprite.core.models import (
    IconRecord,
    NormalizedIcon,
    SourceSvg,
    SpriteData,
    SpriteOutcome,
    SpriteResult,
    utc_now,
)
from svg_sprite.core.output_manager import OutputManager
from svg_sprite.core.progress import ProgressUpdate
from svg_sprite.core.scanner import ensure_unique_identifiers, source_from_path
from svg_sprite.processing.document import SVG_NS, XLINK_NS
from svg_sprite.processing.layout import place
from svg_sprite.processing.namespace import NamespaceAllocator
from svg_sprite.processing.optimizer import Optimizer, build_optimizer
from svg_sprite.processing.render import render_target, resolve_render_targets
from svg_sprite.processing.selectors import (
    collect_pseudo_bases,
    derive_dimension_selectors,
    derive_selectors,
    has_pseudo_sibling,
)
from svg_sprite.processing.worker import NormalizationTask, run_task
from svg_sprite.utils.numbers import add_unit, format_number

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]
ConfigLike = Union[SpriteConfig, Mapping[str, Any], None]
SourceLike = Union[SourceSvg, Path, str]


def resolve_config(config: ConfigLike) -> SpriteConfig:
    """接受 SpriteConfig 或字典配置，统一校验为 SpriteConfig。"""

    if isinstance(config, SpriteConfig):
        return config
    if config is None or isinstance(config, Mapping):
        return SpriteConfig.from_mapping(config)
    raise ConfigurationError(f"无法识别的配置类型: {type(config).__name__}")


async def compose(
    sources: Iterable[SourceLike],
    config: ConfigLike = None,
    *,
    optimizer: Optional[Optimizer] = None,
    progress_callback: ProgressCallback = None,
    generated_at: Optional[datetime] = None,
) -> SpriteResult:
    """合成入口：任何一个文件失败都会使整体失败，不会产出部分结果。"""

    config = resolve_config(config)
    optimizer = optimizer or build_optimizer(config)
    # 命名空间按标识顺序分配，与输入顺序无关
    source_list = sorted((_as_source(source) for source in sources), key=lambda source: source.identifier)
    identifiers = ensure_unique_identifiers(source_list)
    total = len(source_list)
    LOGGER.info("开始合成 %d 个 SVG 文件", total)

    if total == 0:
        _emit_progress(progress_callback, completed=0, total=0, message="没有需要合成的 SVG 文件", status="done")
        return assemble([], config, generated_at=generated_at)

    allocator = NamespaceAllocator(total)
    # 图标标识是各文档根节点在精灵图中的 id，内部 id 不得与之重复
    reserved = frozenset(identifiers)
    tasks = [
        NormalizationTask(
            source_path=source.source_path,
            identifier=identifier,
            namespace=allocator.allocate(index),
            config=config,
            optimizer=optimizer,
            reserved=reserved,
        )
        for index, (source, identifier) in enumerate(zip(source_list, identifiers))
    ]

    icons = await _run_tasks(tasks, progress_callback)
    result = assemble(icons, config, generated_at=generated_at)
    _emit_progress(progress_callback, total, total, "合成完成", status="done")
    return result


async def _run_tasks(tasks: Sequence[NormalizationTask], progress_callback: ProgressCallback) -> list[NormalizedIcon]:
    """并发执行全部任务并等待汇合；首个失败直接向上抛出。"""

    total = len(tasks)
    futures = [asyncio.ensure_future(run_task(task)) for task in tasks]
    icons: list[NormalizedIcon] = []

    try:
        for next_done in asyncio.as_completed(futures):
            icon = await next_done
            icons.append(icon)
            _emit_progress(progress_callback, len(icons), total, f"完成 {icon.identifier}")
    except BaseException:
        # 其余任务在后台自行结束，结果丢弃
        for future in futures:
            if future.done():
                _discard_result(future)
            else:
                future.add_done_callback(_discard_result)
        _emit_progress(progress_callback, len(icons), total, "合成失败", status="failed")
        raise

    return icons


def _discard_result(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


def assemble(
    icons: Sequence[NormalizedIcon],
    config: SpriteConfig,
    *,
    generated_at: Optional[datetime] = None,
) -> SpriteResult:
    """按标识排序后执行布局折叠，生成图标记录与精灵图标记。"""

    ordered = sorted(icons, key=lambda icon: icon.identifier)
    separator = config.pseudo_separator
    pseudo_bases = collect_pseudo_bases((icon.identifier for icon in ordered), separator)
    layout = place([(icon.width, icon.height) for icon in ordered], config.layout)

    records: list[IconRecord] = []
    fragments: list[str] = []
    last_index = len(ordered) - 1

    for index, (icon, placement) in enumerate(zip(ordered, layout.placements)):
        icon.document.set_root_attributes({"id": icon.identifier, "x": placement.x, "y": placement.y})
        fragment = icon.document.serialize(standalone=False)
        fragments.append(fragment)

        selectors = derive_selectors(
            icon.identifier,
            separator,
            config.class_prefix,
            has_pseudo_sibling(icon.identifier, separator, pseudo_bases),
        )
        records.append(
            IconRecord(
                name=icon.identifier,
                width=icon.width - 2 * config.padding,
                height=icon.height - 2 * config.padding,
                last=index == last_index,
                selectors=tuple(selectors),
                position_x=placement.offset_x,
                position_y=placement.offset_y,
                position=f"{add_unit(placement.offset_x)} {add_unit(placement.offset_y)}",
                dimension_selectors=tuple(derive_dimension_selectors(icon.identifier, separator, config.class_prefix)),
                outer_width=icon.width,
                outer_height=icon.height,
                data=fragment,
            )
        )

    data = SpriteData(
        canvas_width=layout.canvas_width,
        canvas_height=layout.canvas_height,
        icons=tuple(records),
        common=config.common_class,
        prefix=config.selector_prefix,
        sprite=config.sprite_path,
        include_dimensions=config.include_dimensions,
        padding=config.padding,
        generated_at=generated_at or utc_now(),
    )
    svg = build_sprite_markup(layout.canvas_width, layout.canvas_height, fragments)
    return SpriteResult(svg=svg, data=data)


def build_sprite_markup(width: float, height: float, fragments: Sequence[str]) -> str:
    """将所有片段包裹进一个携带画布尺寸与 viewBox 的根节点。"""

    w, h = format_number(width), format_number(height)
    opening = (
        f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" '
        f'width="{w}" height="{h}" viewBox="0 0 {w} {h}">'
    )
    return "".join([opening, *fragments, "</svg>"])


async def create_sprite(
    sources: Iterable[SourceLike],
    config: ConfigLike,
    output_dir: Path,
    *,
    optimizer: Optional[Optimizer] = None,
    progress_callback: ProgressCallback = None,
) -> SpriteOutcome:
    """合成精灵图、渲染模板并写入输出目录。合成失败时不写入任何文件。"""

    config = resolve_config(config)
    output_dir = Path(output_dir).expanduser().resolve()
    targets = resolve_render_targets(config, output_dir)

    result = await compose(sources, config, optimizer=optimizer, progress_callback=progress_callback)

    context = result.data.to_template_context()
    rendered = [(target, render_target(target, context)) for target in targets]

    manager = OutputManager(output_dir)
    sprite_path = manager.sprite_destination(config.sprite_path)
    contents = {sprite_path: result.svg}
    for target, text in rendered:
        if text:
            contents[target.dest] = text
    files = manager.write_files(contents)

    return SpriteOutcome(sprite_path=sprite_path, files=files, data=result.data)


def _as_source(source: SourceLike) -> SourceSvg:
    if isinstance(source, SourceSvg):
        return source
    return source_from_path(Path(source))


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
    status: str = "running",
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message, status=status))
