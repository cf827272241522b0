"""并发处理的工作单元：单个 SVG 文件的规范化流程。"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from svg_sprite.core.config import SpriteConfig
from svg_sprite.core.exceptions import OptimizationError, SourceReadError, SvgSpriteError
from svg_sprite.core.models import NormalizedIcon
from svg_sprite.processing.document import SvgDocument
from svg_sprite.processing.optimizer import Optimizer
from svg_sprite.utils.numbers import bytes_to_size

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class NormalizationTask:
    """描述单个 SVG 的处理任务。"""

    source_path: Path
    identifier: str
    namespace: str
    config: SpriteConfig
    optimizer: Optimizer
    reserved: frozenset[str] = frozenset()


async def run_task(task: NormalizationTask) -> NormalizedIcon:
    """读取、清理、规范化尺寸、添加留白并命名空间化，严格按顺序执行。"""

    LOGGER.debug("处理 SVG 图像 %s", task.source_path.name)

    raw_text = await read_source(task.source_path)
    cleaned = await _optimize(task, raw_text)

    document = SvgDocument.from_string(task.identifier, cleaned, task.config, path=task.source_path)
    document.normalize_dimensions()
    document.apply_padding()
    document.namespace_identifiers(task.namespace, task.reserved)

    width, height = document.dimensions()
    return NormalizedIcon(
        identifier=task.identifier,
        namespace=task.namespace,
        width=width,
        height=height,
        document=document,
        source_path=task.source_path,
    )


async def read_source(path: Path) -> str:
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"无法读取源文件: {exc}", path=path) from exc


async def _optimize(task: NormalizationTask, raw_text: str) -> str:
    try:
        cleaned = await task.optimizer.optimize(raw_text, task.config.clean_config)
    except SvgSpriteError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise OptimizationError(f"优化器 {task.optimizer.name} 处理失败: {exc}", path=task.source_path) from exc

    if not cleaned or not cleaned.strip():
        raise OptimizationError(f"优化器 {task.optimizer.name} 返回了空文档", path=task.source_path)

    if LOGGER.isEnabledFor(logging.DEBUG) and raw_text:
        saving = len(raw_text) - len(cleaned)
        LOGGER.debug(
            "已优化 %s（节省 %s / %d%%）",
            task.source_path.name,
            bytes_to_size(max(saving, 0)),
            round(100 * saving / len(raw_text)),
        )
    return cleaned
