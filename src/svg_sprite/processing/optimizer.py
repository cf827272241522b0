"""SVG 清理/压缩步骤的实现。"""

from __future__ import annotations

import asyncio
import logging
from types import SimpleNamespace
from typing import Any, Mapping, Protocol

from scour import scour

from svg_sprite.core.config import SpriteConfig
from svg_sprite.core.exceptions import ConfigurationError

LOGGER = logging.getLogger(__name__)

# 精灵图内的 ID 会重新命名空间化，这里不做缩短。
SCOUR_DEFAULTS: dict[str, Any] = {
    "strip_comments": True,
    "remove_metadata": True,
    "strip_xml_prolog": True,
    "shorten_ids": False,
    "viewboxing": False,
    "indent_type": "none",
    "newlines": False,
}


class Optimizer(Protocol):
    """优化器接口：输入原始 SVG 文本，返回清理后的文本。"""

    name: str

    async def optimize(self, raw_text: str, clean_config: Mapping[str, Any]) -> str: ...


class ScourOptimizer:
    """基于 scour 的优化器，在工作线程中运行。"""

    name = "scour"

    async def optimize(self, raw_text: str, clean_config: Mapping[str, Any]) -> str:
        return await asyncio.to_thread(self._optimize, raw_text, clean_config)

    @staticmethod
    def _optimize(raw_text: str, clean_config: Mapping[str, Any]) -> str:
        options = SimpleNamespace(**{**SCOUR_DEFAULTS, **clean_config})
        return scour.scourString(raw_text, options)


class PassthroughOptimizer:
    """不做任何清理，原样返回。"""

    name = "none"

    async def optimize(self, raw_text: str, clean_config: Mapping[str, Any]) -> str:
        return raw_text


OPTIMIZERS = {
    "scour": ScourOptimizer,
}


def build_optimizer(config: SpriteConfig) -> Optimizer:
    """根据 clean_with 配置创建优化器。"""

    if config.clean_with is None:
        return PassthroughOptimizer()

    factory = OPTIMIZERS.get(config.clean_with.lower())
    if factory is None:
        raise ConfigurationError(f"未知的优化器: {config.clean_with}")
    LOGGER.debug("使用优化器 %s", config.clean_with)
    return factory()
