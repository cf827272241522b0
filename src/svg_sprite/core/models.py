"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional

from svg_sprite.utils.numbers import format_number

if TYPE_CHECKING:
    from svg_sprite.processing.document import SvgDocument


@dataclass(slots=True)
class SourceSvg:
    """扫描阶段得到的源 SVG 信息。"""

    source_path: Path
    root: Path
    relative_path: Path

    @property
    def identifier(self) -> str:
        """由相对路径推导出的图标标识，例如 ``nav/arrow.svg`` -> ``nav-arrow``。"""

        parts = list(self.relative_path.parts)
        name = parts[-1]
        if name.lower().endswith(".svg"):
            name = name[: -len(".svg")]
        return "-".join([*parts[:-1], name])


@dataclass(slots=True)
class NormalizedIcon:
    """单个文件规范化之后的结果，仅在流水线内部流转。"""

    identifier: str
    namespace: str
    width: float
    height: float
    document: "SvgDocument"
    source_path: Optional[Path] = None


@dataclass(slots=True, frozen=True)
class Placement:
    """布局引擎为单个图标分配的位置。

    ``x``/``y`` 为图标根节点在画布中的坐标（未设置的轴为 ``None``），
    ``offset_x``/``offset_y`` 为取反后的背景偏移量。
    """

    x: Optional[float]
    y: Optional[float]
    offset_x: float
    offset_y: float


@dataclass(slots=True, frozen=True)
class SelectorDescriptor:
    """CSS 选择器描述。expression 转义了冒号，raw 保持原样。"""

    expression: str
    raw: str
    first: bool
    last: bool

    def to_context(self) -> dict[str, Any]:
        return {"expression": self.expression, "raw": self.raw, "first": self.first, "last": self.last}


@dataclass(slots=True, frozen=True)
class IconRecord:
    """模板渲染所需的单个图标记录。"""

    name: str
    width: float
    height: float
    last: bool
    selectors: tuple[SelectorDescriptor, ...]
    position_x: float
    position_y: float
    position: str
    dimension_selectors: tuple[SelectorDescriptor, ...]
    outer_width: float
    outer_height: float
    data: str

    def to_context(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": format_number(self.width),
            "height": format_number(self.height),
            "last": self.last,
            "selector": [item.to_context() for item in self.selectors],
            "positionX": format_number(self.position_x),
            "positionY": format_number(self.position_y),
            "position": self.position,
            "dimensions": {
                "selector": [item.to_context() for item in self.dimension_selectors],
                "width": format_number(self.outer_width),
                "height": format_number(self.outer_height),
            },
            "data": self.data,
        }


def _invert(text: str, render: Callable[[str], str]) -> str:
    """Mustache lambda：将渲染出的数值取反。"""

    rendered = render(text).strip()
    if not rendered:
        return rendered
    return format_number(-float(rendered))


@dataclass(slots=True, frozen=True)
class SpriteData:
    """合成完成后冻结的数据模型，交给模板渲染。"""

    canvas_width: float
    canvas_height: float
    icons: tuple[IconRecord, ...]
    common: Optional[str]
    prefix: str
    sprite: str
    include_dimensions: bool
    padding: int
    generated_at: datetime

    def to_template_context(self) -> dict[str, Any]:
        """转换为模板使用的字段名。"""

        return {
            "common": self.common,
            "prefix": self.prefix,
            "sprite": self.sprite,
            "dims": self.include_dimensions,
            "padding": self.padding,
            "swidth": format_number(self.canvas_width),
            "sheight": format_number(self.canvas_height),
            "svg": [icon.to_context() for icon in self.icons],
            "date": format_datetime(self.generated_at.astimezone(timezone.utc), usegmt=True),
            "invert": _invert,
        }


@dataclass(slots=True, frozen=True)
class SpriteResult:
    """合成结果：精灵图标记与数据模型。"""

    svg: str
    data: SpriteData


@dataclass(slots=True)
class SpriteOutcome:
    """完整任务（合成、渲染、写入）的产出。"""

    sprite_path: Path
    files: dict[Path, int]
    data: SpriteData


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
