"""布局引擎：按排序后的顺序计算每个图标的位置与画布尺寸。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from svg_sprite.core.config import DEFAULT_LAYOUT, LAYOUTS
from svg_sprite.core.models import Placement

Size = Tuple[float, float]


@dataclass(slots=True, frozen=True)
class LayoutResult:
    """布局折叠的结果。"""

    placements: tuple[Placement, ...]
    canvas_width: float
    canvas_height: float


def place(sizes: Sequence[Size], layout: str = DEFAULT_LAYOUT) -> LayoutResult:
    """依次放置图标；未知布局按 vertical 处理。

    - vertical: 根节点 y 为累计高度，宽度取最大值，高度向上取整累加。
    - horizontal: 与 vertical 对称。
    - diagonal: 宽高均累加，画布只有对角线被占用。
    """

    if layout not in LAYOUTS:
        layout = DEFAULT_LAYOUT

    canvas_width: float = 0
    canvas_height: float = 0
    placements: list[Placement] = []

    for width, height in sizes:
        if layout == "horizontal":
            placements.append(Placement(x=canvas_width, y=None, offset_x=-canvas_width, offset_y=0))
            canvas_width = math.ceil(canvas_width + width)
            canvas_height = max(canvas_height, height)
        elif layout == "diagonal":
            placements.append(
                Placement(x=canvas_width, y=canvas_height, offset_x=-canvas_width, offset_y=-canvas_height)
            )
            canvas_width = math.ceil(canvas_width + width)
            canvas_height = math.ceil(canvas_height + height)
        else:
            placements.append(Placement(x=None, y=canvas_height, offset_x=0, offset_y=-canvas_height))
            canvas_width = max(canvas_width, width)
            canvas_height = math.ceil(canvas_height + height)

    return LayoutResult(placements=tuple(placements), canvas_width=canvas_width, canvas_height=canvas_height)
