"""数值格式化工具函数。"""

from __future__ import annotations

import math
import re

LENGTH_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*(px)?\s*$")

SIZE_UNITS = ("KB", "MB", "GB", "TB")


def format_number(value: float) -> str:
    """整数值去掉小数部分，其余保留最短表示。"""

    if isinstance(value, float):
        value = round(value, 4)
        if value.is_integer():
            value = int(value)
    if value == 0:
        return "0"
    return str(value)


def add_unit(value: float) -> str:
    """非零坐标追加 px 单位，0 保持无单位。"""

    if value == 0:
        return "0"
    return f"{format_number(value)}px"


def parse_length(value: str | None) -> float | None:
    """解析 SVG 长度属性，仅接受无单位或 px；百分比等返回 None。"""

    if value is None:
        return None
    match = LENGTH_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if not math.isfinite(number):
        return None
    return number


def parse_view_box(value: str | None) -> tuple[float, float, float, float] | None:
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        min_x, min_y, width, height = (float(part) for part in parts)
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return min_x, min_y, width, height


def bytes_to_size(size: int, precision: int = 1) -> str:
    """将字节数转换为便于阅读的大小字符串。"""

    if size < 1024:
        return f"{size} B"

    value = float(size)
    for unit in SIZE_UNITS:
        value /= 1024
        if value < 1024 or unit == SIZE_UNITS[-1]:
            return f"{value:.{precision}f} {unit}"
    return f"{size} B"
