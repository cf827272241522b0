"""从 SVG 几何元素推导包围盒，用于未声明尺寸的文档。"""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional, Tuple

import numpy as np
from lxml import etree

from svg_sprite.utils.numbers import parse_length

Box = Tuple[float, float, float, float]

NUMBER_RE = re.compile(r"[-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?")
TRANSFORM_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")
PATH_TOKEN_RE = re.compile(r"([MmZzLlHhVvCcSsQqTtAa])|([-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?)")

PATH_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

# 这些元素本身不直接渲染
NON_RENDERED = {
    "defs",
    "clipPath",
    "mask",
    "pattern",
    "symbol",
    "marker",
    "linearGradient",
    "radialGradient",
    "filter",
    "style",
    "script",
    "title",
    "desc",
    "metadata",
}


def bounding_box(root: etree._Element) -> Optional[Box]:
    """计算根节点下所有可见几何元素的包围盒 ``(min_x, min_y, width, height)``。"""

    collected: list[np.ndarray] = []
    _collect(root, np.identity(3), collected)
    if not collected:
        return None

    points = np.vstack(collected)
    min_x, min_y = points.min(axis=0)
    max_x, max_y = points.max(axis=0)
    width = float(max_x - min_x)
    height = float(max_y - min_y)
    if width <= 0 or height <= 0:
        return None
    return float(min_x), float(min_y), width, height


def parse_transform(value: Optional[str]) -> np.ndarray:
    """将 transform 属性解析为 3x3 仿射矩阵。"""

    matrix = np.identity(3)
    if not value:
        return matrix
    for name, args in TRANSFORM_RE.findall(value):
        numbers = [float(item) for item in NUMBER_RE.findall(args)]
        matrix = matrix @ _transform_matrix(name, numbers)
    return matrix


def _transform_matrix(name: str, args: list[float]) -> np.ndarray:
    if name == "matrix" and len(args) == 6:
        a, b, c, d, e, f = args
        return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]])
    if name == "translate" and args:
        tx = args[0]
        ty = args[1] if len(args) > 1 else 0.0
        return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])
    if name == "scale" and args:
        sx = args[0]
        sy = args[1] if len(args) > 1 else sx
        return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])
    if name == "rotate" and args:
        angle = math.radians(args[0])
        cos, sin = math.cos(angle), math.sin(angle)
        rotation = np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])
        if len(args) >= 3:
            cx, cy = args[1], args[2]
            return _transform_matrix("translate", [cx, cy]) @ rotation @ _transform_matrix("translate", [-cx, -cy])
        return rotation
    if name == "skewX" and args:
        return np.array([[1.0, math.tan(math.radians(args[0])), 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    if name == "skewY" and args:
        return np.array([[1.0, 0.0, 0.0], [math.tan(math.radians(args[0])), 1.0, 0.0], [0.0, 0.0, 1.0]])
    return np.identity(3)


def _collect(element: etree._Element, matrix: np.ndarray, collected: list[np.ndarray]) -> None:
    for child in element.iterchildren(tag=etree.Element):
        name = etree.QName(child).localname
        if name in NON_RENDERED:
            continue
        local = matrix @ parse_transform(child.get("transform"))
        points = _shape_points(name, child)
        if points:
            collected.append(_apply(local, points))
        _collect(child, local, collected)


def _apply(matrix: np.ndarray, points: list[tuple[float, float]]) -> np.ndarray:
    array = np.asarray(points, dtype=np.float64)
    homogeneous = np.hstack([array, np.ones((len(array), 1))])
    return (homogeneous @ matrix.T)[:, :2]


def _length(element: etree._Element, name: str) -> float:
    value = parse_length(element.get(name))
    return value if value is not None else 0.0


def _shape_points(name: str, element: etree._Element) -> list[tuple[float, float]]:
    if name in {"rect", "image", "use", "foreignObject"}:
        x, y = _length(element, "x"), _length(element, "y")
        width, height = _length(element, "width"), _length(element, "height")
        if width <= 0 or height <= 0:
            return []
        return [(x, y), (x + width, y), (x, y + height), (x + width, y + height)]

    if name in {"circle", "ellipse"}:
        cx, cy = _length(element, "cx"), _length(element, "cy")
        if name == "circle":
            rx = ry = _length(element, "r")
        else:
            rx, ry = _length(element, "rx"), _length(element, "ry")
        if rx <= 0 or ry <= 0:
            return []
        return [(cx - rx, cy - ry), (cx + rx, cy - ry), (cx - rx, cy + ry), (cx + rx, cy + ry)]

    if name == "line":
        return [
            (_length(element, "x1"), _length(element, "y1")),
            (_length(element, "x2"), _length(element, "y2")),
        ]

    if name in {"polyline", "polygon"}:
        numbers = [float(item) for item in NUMBER_RE.findall(element.get("points", ""))]
        return list(zip(numbers[0::2], numbers[1::2]))

    if name == "path":
        return list(path_points(element.get("d", "")))

    return []


def path_points(data: str) -> Iterable[tuple[float, float]]:
    """遍历路径数据，产出端点与控制点（包含控制点，结果偏保守）。"""

    tokens = PATH_TOKEN_RE.findall(data or "")
    current_x = current_y = 0.0
    start_x = start_y = 0.0
    command: Optional[str] = None
    args: list[float] = []

    def flush(cmd: str, values: list[float]) -> Iterable[tuple[float, float]]:
        nonlocal current_x, current_y, start_x, start_y
        upper = cmd.upper()
        relative = cmd.islower()
        base_x, base_y = (current_x, current_y) if relative else (0.0, 0.0)

        if upper == "H":
            current_x = values[0] + (current_x if relative else 0.0)
            yield current_x, current_y
            return
        if upper == "V":
            current_y = values[0] + (current_y if relative else 0.0)
            yield current_x, current_y
            return
        if upper == "A":
            current_x, current_y = values[5] + base_x, values[6] + base_y
            yield current_x, current_y
            return

        pairs = list(zip(values[0::2], values[1::2]))
        for px, py in pairs:
            yield px + base_x, py + base_y
        current_x, current_y = pairs[-1][0] + base_x, pairs[-1][1] + base_y
        if upper == "M":
            start_x, start_y = current_x, current_y

    for letter, number in tokens:
        if letter:
            command = letter
            args = []
            if letter in "Zz":
                current_x, current_y = start_x, start_y
            continue
        if command is None or command in "Zz":
            continue
        args.append(float(number))
        arity = PATH_ARITY[command.upper()]
        if len(args) == arity:
            yield from flush(command, args)
            args = []
            # M/m 之后的隐式坐标按 L/l 处理
            if command == "M":
                command = "L"
            elif command == "m":
                command = "l"
