"""根据文件命名约定推导 CSS 选择器。"""

from __future__ import annotations

from typing import Iterable, Mapping

from svg_sprite.core.models import SelectorDescriptor

REGULAR_PSEUDO = "regular"


def collect_pseudo_bases(identifiers: Iterable[str], separator: str) -> dict[str, bool]:
    """预扫描全部标识，记录每个基础名是否存在伪类变体。"""

    bases: dict[str, bool] = {}
    for identifier in identifiers:
        segments = identifier.split(separator)
        bases[segments[0]] = bases.get(segments[0], False) or len(segments) > 1
    return bases


def derive_selectors(
    identifier: str,
    separator: str,
    prefix: str,
    has_pseudo_sibling: bool = False,
) -> list[SelectorDescriptor]:
    """为单个图标生成 1 个或 2 个选择器描述。

    标识本身带伪类（``btn~hover``）或同名基础图标存在伪类变体时，
    生成两个描述：``prefix-btn:hover`` 与转义形式 ``prefix-btn\\:hover``；
    对基础图标则补充 ``prefix-btn\\:regular``。
    """

    segments = identifier.split(separator)
    plain = f"{prefix}-" + ":".join(segments)

    if not has_pseudo_sibling and len(segments) == 1:
        return [SelectorDescriptor(expression=plain, raw=plain, first=True, last=True)]

    if len(segments) > 1:
        expression = f"{prefix}-" + "\\:".join(segments)
        raw = plain
    else:
        expression = f"{prefix}-{segments[0]}\\:{REGULAR_PSEUDO}"
        raw = f"{prefix}-{segments[0]}:{REGULAR_PSEUDO}"

    return [
        SelectorDescriptor(expression=plain, raw=plain, first=True, last=False),
        SelectorDescriptor(expression=expression, raw=raw, first=False, last=True),
    ]


def derive_dimension_selectors(identifier: str, separator: str, prefix: str) -> list[SelectorDescriptor]:
    """生成尺寸类选择器（``prefix-name-dims``）。"""

    segments = identifier.split(separator)
    if len(segments) == 1:
        selector = f"{prefix}-{segments[0]}-dims"
        return [SelectorDescriptor(expression=selector, raw=selector, first=True, last=True)]

    base, pseudo = segments[0], segments[1]
    with_pseudo = f"{prefix}-{base}-dims:{pseudo}"
    return [
        SelectorDescriptor(expression=with_pseudo, raw=with_pseudo, first=True, last=False),
        SelectorDescriptor(
            expression=f"{prefix}-{base}\\:{pseudo}-dims",
            raw=f"{prefix}-{base}:{pseudo}-dims",
            first=False,
            last=True,
        ),
    ]


def has_pseudo_sibling(identifier: str, separator: str, bases: Mapping[str, bool]) -> bool:
    """基础图标（不含伪类段）是否存在伪类兄弟。"""

    segments = identifier.split(separator)
    return len(segments) == 1 and bases.get(segments[0], False)
