"""环节二：布局引擎的折叠计算测试。"""

from __future__ import annotations

import math

from svg_sprite.processing.layout import place

SIZES = [(10.0, 10.0), (20.0, 15.5), (5.0, 5.0)]


def test_vertical_layout_stacks_icons() -> None:
    result = place(SIZES, "vertical")

    assert result.canvas_width == 20
    assert result.canvas_height == 31
    assert [p.y for p in result.placements] == [0, 10, 26]
    assert all(p.x is None for p in result.placements)
    assert [p.offset_y for p in result.placements] == [0, -10, -26]
    assert all(p.offset_x == 0 for p in result.placements)

    # y 区间互不重叠
    spans = [(p.y, p.y + h) for p, (_, h) in zip(result.placements, SIZES)]
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start


def test_vertical_height_is_sum_of_ceiled_heights_for_integral_offsets() -> None:
    sizes = [(4.0, 2.2), (4.0, 3.7), (4.0, 1.0)]

    result = place(sizes)

    assert result.canvas_height == sum(math.ceil(h) for _, h in sizes)
    assert result.canvas_width == 4


def test_horizontal_layout_is_symmetric() -> None:
    result = place(SIZES, "horizontal")

    assert result.canvas_width == 35
    assert result.canvas_height == 15.5
    assert [p.x for p in result.placements] == [0, 10, 30]
    assert all(p.y is None for p in result.placements)
    assert [p.offset_x for p in result.placements] == [0, -10, -30]


def test_diagonal_layout_grows_both_axes() -> None:
    result = place(SIZES, "diagonal")

    assert result.canvas_width == 35
    assert result.canvas_height == 31
    placements = result.placements
    for previous, current in zip(placements, placements[1:]):
        assert current.x > previous.x
        assert current.y > previous.y
    assert [(p.offset_x, p.offset_y) for p in placements] == [(0, 0), (-10, -10), (-30, -26)]


def test_unknown_layout_falls_back_to_vertical() -> None:
    assert place(SIZES, "zigzag") == place(SIZES, "vertical")


def test_empty_layout() -> None:
    result = place([])

    assert result.placements == ()
    assert result.canvas_width == 0
    assert result.canvas_height == 0
