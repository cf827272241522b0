"""环节一：命名空间前缀分配与 CSS 选择器推导测试。"""

from __future__ import annotations

import pytest

from svg_sprite.processing.namespace import NamespaceAllocator, allocate
from svg_sprite.processing.selectors import (
    collect_pseudo_bases,
    derive_dimension_selectors,
    derive_selectors,
    has_pseudo_sibling,
)


@pytest.mark.parametrize("total, expected_length", [(1, 1), (2, 1), (26, 1), (27, 2), (676, 2), (677, 3)])
def test_allocator_produces_distinct_minimal_prefixes(total: int, expected_length: int) -> None:
    allocator = NamespaceAllocator(total)
    prefixes = [allocator.allocate(index) for index in range(total)]

    assert len(set(prefixes)) == total
    assert all(len(prefix) == expected_length for prefix in prefixes)
    assert all(prefix.isalpha() and prefix.islower() for prefix in prefixes)
    assert 26**expected_length >= total


def test_allocator_uses_most_significant_digit_first() -> None:
    assert allocate(0, 27) == "aa"
    assert allocate(1, 27) == "ab"
    assert allocate(25, 27) == "az"
    assert allocate(26, 27) == "ba"
    assert allocate(25, 26) == "z"


def test_allocator_rejects_out_of_range_index() -> None:
    with pytest.raises(IndexError):
        NamespaceAllocator(3).allocate(3)
    with pytest.raises(ValueError):
        NamespaceAllocator(0)


def test_pseudo_prepass_marks_bases_with_variants() -> None:
    bases = collect_pseudo_bases(["btn", "btn~hover", "close", "menu~active"], "~")

    assert bases == {"btn": True, "close": False, "menu": True}
    assert has_pseudo_sibling("btn", "~", bases)
    assert not has_pseudo_sibling("close", "~", bases)
    # 自身带伪类时不视为“有伪类兄弟”
    assert not has_pseudo_sibling("btn~hover", "~", bases)


def test_plain_identifier_yields_single_selector() -> None:
    selectors = derive_selectors("close", "~", "icon")

    assert len(selectors) == 1
    only = selectors[0]
    assert only.expression == only.raw == "icon-close"
    assert only.first and only.last


def test_base_with_pseudo_sibling_gets_regular_alias() -> None:
    identifiers = ["btn", "btn~hover"]
    bases = collect_pseudo_bases(identifiers, "~")

    selectors = derive_selectors("btn", "~", "icon", has_pseudo_sibling("btn", "~", bases))

    assert [s.raw for s in selectors] == ["icon-btn", "icon-btn:regular"]
    assert [s.expression for s in selectors] == ["icon-btn", "icon-btn\\:regular"]
    assert [(s.first, s.last) for s in selectors] == [(True, False), (False, True)]


def test_pseudo_identifier_gets_escaped_variant() -> None:
    selectors = derive_selectors("btn~hover", "~", "icon")

    assert [s.raw for s in selectors] == ["icon-btn:hover", "icon-btn:hover"]
    assert [s.expression for s in selectors] == ["icon-btn:hover", "icon-btn\\:hover"]


def test_selector_counts_follow_pseudo_siblings() -> None:
    identifiers = ["arrow", "btn", "btn~hover", "close", "menu~active"]
    bases = collect_pseudo_bases(identifiers, "~")

    counts = {
        identifier: len(derive_selectors(identifier, "~", "svg", has_pseudo_sibling(identifier, "~", bases)))
        for identifier in identifiers
    }

    assert counts == {"arrow": 1, "btn": 2, "btn~hover": 2, "close": 1, "menu~active": 2}


def test_custom_separator_is_honoured() -> None:
    selectors = derive_selectors("link--focus", "--", "ui")

    assert selectors[0].raw == "ui-link:focus"
    assert selectors[1].expression == "ui-link\\:focus"


def test_dimension_selectors() -> None:
    plain = derive_dimension_selectors("close", "~", "icon")
    pseudo = derive_dimension_selectors("btn~hover", "~", "icon")

    assert [s.raw for s in plain] == ["icon-close-dims"]
    assert [s.raw for s in pseudo] == ["icon-btn-dims:hover", "icon-btn:hover-dims"]
    assert pseudo[1].expression == "icon-btn\\:hover-dims"
