"""环节零：配置校验与默认值测试。"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from svg_sprite.core.config import RenderTarget, SpriteConfig
from svg_sprite.core.exceptions import ConfigurationError
from svg_sprite.utils.logging import verbosity_to_level


def test_defaults() -> None:
    config = SpriteConfig.from_mapping({})

    assert config.sprite_directory == "svg"
    assert config.sprite_name == "sprite"
    assert config.class_prefix == "svg"
    assert config.common_class is None
    assert (config.max_width, config.max_height) == (1000, 1000)
    assert config.padding == 0
    assert config.layout == "vertical"
    assert config.pseudo_separator == "~"
    assert config.include_dimensions is False
    assert config.verbosity == 0
    assert dict(config.render) == {"css": RenderTarget()}
    assert config.clean_with == "scour"
    assert config.sprite_path == "svg/sprite.svg"
    assert config.selector_prefix == "svg"


def test_values_are_normalized() -> None:
    config = SpriteConfig.from_mapping(
        {
            "sprite_directory": "  ",
            "sprite_name": " icons ",
            "class_prefix": "",
            "common_class": " icon ",
            "max_width": "-500",
            "max_height": None,
            "padding": "-4",
            "layout": "Diagonal",
            "pseudo_separator": " ",
            "verbosity": 9,
            "clean_with": None,
        }
    )

    assert config.sprite_directory == "."
    assert config.sprite_name == "icons"
    assert config.class_prefix == "svg"
    assert config.common_class == "icon"
    assert config.selector_prefix == "icon"
    assert config.max_width == 500
    assert config.max_height == 1000
    assert config.padding == 0
    assert config.layout == "diagonal"
    assert config.pseudo_separator == "~"
    assert config.verbosity == 3
    assert config.clean_with is None


def test_unknown_layout_falls_back_to_vertical() -> None:
    assert SpriteConfig.from_mapping({"layout": "spiral"}).layout == "vertical"


@pytest.mark.parametrize("options", [{"padding": "wide"}, {"max_width": "big"}, {"verbosity": object()}])
def test_malformed_numbers_raise(options: dict) -> None:
    with pytest.raises(ConfigurationError):
        SpriteConfig.from_mapping(options)


def test_unknown_keys_raise() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        SpriteConfig.from_mapping({"spritedir": "out"})

    assert "spritedir" in str(excinfo.value)
    assert excinfo.value.kind == "configuration"


@pytest.mark.parametrize("key", ["css", "sass", "sassout", "less", "lessout"])
def test_deprecated_keys_raise(key: str) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        SpriteConfig.from_mapping({key: True})

    assert "render" in str(excinfo.value)


def test_render_targets_are_parsed() -> None:
    config = SpriteConfig.from_mapping(
        {
            "render": {
                "css": True,
                "scss": {"dest": "styles/"},
                "less": False,
                "inline": {"template": "tmpl/custom.svg"},
                "html": "pages/index",
            }
        }
    )

    assert config.render["css"] == RenderTarget()
    assert config.render["scss"] == RenderTarget(dest="styles/")
    assert config.render["less"].enabled is False
    assert config.render["inline"].template == Path("tmpl/custom.svg")
    assert config.render["html"].dest == "pages/index"


def test_render_rejects_unknown_fields() -> None:
    with pytest.raises(ConfigurationError):
        SpriteConfig.from_mapping({"render": {"css": {"output": "x"}}})
    with pytest.raises(ConfigurationError):
        SpriteConfig.from_mapping({"render": ["css"]})


def test_config_is_immutable() -> None:
    config = SpriteConfig.from_mapping({})

    with pytest.raises(AttributeError):
        config.padding = 5  # type: ignore[misc]


@pytest.mark.parametrize("verbosity, level", [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (3, logging.DEBUG)])
def test_verbosity_maps_to_log_level(verbosity: int, level: int) -> None:
    assert verbosity_to_level(verbosity) == level


def test_direct_construction_is_normalized() -> None:
    config = SpriteConfig(padding=-2, layout="spiral", max_width=-50, max_height=0, verbosity=7)

    assert config.padding == 0
    assert config.layout == "vertical"
    assert (config.max_width, config.max_height) == (50, 1000)
    assert config.verbosity == 3
