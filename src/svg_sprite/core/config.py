"""精灵图合成任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Any, Mapping, Optional

from svg_sprite.core.exceptions import ConfigurationError

LAYOUTS = ("vertical", "horizontal", "diagonal")
DEFAULT_LAYOUT = "vertical"
DEFAULT_MAX_SIZE = 1000
MAX_VERBOSITY = 3

# 旧版本的渲染参数，已由 render 配置取代。
DEPRECATED_OPTIONS = {
    "css": "render={'css': ...}",
    "sass": "render={'scss': ...}",
    "sassout": "render={'scss': ...}",
    "less": "render={'less': ...}",
    "lessout": "render={'less': ...}",
}


@dataclass(slots=True, frozen=True)
class RenderTarget:
    """单个模板渲染目标。"""

    enabled: bool = True
    template: Optional[Path] = None
    dest: Optional[str] = None


def _default_render() -> Mapping[str, RenderTarget]:
    return MappingProxyType({"css": RenderTarget()})


@dataclass(slots=True, frozen=True)
class SpriteConfig:
    """单次合成任务的配置集合，合成开始后不可变。"""

    sprite_directory: str = "svg"
    sprite_name: str = "sprite"
    class_prefix: str = "svg"
    common_class: Optional[str] = None
    max_width: int = DEFAULT_MAX_SIZE
    max_height: int = DEFAULT_MAX_SIZE
    padding: int = 0
    layout: str = DEFAULT_LAYOUT
    pseudo_separator: str = "~"
    include_dimensions: bool = False
    verbosity: int = 0
    render: Mapping[str, RenderTarget] = field(default_factory=_default_render)
    clean_with: Optional[str] = "scour"
    clean_config: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # 直接构造时同样收敛到合法取值
        object.__setattr__(self, "padding", max(0, int(self.padding)))
        object.__setattr__(self, "max_width", abs(int(self.max_width)) or DEFAULT_MAX_SIZE)
        object.__setattr__(self, "max_height", abs(int(self.max_height)) or DEFAULT_MAX_SIZE)
        object.__setattr__(self, "verbosity", min(max(0, int(self.verbosity)), MAX_VERBOSITY))
        if self.layout not in LAYOUTS:
            object.__setattr__(self, "layout", DEFAULT_LAYOUT)

    @property
    def sprite_path(self) -> str:
        """精灵图在输出目录中的相对路径（供模板引用）。"""

        return str(PurePosixPath(self.sprite_directory) / f"{self.sprite_name}.svg")

    @property
    def selector_prefix(self) -> str:
        """模板中公共类名使用的前缀。"""

        return self.common_class or self.class_prefix

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None) -> "SpriteConfig":
        """校验并规范化字典形式的配置。"""

        options = dict(options or {})

        deprecated = sorted(key for key in options if key in DEPRECATED_OPTIONS)
        if deprecated:
            hints = ", ".join(f"{key} -> {DEPRECATED_OPTIONS[key]}" for key in deprecated)
            raise ConfigurationError(f"配置项已废弃，请改用 render 配置: {hints}")

        known = {item.name for item in fields(cls)}
        unknown = sorted(key for key in options if key not in known)
        if unknown:
            raise ConfigurationError(f"未知的配置项: {', '.join(unknown)}")

        return cls(
            sprite_directory=_clean_string(options.get("sprite_directory", "svg"), "."),
            sprite_name=_clean_string(options.get("sprite_name"), "sprite"),
            class_prefix=_clean_string(options.get("class_prefix"), "svg"),
            common_class=_clean_string(options.get("common_class"), None),
            max_width=_parse_int(options.get("max_width"), "max_width"),
            max_height=_parse_int(options.get("max_height"), "max_height"),
            padding=_parse_int(options.get("padding", 0), "padding"),
            layout=_parse_layout(options.get("layout")),
            pseudo_separator=_clean_string(options.get("pseudo_separator"), "~"),
            include_dimensions=bool(options.get("include_dimensions", False)),
            verbosity=_parse_int(options.get("verbosity", 0), "verbosity"),
            render=_parse_render(options.get("render")),
            clean_with=_clean_string(options.get("clean_with", "scour"), None),
            clean_config=_parse_clean_config(options.get("clean_config")),
        )


def _clean_string(value: Any, default: Optional[str]) -> Optional[str]:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _parse_int(value: Any, name: str) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} 必须为整数: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} 必须为整数: {value!r}") from exc


def _parse_layout(value: Any) -> str:
    layout = (str(value).strip().lower() if value is not None else "") or DEFAULT_LAYOUT
    if layout not in LAYOUTS:
        return DEFAULT_LAYOUT
    return layout


def _parse_render(value: Any) -> Mapping[str, RenderTarget]:
    if value is None:
        return _default_render()
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"render 必须为字典: {value!r}")

    targets: dict[str, RenderTarget] = {}
    for extension, conf in value.items():
        if isinstance(conf, RenderTarget):
            target = conf
        elif isinstance(conf, Mapping):
            unknown = sorted(set(conf) - {"template", "dest"})
            if unknown:
                raise ConfigurationError(f"render.{extension} 含未知字段: {', '.join(unknown)}")
            template = conf.get("template")
            dest = conf.get("dest")
            target = RenderTarget(
                enabled=True,
                template=Path(template) if template else None,
                dest=str(dest) if dest is not None else None,
            )
        elif isinstance(conf, (bool, str)) or conf is None:
            # 字符串形式表示目标路径
            if isinstance(conf, str):
                target = RenderTarget(enabled=bool(conf.strip()), dest=conf.strip() or None)
            else:
                target = RenderTarget(enabled=bool(conf))
        else:
            raise ConfigurationError(f"无法解析 render.{extension}: {conf!r}")
        targets[str(extension)] = target
    return MappingProxyType(targets)


def _parse_clean_config(value: Any) -> Mapping[str, Any]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"clean_config 必须为字典: {value!r}")
    return MappingProxyType(dict(value))
