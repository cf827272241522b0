"""Mustache 模板渲染与渲染目标解析。"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import chevron

from svg_sprite.core.config import SpriteConfig
from svg_sprite.core.exceptions import ConfigurationError, TemplateRenderError

LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
INLINE_TEMPLATE = TEMPLATE_DIR / "sprite.inline.svg"

DEFAULT_TEMPLATES = {
    "css": "sprite.css",
    "scss": "sprite.scss",
    "less": "sprite.less",
    "inline": "sprite.inline.svg",
}


@dataclass(slots=True, frozen=True)
class ResolvedTarget:
    """解析后的渲染任务：模板文件与输出文件。"""

    name: str
    template: Path
    dest: Path


def resolve_render_targets(config: SpriteConfig, output_dir: Path) -> list[ResolvedTarget]:
    """根据 render 配置确定每个模板与输出路径。

    dest 为空时输出到 ``output_dir/<模板文件名>``；以路径分隔符结尾视为目录；
    没有扩展名时沿用模板的扩展名。
    """

    targets: list[ResolvedTarget] = []
    for name, target in config.render.items():
        if not target.enabled:
            continue

        if target.template is not None:
            template = target.template.expanduser().resolve()
        else:
            template = TEMPLATE_DIR / DEFAULT_TEMPLATES.get(name, f"sprite.{name}")
        if not template.is_file():
            raise ConfigurationError(f"模板文件不存在: {template}")

        if target.dest is None:
            dest = output_dir / template.name
        else:
            is_dir = not target.dest or target.dest.endswith(("/", os.sep))
            dest = output_dir / target.dest
            if is_dir:
                dest = dest / template.name
            if not dest.suffix:
                dest = dest.with_suffix(template.suffix)

        targets.append(ResolvedTarget(name=name, template=template, dest=dest.resolve()))
    return targets


def render_template(template: str, context: Mapping[str, Any]) -> str:
    """渲染 Mustache 模板，``{{> inline}}`` 可引用内联 SVG 模板。"""

    try:
        return chevron.render(
            template=template,
            data=dict(context),
            partials_dict={"inline": INLINE_TEMPLATE.read_text(encoding="utf-8")},
        )
    except (OSError, chevron.ChevronError) as exc:
        raise TemplateRenderError(f"模板渲染失败: {exc}") from exc


def render_target(target: ResolvedTarget, context: Mapping[str, Any]) -> str:
    try:
        template = target.template.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateRenderError(f"无法读取模板: {exc}", path=target.template) from exc

    LOGGER.debug("渲染模板 %s -> %s", target.template.name, target.dest)
    try:
        return render_template(template, context)
    except TemplateRenderError as exc:
        raise TemplateRenderError(exc.message, path=target.template) from exc
