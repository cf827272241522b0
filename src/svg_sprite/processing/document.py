"""单个 SVG 文档的对象模型：尺寸规范化、内边距与 ID 命名空间。"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from lxml import etree

from svg_sprite.core.config import SpriteConfig
from svg_sprite.core.exceptions import DimensionError, OptimizationError
from svg_sprite.processing.geometry import bounding_box
from svg_sprite.utils.numbers import format_number, parse_length, parse_view_box

LOGGER = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XLINK_HREF = f"{{{XLINK_NS}}}href"

URL_REF_RE = re.compile(r"url\(\s*(['\"]?)#([^'\")\s]+)\1\s*\)")
CSS_ID_RE = re.compile(r"#(-?[_a-zA-Z][\w-]*)")


class SvgDocument:
    """对 lxml 元素树的轻量封装，所有修改方法返回自身以便链式调用。"""

    def __init__(
        self,
        identifier: str,
        root: etree._Element,
        config: SpriteConfig,
        path: Optional[Path] = None,
    ) -> None:
        self.identifier = identifier
        self.root = root
        self.config = config
        self.path = path
        self._width: Optional[float] = None
        self._height: Optional[float] = None

    @classmethod
    def from_string(
        cls,
        identifier: str,
        text: str,
        config: SpriteConfig,
        path: Optional[Path] = None,
    ) -> "SvgDocument":
        """解析清理后的 SVG 文本。"""

        parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False, no_network=True)
        try:
            # 带编码声明的 str 无法直接交给 lxml
            root = etree.fromstring(text.encode("utf-8"), parser)
        except etree.XMLSyntaxError as exc:
            raise OptimizationError(f"无法解析 SVG 文档: {exc}", path=path) from exc

        if root is None or etree.QName(root).localname != "svg":
            raise OptimizationError("根节点不是 <svg>", path=path)
        return cls(identifier, root, config, path=path)

    def dimensions(self) -> tuple[float, float]:
        """返回当前声明的宽高；尚未规范化时尝试直接读取属性。"""

        if self._width is not None and self._height is not None:
            return self._width, self._height

        width = parse_length(self.root.get("width"))
        height = parse_length(self.root.get("height"))
        if width is None or height is None:
            raise DimensionError("文档尺寸尚未确定", path=self.path)
        return width, height

    def set_root_attributes(self, attributes: Mapping[str, Any]) -> "SvgDocument":
        for name, value in attributes.items():
            if value is None:
                continue
            if isinstance(value, (int, float)):
                value = format_number(value)
            self.root.set(name, str(value))
        return self

    def serialize(self, standalone: bool = True) -> str:
        """序列化文档。standalone 为 False 时输出可嵌入精灵图的片段。"""

        if standalone:
            return etree.tostring(self.root, xml_declaration=True, encoding="UTF-8").decode("utf-8")
        return etree.tostring(self.root, encoding="unicode")

    def normalize_dimensions(self) -> "SvgDocument":
        """补全宽高与 viewBox，超过最大尺寸时等比缩小（从不放大）。"""

        width = parse_length(self.root.get("width"))
        height = parse_length(self.root.get("height"))
        view_box = parse_view_box(self.root.get("viewBox"))

        if view_box is None and (width is None or height is None):
            view_box = bounding_box(self.root)
            if view_box is None:
                raise DimensionError("无法确定 SVG 尺寸：缺少 width/height/viewBox 且无可识别的几何元素", path=self.path)
            LOGGER.debug("根据几何信息推导出 %s 的 viewBox: %s", self.identifier, view_box)

        if view_box is not None:
            _, _, box_width, box_height = view_box
            if width is None and height is None:
                width, height = box_width, box_height
            elif width is None:
                width = height * box_width / box_height
            elif height is None:
                height = width * box_height / box_width
        else:
            view_box = (0.0, 0.0, width, height)

        if width <= 0 or height <= 0:
            raise DimensionError(f"无效的图像尺寸: {format_number(width)}x{format_number(height)}", path=self.path)

        scale = min(self.config.max_width / width, self.config.max_height / height)
        if scale < 1:
            LOGGER.debug("缩放 %s: %.4f", self.identifier, scale)
            width *= scale
            height *= scale

        self._set_view_box(view_box)
        self._set_size(width, height)
        return self

    def apply_padding(self) -> "SvgDocument":
        """四周增加 padding 像素的留白，声明尺寸相应增加 2×padding。"""

        padding = self.config.padding
        if padding <= 0:
            return self

        width, height = self.dimensions()
        view_box = parse_view_box(self.root.get("viewBox")) or (0.0, 0.0, width, height)
        min_x, min_y, box_width, box_height = view_box
        pad_x = padding * box_width / width
        pad_y = padding * box_height / height

        self._set_view_box((min_x - pad_x, min_y - pad_y, box_width + 2 * pad_x, box_height + 2 * pad_y))
        self._set_size(width + 2 * padding, height + 2 * padding)
        return self

    def namespace_identifiers(self, prefix: str, reserved: Iterable[str] = ()) -> "SvgDocument":
        """给文档内所有 id 加上前缀，并同步更新所有内部引用。

        根节点的 id 改为图标标识（它在精灵图中的最终 id），指向它的引用随之更新。
        其余 id 取 ``prefix-id``；若与 ``reserved``（通常是全部图标标识）或本文档
        已分配的 id 重复，则追加 ``_`` 直到唯一。前缀互不相同且等长，因此不同文档
        之间的 id 不会相撞。
        """

        taken = set(reserved)
        taken.add(self.identifier)
        mapping: dict[str, str] = {}

        root_id = self.root.get("id")
        if root_id:
            mapping[root_id] = self.identifier
            self.root.set("id", self.identifier)

        for element in self.root.iter(tag=etree.Element):
            if element is self.root:
                continue
            element_id = element.get("id")
            if not element_id:
                continue
            if element_id in mapping and mapping[element_id] != self.identifier:
                element.set("id", mapping[element_id])
                continue
            namespaced = f"{prefix}-{element_id}"
            while namespaced in taken:
                namespaced += "_"
            taken.add(namespaced)
            mapping.setdefault(element_id, namespaced)
            element.set("id", namespaced)

        if not mapping:
            return self

        def replace_url(match: re.Match[str]) -> str:
            target = mapping.get(match.group(2))
            if target is None:
                return match.group(0)
            return f"url({match.group(1)}#{target}{match.group(1)})"

        def replace_css_id(match: re.Match[str]) -> str:
            target = mapping.get(match.group(1))
            return f"#{target}" if target else match.group(0)

        for element in self.root.iter(tag=etree.Element):
            for name, value in element.attrib.items():
                if name in ("href", XLINK_HREF) and value.startswith("#"):
                    target = mapping.get(value[1:])
                    if target:
                        element.set(name, f"#{target}")
                elif "url(" in value:
                    element.set(name, URL_REF_RE.sub(replace_url, value))

            if etree.QName(element).localname == "style" and element.text:
                element.text = CSS_ID_RE.sub(replace_css_id, element.text)

        LOGGER.debug("命名空间 %s 应用于 %s 的 %d 个 ID", prefix, self.identifier, len(mapping))
        return self

    def _set_size(self, width: float, height: float) -> None:
        self._width = width
        self._height = height
        self.root.set("width", format_number(width))
        self.root.set("height", format_number(height))

    def _set_view_box(self, view_box: tuple[float, float, float, float]) -> None:
        self.root.set("viewBox", " ".join(format_number(value) for value in view_box))
