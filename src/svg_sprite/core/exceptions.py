"""项目内使用的自定义异常定义。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SvgSpriteError(Exception):
    """基础异常类型，携带出错文件路径与错误类别。"""

    kind = "error"

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class ConfigurationError(SvgSpriteError):
    """配置不合法时抛出，发生在处理任何文件之前。"""

    kind = "configuration"


class OptimizationError(SvgSpriteError):
    """优化器拒绝或无法处理某个 SVG 文档。"""

    kind = "optimization"


class DimensionError(SvgSpriteError):
    """文档既没有声明尺寸，也无法从几何信息推导尺寸。"""

    kind = "dimension"


class NamespaceCollisionError(SvgSpriteError):
    """两个输入文件映射到了同一个图标标识。"""

    kind = "namespace-collision"


class SourceReadError(SvgSpriteError):
    """源文件无法读取。"""

    kind = "io"


class TemplateRenderError(SvgSpriteError):
    """模板渲染失败。"""

    kind = "render"


class OutputWriteError(SvgSpriteError):
    """输出写入失败。"""

    kind = "io"
