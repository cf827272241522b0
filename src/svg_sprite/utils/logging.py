"""日志配置工具。"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def verbosity_to_level(verbosity: int) -> int:
    """0 -> WARNING，1 -> INFO，2 及以上 -> DEBUG。"""

    return VERBOSITY_LEVELS.get(verbosity, logging.DEBUG if verbosity > 1 else logging.WARNING)


def setup_logging(level: int = logging.INFO) -> None:
    """初始化项目日志配置。"""

    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
