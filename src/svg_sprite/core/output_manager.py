"""输出写入模块。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from svg_sprite.core.exceptions import OutputWriteError

LOGGER = logging.getLogger(__name__)


class OutputManager:
    """负责处理输出目录与文件写入。"""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir).expanduser().resolve()
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(f"无法创建输出目录: {exc}", path=self.output_dir) from exc

    def sprite_destination(self, sprite_path: str) -> Path:
        """精灵图在磁盘上的位置（``output_dir/sprite_directory/sprite_name.svg``）。"""

        return self.output_dir / sprite_path

    def write_files(self, contents: Mapping[Path, str]) -> dict[Path, int]:
        """写入一组 UTF-8 文本文件，返回每个文件写入的字节数。

        内容先写入目标旁的临时文件，全部成功后才逐个替换到目标位置；
        任一步失败都会删除已生成的临时文件，不会只留下部分输出。
        """

        staged: list[tuple[Path, Path]] = []
        sizes: dict[Path, int] = {}
        current: Optional[Path] = None
        try:
            for destination, text in contents.items():
                current = destination
                data = text.encode("utf-8")
                staged.append((self._stage(destination, data), destination))
                sizes[destination] = len(data)
            for temp_path, destination in staged:
                current = destination
                os.replace(temp_path, destination)
        except OSError as exc:
            for temp_path, _ in staged:
                temp_path.unlink(missing_ok=True)
            raise OutputWriteError(f"写入文件失败: {exc}", path=current) from exc

        for destination, size in sizes.items():
            LOGGER.info("已写入 %s (%d 字节)", destination, size)
        return sizes

    @staticmethod
    def _stage(destination: Path, data: bytes) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        temp_path = destination.with_name(f".{destination.name}.tmp")
        try:
            temp_path.write_bytes(data)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path
