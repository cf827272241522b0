"""为每个源文件分配唯一的字母命名空间前缀。"""

from __future__ import annotations

ALPHABET_SIZE = 26


class NamespaceAllocator:
    """按文件总数确定前缀长度，将文件序号编码为 26 进制字母串。

    前缀长度取满足 ``26 ** length >= total_count`` 的最小值（至少 1），
    高位在前、不足位以 ``a`` 补齐，因此在 ``[0, total_count)`` 上是双射。
    """

    def __init__(self, total_count: int) -> None:
        if total_count < 1:
            raise ValueError(f"total_count 必须为正整数: {total_count}")

        self.total_count = total_count
        powers = [1]
        while ALPHABET_SIZE ** len(powers) < total_count:
            powers.append(ALPHABET_SIZE ** len(powers))
        # 高位在前
        self._powers = tuple(reversed(powers))

    @property
    def length(self) -> int:
        return len(self._powers)

    def allocate(self, index: int) -> str:
        if not 0 <= index < self.total_count:
            raise IndexError(f"序号超出范围: {index} (共 {self.total_count} 个文件)")

        letters = []
        remainder = index
        for power in self._powers:
            digit, remainder = divmod(remainder, power)
            letters.append(chr(ord("a") + digit))
        return "".join(letters)


def allocate(index: int, total_count: int) -> str:
    """单次分配的便捷函数。"""

    return NamespaceAllocator(total_count).allocate(index)
