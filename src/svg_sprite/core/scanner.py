"""文件扫描、筛选与图标标识推导。"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from svg_sprite.core.exceptions import NamespaceCollisionError
from svg_sprite.core.models import SourceSvg

SVG_EXTENSIONS = {".svg"}
DEFAULT_INCLUDE_PATTERNS = ("*.svg",)


def _iter_candidate_files(path: Path, recursive: bool) -> Iterator[Path]:
    """遍历路径下的所有文件。"""

    if path.is_file():
        yield path
        return

    if not path.is_dir():
        return

    iterator = path.rglob("*") if recursive else path.glob("*")
    for candidate in iterator:
        if candidate.is_file():
            yield candidate


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch(lowered, pattern.lower()) for pattern in patterns)


def collect_source_svgs(
    paths: Iterable[Path],
    *,
    recursive: bool = False,
    include_patterns: Sequence[str] = DEFAULT_INCLUDE_PATTERNS,
    exclude_patterns: Sequence[str] = (),
) -> list[SourceSvg]:
    """扫描给定的文件与目录，返回匹配的 SVG 列表（按路径排序）。"""

    collected: list[SourceSvg] = []
    seen_paths: set[Path] = set()
    include_patterns = include_patterns or DEFAULT_INCLUDE_PATTERNS

    for root in paths:
        resolved_root = Path(root).expanduser().resolve()
        base = resolved_root if resolved_root.is_dir() else resolved_root.parent
        for candidate in _iter_candidate_files(resolved_root, recursive):
            if candidate in seen_paths:
                continue
            seen_paths.add(candidate)

            name = candidate.name
            if not _matches_any(name, include_patterns):
                continue
            if exclude_patterns and _matches_any(name, exclude_patterns):
                continue
            if candidate.suffix.lower() not in SVG_EXTENSIONS:
                continue

            collected.append(
                SourceSvg(
                    source_path=candidate,
                    root=base,
                    relative_path=candidate.relative_to(base),
                )
            )

    collected.sort(key=lambda x: str(x.source_path).lower())
    return collected


def source_from_path(path: Path) -> SourceSvg:
    """单个文件路径转换为 SourceSvg，标识取文件名。"""

    path = Path(path)
    return SourceSvg(source_path=path, root=path.parent, relative_path=Path(path.name))


def ensure_unique_identifiers(sources: Sequence[SourceSvg]) -> list[str]:
    """检查标识唯一性，冲突时抛出 NamespaceCollisionError。"""

    owners: dict[str, Path] = {}
    identifiers: list[str] = []
    for source in sources:
        identifier = source.identifier
        if identifier in owners:
            raise NamespaceCollisionError(
                f"图标标识 {identifier!r} 冲突，已由 {owners[identifier]} 占用",
                path=source.source_path,
            )
        owners[identifier] = source.source_path
        identifiers.append(identifier)
    return identifiers
