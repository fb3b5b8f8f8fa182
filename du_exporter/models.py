"""
数据模型定义

监控路径集合、单次采集的用量快照以及指标元数据
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Tuple

# 条目名 -> 大小（KB），每次采集重新构造
UsageSnapshot = Dict[str, int]


@dataclass(frozen=True)
class PathSet:
    """启动时确定的监控路径，之后不再修改"""

    paths: Tuple[str, ...] = (".",)

    @classmethod
    def of(cls, paths: Iterable[str]) -> "PathSet":
        return cls(paths=tuple(paths))

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class FolderSizeDescriptor:
    """目录大小指标的元数据"""

    namespace: str
    documentation: str = "folder size in bytes."
    label: str = "name"

    @property
    def name(self) -> str:
        # 数值实际为 du -k 输出的 KB，指标名沿用 size_bytes
        return f"{self.namespace}_folder_size_bytes"
