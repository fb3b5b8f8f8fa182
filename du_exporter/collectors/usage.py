"""
目录用量采集器

实现 prometheus_client 的自定义 collector 接口，每次抓取时现场执行 du
"""

import logging
import threading
from functools import partial
from typing import Callable, Dict, List, Optional

from prometheus_client.core import GaugeMetricFamily

from du_exporter.collectors import du
from du_exporter.models import FolderSizeDescriptor, PathSet, UsageSnapshot

logger = logging.getLogger(__name__)

DuRunner = Callable[[str], str]


class UsageCollector:
    def __init__(
        self,
        path_set: PathSet,
        namespace: str = "file_size",
        runner: Optional[DuRunner] = None,
        du_binary: str = "du",
        du_timeout: float = 30.0,
    ):
        self._lock = threading.Lock()
        self._path_set = path_set
        self._descriptor = FolderSizeDescriptor(namespace=namespace)
        self._runner = runner or partial(du.run_du, binary=du_binary, timeout=du_timeout)

    @property
    def descriptor(self) -> FolderSizeDescriptor:
        return self._descriptor

    def _family(self) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            self._descriptor.name,
            self._descriptor.documentation,
            labels=[self._descriptor.label],
        )

    def describe(self) -> List[GaugeMetricFamily]:
        """返回指标元数据，不依赖采集结果，也不加锁"""
        return [self._family()]

    def folder_usage(self) -> UsageSnapshot:
        """
        依次测量所有路径

        某个路径测量失败时立即停止，返回之前已经成功的结果

        Returns:
            条目名到 KB 的映射
        """
        snapshot: UsageSnapshot = {}
        origin: Dict[str, str] = {}

        for path in self._path_set:
            try:
                output = self._runner(path)
            except du.DuTimeoutError as e:
                logger.error(f"du timed out, abort collection at {path}: {e}")
                return snapshot
            except du.DuError as e:
                logger.error(f"du failed, abort collection at {path}: {e}")
                return snapshot

            for name, size in du.parse_du_output(output).items():
                previous = origin.get(name)
                if previous is not None and previous != path:
                    logger.warning(f"entry {name!r} from {path} overrides the one from {previous}")
                snapshot[name] = size
                origin[name] = path

        return snapshot

    def collect(self) -> List[GaugeMetricFamily]:
        """执行一次采集，并发抓取串行进行"""
        with self._lock:
            snapshot = self.folder_usage()

            family = self._family()
            for name, size in snapshot.items():
                family.add_metric([name], float(size))
            return [family]
