"""
构建信息采集器

输出 `<namespace>_build_info{version, pythonversion} 1`
"""

import platform

from prometheus_client.core import GaugeMetricFamily

from du_exporter import __version__


class BuildInfoCollector:
    def __init__(self, namespace: str, version: str = __version__):
        self._name = f"{namespace}_build_info"
        self._labels = {"version": version, "pythonversion": platform.python_version()}

    def _family(self) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            self._name,
            "A metric with a constant '1' value labeled by version and pythonversion.",
            labels=list(self._labels),
        )

    def describe(self):
        return [self._family()]

    def collect(self):
        family = self._family()
        family.add_metric(list(self._labels.values()), 1)
        return [family]
