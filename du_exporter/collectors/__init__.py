"""
数据采集器模块

包含 du 目录用量采集器与构建信息采集器
"""

from .build_info import BuildInfoCollector
from .du import DuError, DuTimeoutError, parse_du_output, run_du
from .usage import UsageCollector

__all__ = [
    "BuildInfoCollector",
    "DuError",
    "DuTimeoutError",
    "UsageCollector",
    "parse_du_output",
    "run_du",
]
