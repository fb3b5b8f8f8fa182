"""
配置管理模块

从 YAML 文件加载配置，支持环境变量指定配置文件路径，命令行参数覆盖
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from du_exporter.models import PathSet

CONFIG_ENV = "DU_EXPORTER_CONFIG"


class DuConfig(BaseModel):
    """du 命令配置"""

    binary: str = Field(default="du", description="du 可执行文件")
    timeout: float = Field(default=30.0, gt=0, description="单个路径的测量超时（秒）")


class SupervisorConfig(BaseModel):
    """进程守护配置"""

    max_restarts: int = Field(default=5, ge=0, description="连续重启次数上限")
    backoff_base: float = Field(default=1.0, ge=0, description="首次重启等待（秒）")
    backoff_max: float = Field(default=60.0, ge=0, description="重启等待上限（秒）")
    reset_after: float = Field(default=300.0, ge=0, description="运行超过该时长后清零失败计数（秒）")


class LoggingConfig(BaseModel):
    """日志配置"""

    level: str = "INFO"
    file: Optional[str] = None


class ExporterConfig(BaseModel):
    """Exporter 配置模型"""

    listen: str = Field(default=":9101", description="监听地址")
    metrics_path: str = Field(default="/metrics", description="指标暴露路径")
    monitor: List[str] = Field(default=["."], description="需要统计大小的目录")
    namespace: str = Field(default="file_size", description="指标名前缀")
    du: DuConfig = Field(default_factory=DuConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("listen")
    @classmethod
    def _check_listen(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError(f"listen address must be host:port, got {value!r}")
        return value

    @field_validator("metrics_path")
    @classmethod
    def _check_metrics_path(cls, value: str) -> str:
        if not value.startswith("/") or value == "/":
            raise ValueError(f"metrics path must start with '/' and not be the root, got {value!r}")
        return value

    @field_validator("monitor")
    @classmethod
    def _check_monitor(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one monitored path is required")
        return value

    @property
    def host(self) -> str:
        """获取监听主机，空主机表示监听所有地址"""
        host = self.listen.rpartition(":")[0]
        return host.strip("[]") or "0.0.0.0"

    @property
    def port(self) -> int:
        """获取监听端口"""
        return int(self.listen.rpartition(":")[2])

    def path_set(self) -> PathSet:
        """构造只读的监控路径集合"""
        return PathSet.of(self.monitor)


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ExporterConfig:
    """
    加载配置

    Args:
        config_path: 配置文件路径，为空时读取环境变量 DU_EXPORTER_CONFIG；
            两者都没有时只使用默认值
        overrides: 命令行覆盖项，值为 None 的键会被忽略

    Returns:
        ExporterConfig 实例

    Raises:
        FileNotFoundError: 显式指定的配置文件不存在
    """
    if config_path is None:
        config_path = os.getenv(CONFIG_ENV)

    config_data: Dict[str, Any] = {}
    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"config file not found: {config_path}")

        with open(config_file, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key == "log_level":
            config_data.setdefault("logging", {})["level"] = value
        else:
            config_data[key] = value

    return ExporterConfig(**config_data)
