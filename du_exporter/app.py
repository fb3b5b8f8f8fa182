"""
FastAPI 应用入口

提供 Prometheus 拉取接口与首页
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from du_exporter import __version__
from du_exporter.collectors import BuildInfoCollector, UsageCollector
from du_exporter.config import ExporterConfig

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>Disk Usage Exporter</title></head>
<body>
<h1>Disk Usage Exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
</body>
</html>"""


def build_registry(config: ExporterConfig, collector: Optional[UsageCollector] = None) -> CollectorRegistry:
    """
    创建独立的指标注册表

    Args:
        config: Exporter 配置
        collector: 目录用量采集器，为空时按配置创建

    Returns:
        注册了用量与构建信息采集器的 CollectorRegistry
    """
    if collector is None:
        collector = UsageCollector(
            config.path_set(),
            namespace=config.namespace,
            du_binary=config.du.binary,
            du_timeout=config.du.timeout,
        )

    registry = CollectorRegistry()
    registry.register(collector)
    registry.register(BuildInfoCollector(config.namespace))
    return registry


def create_app(config: ExporterConfig, registry: Optional[CollectorRegistry] = None) -> FastAPI:
    """
    创建 FastAPI 应用实例

    Args:
        config: Exporter 配置
        registry: 指标注册表，为空时按配置创建

    Returns:
        FastAPI 应用
    """
    if registry is None:
        registry = build_registry(config)

    app = FastAPI(
        title="Disk Usage Exporter",
        version=__version__,
        description="目录大小 Prometheus exporter",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.registry = registry

    landing = LANDING_PAGE.format(metrics_path=config.metrics_path)

    @app.get("/", response_class=HTMLResponse)
    def index():
        return HTMLResponse(landing)

    # 同步处理函数在线程池中执行，并发抓取由采集器的锁串行化
    def metrics():
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(config.metrics_path, metrics, methods=["GET"], include_in_schema=False)

    logger.info(f"Serving metrics on {config.metrics_path}")
    return app
