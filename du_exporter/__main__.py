"""
Disk Usage Exporter 主程序入口

使用方式:
    python -m du_exporter --monitor /data --monitor /var/log
    或
    du-exporter --config /etc/du-exporter/config.yaml
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn
import yaml
from pydantic import ValidationError

from du_exporter import __version__
from du_exporter.app import create_app
from du_exporter.config import ExporterConfig, load_config
from du_exporter.supervisor import SupervisorGaveUp, run_supervised

logger = logging.getLogger("du_exporter")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        prog="du-exporter",
        description="Export directory sizes measured by du as Prometheus metrics.",
    )
    parser.add_argument("--config", help="YAML config file (default: $DU_EXPORTER_CONFIG)")
    parser.add_argument(
        "--web.listen-address",
        dest="listen",
        help="Address to listen on for web interface and telemetry. Default: :9101",
    )
    parser.add_argument(
        "--web.telemetry-path",
        dest="metrics_path",
        help="Path under which to expose metrics. Default: /metrics",
    )
    parser.add_argument(
        "--monitor",
        action="append",
        help="Path to measure, may be repeated. Default: .",
    )
    parser.add_argument("--log-level", dest="log_level", help="Logging level. Default: INFO")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(args)


def setup_logging(config: ExporterConfig) -> None:
    """配置日志"""
    level = getattr(logging, config.logging.level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # 如果配置了文件日志
    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def _on_hangup(signum, frame) -> None:
    logger.info("hup event")


def install_signal_handlers() -> None:
    """SIGHUP 只记录日志，不触发重载"""
    if hasattr(signal, "SIGHUP"):
        signal.signal(signal.SIGHUP, _on_hangup)


def serve(config: ExporterConfig) -> None:
    """在守护循环中运行 HTTP 服务"""
    app = create_app(config)

    def entry():
        logger.info(f"Listening on {config.host}:{config.port}")
        uvicorn.run(
            app,
            host=config.host,
            port=config.port,
            log_level=config.logging.level.lower(),
            access_log=False,
        )

    run_supervised(
        entry,
        max_restarts=config.supervisor.max_restarts,
        backoff_base=config.supervisor.backoff_base,
        backoff_max=config.supervisor.backoff_max,
        reset_after=config.supervisor.reset_after,
    )


def main(args: Optional[List[str]] = None) -> None:
    """主程序入口"""
    opts = parse_args(args)

    try:
        config = load_config(
            opts.config,
            overrides={
                "listen": opts.listen,
                "metrics_path": opts.metrics_path,
                "monitor": opts.monitor,
                "log_level": opts.log_level,
            },
        )
    except (OSError, ValidationError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config)
    install_signal_handlers()

    logger.info(f"Starting du_exporter {__version__}")
    logger.info(f"monitor on {list(config.monitor)}")

    try:
        serve(config)
    except SupervisorGaveUp as e:
        logger.critical(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
