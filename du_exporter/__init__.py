"""Disk usage exporter for Prometheus."""

__version__ = "1.0.0"
