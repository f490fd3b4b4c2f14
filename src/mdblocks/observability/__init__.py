"""Observability: structured logging and metrics hooks for mdblocks."""

from __future__ import annotations

from .logger import PACKAGE_LOGGER, StructuredFormatter, get_logger
from .metrics import MetricsHook, NoopMetricsHook, resolve_metrics

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "PACKAGE_LOGGER",
    "StructuredFormatter",
    "get_logger",
    "resolve_metrics",
]
