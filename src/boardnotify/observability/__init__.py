"""Observability: structured logging and metrics hooks for boardnotify."""

from __future__ import annotations

from .logger import TRACE, StructuredFormatter, get_logger, get_null_logger
from .metrics import MetricsHook, NoopMetricsHook

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "StructuredFormatter",
    "TRACE",
    "get_logger",
    "get_null_logger",
]
