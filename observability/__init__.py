"""Observability package for the transaction client."""

from observability.logging import setup_logging, get_logger, sanitize_log_data, request_id_ctx
from observability.metrics import metrics, MetricsCollector

__all__ = [
    "setup_logging",
    "get_logger",
    "sanitize_log_data",
    "request_id_ctx",
    "metrics",
    "MetricsCollector",
]
