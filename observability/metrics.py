"""
Prometheus metrics for the transaction client.

Provides counters and histograms for session initialization, fetches and
token generation.
"""

import os
from typing import Optional

from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
)


class MetricsCollector:
    """Centralized metrics collector for the transaction client."""
    
    def __init__(self, enabled: bool = True):
        """
        Initialize metrics collector.
        
        Args:
            enabled: Whether metrics collection is enabled
        """
        self.enabled = enabled
        self.registry = CollectorRegistry()
        
        if not self.enabled:
            return
        
        # Session metrics
        self.initializations_total = Counter(
            "xct_initializations_total",
            "Total number of session initializations",
            ["status"],  # success, or the error class name
            registry=self.registry
        )
        
        self.initialization_duration_seconds = Histogram(
            "xct_initialization_duration_seconds",
            "Session initialization duration in seconds",
            buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
            registry=self.registry
        )
        
        # Fetch metrics
        self.fetches_total = Counter(
            "xct_fetches_total",
            "Total number of upstream fetches",
            ["method", "status"],
            registry=self.registry
        )
        
        # Token metrics
        self.transaction_ids_total = Counter(
            "xct_transaction_ids_total",
            "Total number of transaction ids generated",
            ["method"],
            registry=self.registry
        )
        
        # Error metrics
        self.errors_total = Counter(
            "xct_errors_total",
            "Total number of errors",
            ["type"],
            registry=self.registry
        )
    
    def record_initialization(self, status: str, duration: Optional[float] = None) -> None:
        """Record a session initialization attempt."""
        if not self.enabled:
            return
        
        self.initializations_total.labels(status=status).inc()
        if duration is not None:
            self.initialization_duration_seconds.observe(duration)
    
    def record_fetch(self, method: str, status: int) -> None:
        """Record an upstream fetch."""
        if not self.enabled:
            return
        
        self.fetches_total.labels(method=method, status=str(status)).inc()
    
    def record_transaction_id(self, method: str) -> None:
        """Record a generated transaction id."""
        if not self.enabled:
            return
        
        self.transaction_ids_total.labels(method=method.upper()).inc()
    
    def record_error(self, error_type: str) -> None:
        """Record an error."""
        if not self.enabled:
            return
        
        self.errors_total.labels(type=error_type).inc()
    
    def get_metrics(self) -> bytes:
        """
        Get Prometheus metrics in text format.
        
        Returns:
            Metrics as bytes
        """
        if not self.enabled:
            return b"# Metrics disabled\n"
        
        return generate_latest(self.registry)


# Global metrics instance
metrics_enabled = os.getenv("METRICS_ENABLED", "true").lower() == "true"
metrics = MetricsCollector(enabled=metrics_enabled)
