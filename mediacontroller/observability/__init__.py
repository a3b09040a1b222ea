"""
Observability module: Metrics and structured logging.
"""

from mediacontroller.observability.metrics import MetricsCollector, Counter, Gauge, Histogram
from mediacontroller.observability.logging import StructuredLogger, LogLevel, setup_logging

__all__ = [
    "MetricsCollector",
    "Counter",
    "Gauge",
    "Histogram",
    "StructuredLogger",
    "LogLevel",
    "setup_logging",
]
