"""
Observability module - Logging, Metrics, and Tracing.
"""

from paywall_access.observability.logging import get_logger, log_context, setup_logging
from paywall_access.observability.metrics import metrics
from paywall_access.observability.tracing import setup_tracing, trace_operation

__all__ = [
    "get_logger",
    "log_context",
    "setup_logging",
    "metrics",
    "setup_tracing",
    "trace_operation",
]
