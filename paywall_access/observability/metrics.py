"""
Metrics Collection with Prometheus.

Exposes adapter and HTTP metrics for monitoring.
"""

from enum import Enum

from prometheus_client import Counter, Gauge, Histogram, Info

from paywall_access.config import settings


class MetricLabels(str, Enum):
    """Standard metric label names."""

    ENDPOINT = "endpoint"
    METHOD = "method"
    STATUS_CODE = "status_code"
    OPERATION = "operation"
    OUTCOME = "outcome"
    MODE = "mode"
    ERROR_TYPE = "error_type"


class AccessMetrics:
    """
    Centralized metrics for the paywall access service.

    Covers:
    - HTTP requests (rate, duration, in progress)
    - Authorizations (outcome, vendor latency)
    - Purchase handoffs (by mode)
    - Errors
    """

    def __init__(self) -> None:
        """Initialize all Prometheus metrics."""

        # ====================================================================
        # Service Info
        # ====================================================================
        self.service_info = Info(
            "paywall_access_service",
            "Service information",
        )
        self.service_info.info(
            {
                "version": settings.api_version,
                "service_name": settings.service_name,
            }
        )

        # ====================================================================
        # HTTP Metrics
        # ====================================================================
        self.http_requests_total = Counter(
            "paywall_access_http_requests_total",
            "Total HTTP requests",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD, MetricLabels.STATUS_CODE],
        )

        self.http_request_duration_seconds = Histogram(
            "paywall_access_http_request_duration_seconds",
            "HTTP request duration in seconds",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
        )

        self.http_requests_in_progress = Gauge(
            "paywall_access_http_requests_in_progress",
            "Number of HTTP requests currently being processed",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD],
        )

        # ====================================================================
        # Authorization Metrics
        # ====================================================================
        self.authorizations_total = Counter(
            "paywall_access_authorizations_total",
            "Total authorization calls by outcome",
            [MetricLabels.OUTCOME],
        )

        self.authorization_duration_seconds = Histogram(
            "paywall_access_authorization_duration_seconds",
            "Vendor authorization duration in seconds",
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0),
        )

        # ====================================================================
        # Purchase Handoff Metrics
        # ====================================================================
        self.purchase_clicks_total = Counter(
            "paywall_access_purchase_clicks_total",
            "Overlay clicks handed off to the vendor",
            [MetricLabels.MODE],
        )

        # ====================================================================
        # Error Metrics
        # ====================================================================
        self.errors_total = Counter(
            "paywall_access_errors_total",
            "Total errors by type",
            [MetricLabels.ERROR_TYPE, MetricLabels.OPERATION],
        )

    def record_http_request(
        self, endpoint: str, method: str, status_code: int, duration: float
    ) -> None:
        """Record HTTP request metrics."""
        self.http_requests_total.labels(
            endpoint=endpoint, method=method, status_code=status_code
        ).inc()
        self.http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(
            duration
        )

    def record_authorization(self, outcome: str, duration: float) -> None:
        """Record an authorization outcome (granted, denied, no_config, timeout, error)."""
        self.authorizations_total.labels(outcome=outcome).inc()
        self.authorization_duration_seconds.observe(duration)

    def record_purchase_click(self, mode: str) -> None:
        self.purchase_clicks_total.labels(mode=mode).inc()

    def record_error(self, error_type: str, operation: str) -> None:
        """Record error occurrence."""
        self.errors_total.labels(error_type=error_type, operation=operation).inc()


# Global metrics instance
metrics = AccessMetrics()
