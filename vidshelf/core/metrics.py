"""Prometheus metrics collection for the service.

This module defines and manages Prometheus metrics for monitoring request
rates, provider lookups, collection mutations and errors.
"""

from prometheus_client import Counter, Gauge, Histogram, Info

# Application info
app_info = Info("vidshelf", "vidshelf application information")

# HTTP request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Provider metrics
provider_lookups_total = Counter(
    "provider_lookups_total",
    "Total metadata lookups against the video provider by outcome",
    ["outcome"],
)

provider_lookup_duration_seconds = Histogram(
    "provider_lookup_duration_seconds",
    "Metadata lookup duration in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Collection metrics
collection_mutations_total = Counter(
    "collection_mutations_total",
    "Total collection mutations by operation",
    ["operation"],
)

collection_size = Gauge(
    "collection_size",
    "Number of videos in the collection",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors by error code and endpoint",
    ["error_code", "endpoint"],
)


class MetricsCollector:
    """Centralized metrics collection and update helper."""

    @staticmethod
    def record_request(
        method: str,
        endpoint: str,
        status: int,
        duration: float,
    ) -> None:
        """Record HTTP request metrics.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: Normalized endpoint path.
            status: HTTP response status code.
            duration: Request duration in seconds.
        """
        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status=str(status),
        ).inc()
        http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration)

    @staticmethod
    def record_provider_lookup(outcome: str, duration: float) -> None:
        """Record a provider metadata lookup.

        Args:
            outcome: 'success', 'not_found', 'quota_exceeded', 'error', ...
            duration: Lookup duration in seconds.
        """
        provider_lookups_total.labels(outcome=outcome).inc()
        provider_lookup_duration_seconds.observe(duration)

    @staticmethod
    def record_mutation(operation: str, size: int) -> None:
        """Record a collection mutation and the resulting collection size."""
        collection_mutations_total.labels(operation=operation).inc()
        collection_size.set(size)

    @staticmethod
    def update_collection_size(size: int) -> None:
        collection_size.set(size)

    @staticmethod
    def record_error(error_code: str, endpoint: str) -> None:
        """Record an error occurrence.

        Args:
            error_code: Error code from ErrorCode class.
            endpoint: Endpoint where the error occurred.
        """
        errors_total.labels(error_code=error_code, endpoint=endpoint).inc()


def initialize_metrics(version: str) -> None:
    """Initialize application metrics with version information.

    Args:
        version: Application version string.
    """
    app_info.info({"version": version})
