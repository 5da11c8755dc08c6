"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'eventhub_booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, insufficient, conflict, not_found
)

booking_latency = Histogram(
    'eventhub_booking_latency_seconds',
    'Booking transaction latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_retries = Counter(
    'eventhub_booking_retry_attempts_total',
    'Booking retries caused by event version conflicts'
)

# Record store metrics
store_operations = Counter(
    'eventhub_store_operations_total',
    'Record store operations',
    ['operation']  # get, set, delete, scan, cas, cad
)

# Cache metrics
cache_operations = Counter(
    'eventhub_cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get, hit/miss
)

redis_connection_errors = Counter(
    'eventhub_redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Render all registered metrics in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, insufficient, conflict, error"""
    booking_attempts.labels(status=status).inc()


def record_store_operation(operation: str):
    store_operations.labels(operation=operation).inc()


def record_cache_operation(operation: str, hit: bool):
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
