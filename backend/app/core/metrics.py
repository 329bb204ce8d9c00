"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Settlement metrics
settlement_outcomes = Counter(
    'settlement_outcomes_total',
    'Booking settlement outcomes',
    ['outcome']  # success, insufficient_funds, transaction_failed, invalid
)

settlement_latency = Histogram(
    'settlement_latency_seconds',
    'Booking settlement latency, including retries',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

settlement_retries = Counter(
    'settlement_retry_attempts_total',
    'Settlement attempts retried after a version conflict or duplicate booking id',
    ['reason']  # version_conflict, duplicate_booking_id
)

# Ledger store metrics
ledger_operations = Counter(
    'ledger_store_operations_total',
    'Ledger store operations',
    ['operation']  # read_balance, insert_booking, conditional_write, commit, rollback
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss/error
)


def metrics_endpoint() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_settlement(outcome: str):
    """Outcome: success, insufficient_funds, transaction_failed, invalid"""
    settlement_outcomes.labels(outcome=outcome).inc()


def record_settlement_retry(reason: str):
    settlement_retries.labels(reason=reason).inc()


def record_ledger_operation(operation: str):
    ledger_operations.labels(operation=operation).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()
