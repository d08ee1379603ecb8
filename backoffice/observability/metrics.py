"""Prometheus metrics for the audit subsystem."""

from prometheus_client import Counter, Histogram

AUDIT_RECORDS_WRITTEN = Counter(
    "backoffice_audit_records_written_total",
    "Audit records persisted",
    labelnames=["action", "target_model"],
)

AUDIT_WRITE_FAILURES = Counter(
    "backoffice_audit_write_failures_total",
    "Audit records that could not be persisted",
    labelnames=["action", "target_model"],
)

AUDIT_SEARCH_LATENCY = Histogram(
    "backoffice_audit_search_latency_seconds",
    "Latency of audit log searches",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

REQUEST_COUNT = Counter(
    "backoffice_request_count_total",
    "Total number of HTTP requests processed",
    labelnames=["method", "endpoint", "status"],
)
