"""Prometheus metrics for the OAuth API Server Encryption Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "oauth_encryption_operator_reconcile_total",
    "Total number of reconciliations",
    ["trigger", "result"],
)

reconcile_duration_seconds = Histogram(
    "oauth_encryption_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["trigger"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Mirror secret writes
secret_operations_total = Counter(
    "oauth_encryption_operator_secret_operations_total",
    "Total number of writes to the mirror secret",
    ["operation", "result"],
)

# API call metrics
api_call_total = Counter(
    "oauth_encryption_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "oauth_encryption_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Error metrics
error_total = Counter(
    "oauth_encryption_operator_error_total",
    "Total number of reconciliation errors",
    ["error_type"],
)
