"""Utility functions for the OAuth API Server Encryption Operator."""

from .cache import SecretCache, secret_cache
from .events import KopfEventSink, emit_event
from .ownership import is_managed_by_operator
from .rate_limit import is_conflict, is_rate_limited, rate_limit_k8s
from .secrets import KubernetesSecretLister, KubernetesSecretWriter

__all__ = [
    "emit_event",
    "KopfEventSink",
    "is_managed_by_operator",
    "KubernetesSecretLister",
    "KubernetesSecretWriter",
    "SecretCache",
    "secret_cache",
    "rate_limit_k8s",
    "is_conflict",
    "is_rate_limited",
]
