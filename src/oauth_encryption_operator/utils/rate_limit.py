"""Rate limiting for Kubernetes API calls."""

from __future__ import annotations

import os
import time
from functools import wraps
from typing import Any, Callable, TypeVar

_F = TypeVar("_F", bound=Callable[..., Any])

_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))

_k8s_last_call_time: float = 0.0


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls.

    Spaces calls at least 1/K8S_RATE_LIMIT_PER_SECOND seconds apart.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _k8s_last_call_time
        min_interval = 1.0 / _K8S_RATE_LIMIT_PER_SECOND

        time_since_last_call = time.time() - _k8s_last_call_time
        if time_since_last_call < min_interval:
            time.sleep(min_interval - time_since_last_call)

        _k8s_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def is_conflict(e: Exception) -> bool:
    """Check whether an exception is an optimistic-concurrency conflict."""
    return getattr(e, "status", None) == 409


def is_rate_limited(e: Exception) -> bool:
    """Check whether an exception is a Kubernetes API rate limit error."""
    status = getattr(e, "status", None)
    return status == 429 or (status == 503 and "rate limit" in str(e).lower())
