"""TTL cache of secrets observed through the Kubernetes API."""

from __future__ import annotations

import os
import threading
import time

from ..models import Secret


class SecretCache:
    """Secrets keyed by (namespace, name).

    Entries expire ``ttl`` seconds after they were stored. Watch events, the
    resync thread and kopf's handler executor all touch the cache, so every
    access holds a lock.
    """

    def __init__(self, ttl: float):
        self.ttl = ttl
        self._entries: dict[tuple[str, str], tuple[Secret, float]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, name: str) -> Secret | None:
        """Return the cached secret, or None if it is unknown or expired."""
        key = (namespace, name)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            secret, stored_at = entry
            if time.time() - stored_at > self.ttl:
                del self._entries[key]
                return None
            return secret

    def put(self, secret: Secret) -> None:
        """Store a secret under its own namespace and name."""
        with self._lock:
            self._entries[(secret.namespace, secret.name)] = (secret, time.time())

    def forget(self, namespace: str, name: str) -> None:
        with self._lock:
            self._entries.pop((namespace, name), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: tuple[str, str]) -> bool:
        with self._lock:
            return key in self._entries


secret_cache = SecretCache(ttl=float(os.getenv("K8S_CACHE_TTL_SECONDS", "30.0")))
