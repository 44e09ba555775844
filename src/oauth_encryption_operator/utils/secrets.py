"""Kubernetes-backed secret lister and writer."""

from __future__ import annotations

import time

from kubernetes import client

from .. import metrics
from ..constants import FIELD_MANAGER
from ..models import Secret
from .cache import secret_cache
from .rate_limit import rate_limit_k8s


class KubernetesSecretLister:
    """Read-through cache over CoreV1Api secret reads.

    Only existing secrets are cached. A missing secret is looked up again on
    every call.
    """

    def __init__(self, api: client.CoreV1Api):
        self.api = api

    def get(self, namespace: str, name: str) -> Secret | None:
        """Get a secret by namespace and name.

        Args:
            namespace: Namespace of the secret
            name: Name of the secret

        Returns:
            The secret, or None if it does not exist

        Raises:
            client.exceptions.ApiException: On any API error other than 404
        """
        cached = secret_cache.get(namespace, name)
        if cached is not None:
            metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="cache_hit").inc()
            return cached

        start_time = time.time()
        try:
            raw = rate_limit_k8s(self.api.read_namespaced_secret)(name=name, namespace=namespace)
        except client.exceptions.ApiException as e:
            if e.status == 404:
                metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="not_found").inc()
                return None
            metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation="get_secret").observe(duration)

        metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="success").inc()
        secret = Secret.from_k8s(raw)
        secret_cache.put(secret)
        return secret


class KubernetesSecretWriter:
    """Creates and replaces secrets through CoreV1Api.

    Updates are full replaces carrying the resourceVersion that was read, so a
    concurrent modification fails with 409 instead of being merged.
    """

    def __init__(self, api: client.CoreV1Api):
        self.api = api

    def create(self, secret: Secret) -> Secret:
        body = secret.to_k8s()
        body.metadata.resource_version = None
        return self._write(
            "create",
            secret,
            lambda: self.api.create_namespaced_secret(
                namespace=secret.namespace,
                body=body,
                field_manager=FIELD_MANAGER,
            ),
        )

    def update(self, secret: Secret) -> Secret:
        return self._write(
            "update",
            secret,
            lambda: self.api.replace_namespaced_secret(
                name=secret.name,
                namespace=secret.namespace,
                body=secret.to_k8s(),
                field_manager=FIELD_MANAGER,
            ),
        )

    def _write(self, operation: str, secret: Secret, call) -> Secret:
        api_operation = f"{operation}_secret"
        start_time = time.time()
        try:
            raw = rate_limit_k8s(call)()
        except Exception:
            metrics.api_call_total.labels(api_type="k8s", operation=api_operation, result="error").inc()
            metrics.secret_operations_total.labels(operation=operation, result="error").inc()
            secret_cache.forget(secret.namespace, secret.name)
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=api_operation).observe(duration)

        metrics.api_call_total.labels(api_type="k8s", operation=api_operation, result="success").inc()
        metrics.secret_operations_total.labels(operation=operation, result="success").inc()
        stored = Secret.from_k8s(raw) if isinstance(raw, client.V1Secret) else secret
        secret_cache.put(stored)
        return stored
