"""Handlers syncing the OAuth API server encryption-config secret."""

from __future__ import annotations

import os
import time
from typing import Any

import kopf
from kubernetes import client

from .. import metrics
from ..constants import (
    GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
    KIND_SECRET,
    SOURCE_SECRET_NAME,
    TARGET_SECRET_NAME,
)
from ..models import Secret
from ..services.reconciler import Action, MirrorReconciler, SyncDecision
from ..utils.events import KopfEventSink
from ..utils.rate_limit import is_conflict, is_rate_limited
from ..utils.cache import secret_cache
from ..utils.secrets import KubernetesSecretLister, KubernetesSecretWriter
from .base import BaseHandler
from .resync import ResyncScheduler
from .shared import get_k8s_client

RESYNC_INTERVAL_SECONDS = float(os.getenv("RESYNC_INTERVAL_SECONDS", "300"))
CONFLICT_RETRY_DELAY_SECONDS = float(os.getenv("CONFLICT_RETRY_DELAY_SECONDS", "5"))
ERROR_RETRY_DELAY_SECONDS = float(os.getenv("ERROR_RETRY_DELAY_SECONDS", "30"))

_RESULTS = {
    Action.NOOP: "noop",
    Action.CREATE: "created",
    Action.UPDATE: "updated",
}


def is_encryption_config_secret(name: str, namespace: str, **_: Any) -> bool:
    """Filter for the canonical and the mirror secret."""
    return (
        namespace == GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE
        and name in (SOURCE_SECRET_NAME, TARGET_SECRET_NAME)
    )


class EncryptionConfigSyncHandler(BaseHandler):
    """Runs the mirror reconciler and reports its outcome."""

    def __init__(self) -> None:
        super().__init__(kind=KIND_SECRET)
        self.target_meta = {
            "name": TARGET_SECRET_NAME,
            "namespace": GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
        }

    def build_reconciler(self, api: client.CoreV1Api) -> MirrorReconciler:
        target_ref = Secret(
            name=TARGET_SECRET_NAME,
            namespace=GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
        ).reference()
        return MirrorReconciler(
            lister=KubernetesSecretLister(api),
            writer=KubernetesSecretWriter(api),
            events=KopfEventSink(target_ref),
        )

    def reconcile(self, trigger: str, api: client.CoreV1Api | None = None) -> SyncDecision:
        """Run one reconciliation.

        Args:
            trigger: What caused the run ("event", "timer" or "retry")
            api: Optional CoreV1Api instance

        Returns:
            The executed decision

        Raises:
            kopf.TemporaryError: On write conflicts and API rate limiting
        """
        reconciler = self.build_reconciler(api or get_k8s_client())

        start_time = time.time()
        try:
            decision = reconciler.sync()
        except client.exceptions.ApiException as e:
            self._record_failure(trigger, e)
            if is_conflict(e):
                secret_cache.forget(reconciler.namespace, reconciler.source_name)
                secret_cache.forget(reconciler.namespace, reconciler.target_name)
                raise kopf.TemporaryError(
                    f"Conflict writing {reconciler.namespace}/{reconciler.target_name}",
                    delay=CONFLICT_RETRY_DELAY_SECONDS,
                ) from e
            if is_rate_limited(e):
                raise kopf.TemporaryError("Kubernetes API rate limit hit", delay=CONFLICT_RETRY_DELAY_SECONDS) from e
            raise
        except Exception as e:
            self._record_failure(trigger, e)
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(trigger=trigger).observe(duration)

        result = _RESULTS[decision.action]
        metrics.reconcile_total.labels(trigger=trigger, result=result).inc()

        self.log_info(
            self.target_meta,
            f"Reconciliation finished: {decision.action.value}",
            event="reconciled",
            reason=decision.reason,
            trigger=trigger,
        )
        return decision

    def _record_failure(self, trigger: str, error: Exception) -> None:
        metrics.reconcile_total.labels(trigger=trigger, result="error").inc()
        metrics.error_total.labels(error_type=type(error).__name__).inc()
        self.log_error(
            self.target_meta,
            "Reconciliation failed",
            error=error,
            event="reconcile_failed",
            reason="ReconcileFailed",
            trigger=trigger,
        )


handler = EncryptionConfigSyncHandler()

scheduler = ResyncScheduler(
    reconcile=lambda trigger: handler.reconcile(trigger=trigger),
    interval=RESYNC_INTERVAL_SECONDS,
    error_delay=ERROR_RETRY_DELAY_SECONDS,
)


@kopf.on.event("v1", "secrets", when=is_encryption_config_secret)
def handle_encryption_config_event(
    event: dict[str, Any],
    body: kopf.Body,
    name: str,
    namespace: str,
    **kwargs: Any,
) -> None:
    """Reconcile whenever the canonical or the mirror secret changes.

    Failures are retried by the resync scheduler, since kopf drops errors of
    event handlers.
    """
    if event.get("type") == "DELETED":
        secret_cache.forget(namespace, name)
    else:
        secret_cache.put(Secret.from_dict(body))

    scheduler.run(trigger="event")


@kopf.on.startup()
def start_resync(**kwargs: Any) -> None:
    scheduler.start()


@kopf.on.cleanup()
def stop_resync(**kwargs: Any) -> None:
    scheduler.stop()
