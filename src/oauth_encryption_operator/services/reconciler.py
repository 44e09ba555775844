"""Mirror reconciler for the OAuth API server encryption-config secret.

The canonical secret ``encryption-config-openshift-apiserver`` is owned by the
encryption controllers of the openshift-apiserver operator. The OAuth API server
reads ``encryption-config-oauth-apiserver`` instead, so this reconciler keeps a
copy of the canonical data there.

A mirror secret that exists without the managed-by annotation was written by
another component (for example the authentication operator before a
downgrade). It is never modified.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..builders.mirror_secret import create_mirror_secret_from_source
from ..constants import (
    DECISION_DATA_DRIFT,
    DECISION_FOREIGN_SECRET,
    DECISION_IN_SYNC,
    DECISION_SOURCE_ABSENT,
    DECISION_TARGET_ABSENT,
    EVENT_REASON_SECRET_CREATED,
    EVENT_REASON_SECRET_UPDATED,
    GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
    SOURCE_SECRET_NAME,
    TARGET_SECRET_NAME,
)
from ..models import Secret
from ..utils.ownership import is_managed_by_operator
from .base import EventSink, SecretLister, SecretWriter


class Action(str, enum.Enum):
    """Write performed by a reconciliation."""

    NOOP = "NoOp"
    CREATE = "Create"
    UPDATE = "Update"


@dataclass(frozen=True)
class SyncDecision:
    """Outcome of comparing the canonical and the mirror secret."""

    action: Action
    reason: str
    secret: Secret | None = None


def data_equal(left: dict[str, bytes] | None, right: dict[str, bytes] | None) -> bool:
    """Compare two data sections, treating None and empty as equal."""
    return (left or {}) == (right or {})


def decide(
    source: Secret | None,
    target: Secret | None,
    target_name: str = TARGET_SECRET_NAME,
) -> SyncDecision:
    """Decide what to do with the mirror secret.

    Rules are evaluated in order and the first match wins.

    Args:
        source: Canonical secret, or None if it does not exist
        target: Mirror secret, or None if it does not exist
        target_name: Name to give the mirror secret when creating it

    Returns:
        The decision, carrying the secret to write for CREATE and UPDATE
    """
    if source is None:
        # encryption is off
        return SyncDecision(Action.NOOP, DECISION_SOURCE_ABSENT)

    if target is None:
        return SyncDecision(
            Action.CREATE,
            DECISION_TARGET_ABSENT,
            create_mirror_secret_from_source(source, name=target_name),
        )

    if not is_managed_by_operator(target):
        return SyncDecision(Action.NOOP, DECISION_FOREIGN_SECRET)

    if data_equal(target.data, source.data):
        return SyncDecision(Action.NOOP, DECISION_IN_SYNC)

    updated = target.deep_copy()
    updated.data = dict(source.data)
    return SyncDecision(Action.UPDATE, DECISION_DATA_DRIFT, updated)


class MirrorReconciler:
    """Executes the mirror decision against a secret store."""

    def __init__(
        self,
        lister: SecretLister,
        writer: SecretWriter,
        events: EventSink,
        namespace: str = GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
        source_name: str = SOURCE_SECRET_NAME,
        target_name: str = TARGET_SECRET_NAME,
    ):
        self.lister = lister
        self.writer = writer
        self.events = events
        self.namespace = namespace
        self.source_name = source_name
        self.target_name = target_name

    def sync(self) -> SyncDecision:
        """Run one reconciliation.

        Lookup and write errors are raised unchanged. No event is emitted
        unless the write succeeded, so a failed run is simply repeated by the
        next invocation.

        Returns:
            The decision that was executed
        """
        source = self.lister.get(self.namespace, self.source_name)
        if source is None:
            return decide(None, None, self.target_name)

        target = self.lister.get(self.namespace, self.target_name)
        decision = decide(source, target, self.target_name)

        if decision.action is Action.CREATE:
            self.writer.create(decision.secret)
            self.events.emit(
                EVENT_REASON_SECRET_CREATED,
                f"Secret {self.namespace}/{self.target_name} created",
            )
        elif decision.action is Action.UPDATE:
            self.writer.update(decision.secret)
            self.events.emit(
                EVENT_REASON_SECRET_UPDATED,
                f"Secret {self.namespace}/{self.target_name} updated",
            )

        return decision
