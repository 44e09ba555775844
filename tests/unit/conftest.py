"""Shared fixtures for unit tests."""

from __future__ import annotations

import copy
import itertools
from typing import Any

import pytest
from kubernetes import client

from oauth_encryption_operator.constants import (
    ANNOTATION_DESCRIPTION,
    ANNOTATION_MANAGED_BY,
    FINALIZER,
    GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
    MANAGED_BY_VALUE,
)
from oauth_encryption_operator.models import Secret
from oauth_encryption_operator.utils.cache import secret_cache

DESCRIPTION_VALUE = (
    "WARNING: DO NOT EDIT.\n"
    "Altering of the encryption secrets will render you cluster inaccessible.\n"
    "Catastrophic data loss can occur from the most minor changes."
)


def default_secret(name: str, managed: bool = True) -> Secret:
    """Secret shaped like the ones written by the encryption controllers."""
    annotations = {ANNOTATION_DESCRIPTION: DESCRIPTION_VALUE}
    if managed:
        annotations[ANNOTATION_MANAGED_BY] = MANAGED_BY_VALUE
    return Secret(
        name=name,
        namespace=GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE,
        data={"encryption-config": b"\xff"},
        annotations=annotations,
        finalizers=[FINALIZER],
    )


class FakeSecretsApi:
    """In-memory stand-in for the secret methods of CoreV1Api.

    Writes are recorded in ``actions`` as ``verb:secrets:namespace:name``.
    """

    def __init__(self, secrets: list[Secret] | None = None):
        self.store: dict[tuple[str, str], client.V1Secret] = {}
        self.actions: list[str] = []
        self.bodies: list[client.V1Secret] = []
        self.errors: dict[str, Exception] = {}
        self._versions = itertools.count(1)
        for secret in secrets or []:
            body = secret.to_k8s()
            body.metadata.resource_version = str(next(self._versions))
            self.store[(secret.namespace, secret.name)] = body

    def read_namespaced_secret(self, name: str, namespace: str, **_: Any) -> client.V1Secret:
        if "read" in self.errors:
            raise self.errors["read"]
        if (namespace, name) not in self.store:
            raise client.exceptions.ApiException(status=404, reason="Not Found")
        return copy.deepcopy(self.store[(namespace, name)])

    def create_namespaced_secret(self, namespace: str, body: client.V1Secret, **_: Any) -> client.V1Secret:
        self.actions.append(f"create:secrets:{namespace}:{body.metadata.name}")
        self.bodies.append(copy.deepcopy(body))
        if "create" in self.errors:
            raise self.errors["create"]
        if (namespace, body.metadata.name) in self.store:
            raise client.exceptions.ApiException(status=409, reason="AlreadyExists")
        stored = copy.deepcopy(body)
        stored.metadata.resource_version = str(next(self._versions))
        self.store[(namespace, body.metadata.name)] = stored
        return copy.deepcopy(stored)

    def replace_namespaced_secret(
        self, name: str, namespace: str, body: client.V1Secret, **_: Any
    ) -> client.V1Secret:
        self.actions.append(f"update:secrets:{namespace}:{name}")
        self.bodies.append(copy.deepcopy(body))
        if "update" in self.errors:
            raise self.errors["update"]
        current = self.store.get((namespace, name))
        if current is None:
            raise client.exceptions.ApiException(status=404, reason="Not Found")
        if body.metadata.resource_version != current.metadata.resource_version:
            raise client.exceptions.ApiException(status=409, reason="Conflict")
        stored = copy.deepcopy(body)
        stored.metadata.resource_version = str(next(self._versions))
        self.store[(namespace, name)] = stored
        return copy.deepcopy(stored)

    def get(self, name: str, namespace: str = GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE) -> Secret | None:
        body = self.store.get((namespace, name))
        return None if body is None else Secret.from_k8s(body)


class RecordingEventSink:
    """Event sink remembering every emitted event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def emit(self, reason: str, message: str) -> None:
        self.events.append((reason, message))

    @property
    def reasons(self) -> list[str]:
        return [reason for reason, _ in self.events]


@pytest.fixture(autouse=True)
def clear_secret_cache():
    """Start and finish every test with an empty lister cache."""
    secret_cache.clear()
    yield
    secret_cache.clear()


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    """Disable Kubernetes API rate limiting."""
    monkeypatch.setattr(
        "oauth_encryption_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 1_000_000.0
    )


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def make_secret():
    return default_secret


@pytest.fixture
def fake_api_factory():
    return FakeSecretsApi
