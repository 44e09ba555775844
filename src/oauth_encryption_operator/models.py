"""Models for Kubernetes secrets handled by the operator."""

from __future__ import annotations

import base64
import copy
from dataclasses import dataclass, field
from typing import Any

from kubernetes import client


def _decode_data(raw: dict[str, Any] | None) -> dict[str, bytes]:
    """Decode the base64 values of a secret's data section."""
    result: dict[str, bytes] = {}
    for key, value in (raw or {}).items():
        if isinstance(value, bytes):
            result[key] = value
        else:
            result[key] = base64.b64decode(value)
    return result


def _encode_data(data: dict[str, bytes]) -> dict[str, str]:
    return {k: base64.b64encode(v).decode("utf-8") for k, v in data.items()}


@dataclass
class Secret:
    """A namespaced Kubernetes secret with decoded data.

    ``annotations`` holds whatever the API returned. It is normally a mapping but
    is not coerced, so ownership checks must tolerate other shapes.
    """

    name: str
    namespace: str
    data: dict[str, bytes] = field(default_factory=dict)
    annotations: Any = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    type: str | None = None
    resource_version: str | None = None
    uid: str | None = None
    owner_references: list[Any] = field(default_factory=list)

    @classmethod
    def from_k8s(cls, secret: client.V1Secret) -> Secret:
        """Build a Secret from a kubernetes client V1Secret."""
        metadata = secret.metadata
        annotations = metadata.annotations
        return cls(
            name=metadata.name,
            namespace=metadata.namespace,
            data=_decode_data(secret.data),
            annotations={} if annotations is None else annotations,
            finalizers=list(metadata.finalizers or []),
            labels=dict(metadata.labels or {}),
            type=secret.type,
            resource_version=metadata.resource_version,
            uid=metadata.uid,
            owner_references=list(metadata.owner_references or []),
        )

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> Secret:
        """Build a Secret from a raw API body (as delivered by kopf watch events)."""
        metadata = body.get("metadata", {})
        annotations = metadata.get("annotations")
        return cls(
            name=metadata.get("name"),
            namespace=metadata.get("namespace"),
            data=_decode_data(body.get("data")),
            annotations={} if annotations is None else annotations,
            finalizers=list(metadata.get("finalizers") or []),
            labels=dict(metadata.get("labels") or {}),
            type=body.get("type"),
            resource_version=metadata.get("resourceVersion"),
            uid=metadata.get("uid"),
            owner_references=list(metadata.get("ownerReferences") or []),
        )

    def to_k8s(self) -> client.V1Secret:
        """Convert to a kubernetes client V1Secret with base64-encoded data."""
        annotations = self.annotations if isinstance(self.annotations, dict) else {}
        return client.V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=client.V1ObjectMeta(
                name=self.name,
                namespace=self.namespace,
                annotations=dict(annotations) or None,
                finalizers=list(self.finalizers) or None,
                labels=dict(self.labels) or None,
                resource_version=self.resource_version,
                uid=self.uid,
                owner_references=list(self.owner_references) or None,
            ),
            type=self.type,
            data=_encode_data(self.data),
        )

    def reference(self) -> dict[str, Any]:
        """Object reference body usable as an event target."""
        metadata: dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.uid:
            metadata["uid"] = self.uid
        return {"apiVersion": "v1", "kind": "Secret", "metadata": metadata}

    def deep_copy(self) -> Secret:
        return copy.deepcopy(self)
