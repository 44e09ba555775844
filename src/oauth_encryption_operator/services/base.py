"""Collaborator interfaces used by the mirror reconciler."""

from __future__ import annotations

from typing import Protocol

from ..models import Secret


class SecretLister(Protocol):
    """Protocol defining secret lookups."""

    def get(self, namespace: str, name: str) -> Secret | None:
        """Get a secret, or None if it does not exist.

        Any failure other than "not found" is raised.
        """
        ...


class SecretWriter(Protocol):
    """Protocol defining secret writes."""

    def create(self, secret: Secret) -> Secret:
        """Create a secret and return the stored object."""
        ...

    def update(self, secret: Secret) -> Secret:
        """Replace an existing secret and return the stored object."""
        ...


class EventSink(Protocol):
    """Protocol defining event emission."""

    def emit(self, reason: str, message: str) -> None:
        """Emit an event with the given reason and message."""
        ...
