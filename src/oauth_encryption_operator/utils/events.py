"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Body or object reference of the involved object
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


class KopfEventSink:
    """Event sink posting Normal events against a fixed object."""

    def __init__(self, body: dict[str, Any]):
        self.body = body

    def emit(self, reason: str, message: str) -> None:
        emit_event(self.body, reason, message)
