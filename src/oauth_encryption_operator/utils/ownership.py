"""Ownership checks for secrets written by the operator."""

from __future__ import annotations

from collections.abc import Mapping

from ..constants import ANNOTATION_MANAGED_BY, MANAGED_BY_VALUE
from ..models import Secret


def is_managed_by_operator(secret: Secret) -> bool:
    """Return True if the secret carries this operator's managed-by marker.

    Anything other than a mapping of annotations counts as "no marker", so a
    secret with unreadable metadata is never written to.
    """
    annotations = secret.annotations
    if not isinstance(annotations, Mapping):
        return False
    return annotations.get(ANNOTATION_MANAGED_BY) == MANAGED_BY_VALUE
