"""Builder for the mirror encryption-config secret."""

from __future__ import annotations

from collections.abc import Mapping

from ..constants import (
    ANNOTATION_DESCRIPTION,
    ANNOTATION_MANAGED_BY,
    FINALIZER,
    MANAGED_BY_VALUE,
    TARGET_SECRET_NAME,
)
from ..models import Secret


def create_mirror_secret_from_source(
    source: Secret,
    name: str = TARGET_SECRET_NAME,
) -> Secret:
    """Create the mirror secret for a canonical encryption-config secret.

    Only the data and the description annotation are taken from the source.
    Everything else on the source (labels, other annotations, finalizers) is
    left behind.

    Args:
        source: Canonical secret
        name: Name of the mirror secret

    Returns:
        Mirror secret ready to be created in the source's namespace
    """
    annotations = {ANNOTATION_MANAGED_BY: MANAGED_BY_VALUE}
    if isinstance(source.annotations, Mapping) and ANNOTATION_DESCRIPTION in source.annotations:
        annotations[ANNOTATION_DESCRIPTION] = source.annotations[ANNOTATION_DESCRIPTION]

    return Secret(
        name=name,
        namespace=source.namespace,
        data=dict(source.data),
        annotations=annotations,
        finalizers=[FINALIZER],
    )
