"""Handler modules for the operator."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import encryption_config  # noqa: F401
