"""Constants for the OAuth API Server Encryption Operator."""

# Annotation/finalizer prefix shared with the other encryption controllers
API_GROUP = "encryption.apiserver.operator.openshift.io"

# Namespace holding both the canonical and the mirror secret
GLOBAL_MACHINE_SPECIFIED_CONFIG_NAMESPACE = "openshift-config-managed"

# Secret identity
ENCRYPTION_CONFIG_SECRET_NAME = "encryption-config"
SOURCE_SECRET_SUFFIX = "openshift-apiserver"
TARGET_SECRET_SUFFIX = "oauth-apiserver"


def source_secret_name(base_name: str = ENCRYPTION_CONFIG_SECRET_NAME) -> str:
    """Name of the canonical secret for a given base name."""
    return f"{base_name}-{SOURCE_SECRET_SUFFIX}"


def target_secret_name(base_name: str = ENCRYPTION_CONFIG_SECRET_NAME) -> str:
    """Name of the mirror secret for a given base name."""
    return f"{base_name}-{TARGET_SECRET_SUFFIX}"


SOURCE_SECRET_NAME = source_secret_name()
TARGET_SECRET_NAME = target_secret_name()

# Resource Kinds
KIND_SECRET = "Secret"

# Annotations
ANNOTATION_MANAGED_BY = f"{API_GROUP}/managed-by"
MANAGED_BY_VALUE = "openshift-apiserver-operator"
ANNOTATION_DESCRIPTION = "kubernetes.io/description"

# Finalizers
FINALIZER = f"{API_GROUP}/deletion-protection"

# Field Manager
FIELD_MANAGER = "oauth-encryption-operator"

# Controller
CONTROLLER_NAME = "OAuthAPIServerEncryptionConfigSyncController"

# Event Reasons
EVENT_REASON_SECRET_CREATED = "SecretCreated"
EVENT_REASON_SECRET_UPDATED = "SecretUpdated"

# Decision reasons (structured logs)
DECISION_SOURCE_ABSENT = "SourceAbsent"
DECISION_TARGET_ABSENT = "TargetAbsent"
DECISION_FOREIGN_SECRET = "ForeignSecret"
DECISION_IN_SYNC = "InSync"
DECISION_DATA_DRIFT = "DataDrift"
