"""Error sanitization utilities to prevent information leakage."""

import re


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"secret[:\s]+([A-Za-z0-9/+=]{16,})",
    r"aescbc[:\s]+([A-Za-z0-9/+=]+)",
    r"aesgcm[:\s]+([A-Za-z0-9/+=]+)",
    r"secretbox[:\s]+([A-Za-z0-9/+=]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "encryption-config",
    "secret",
    "password",
    "token",
    "key",
    "data",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    # Replace "field: value" and "'field': value" patterns
    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"(['\"]?){re.escape(field)}\1[:=]\s*([^\s,;\)\}}]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))

