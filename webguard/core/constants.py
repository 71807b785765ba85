"""Core application constants."""

# Security headers
DEFAULT_HSTS_MAX_AGE = 2592000  # 30 days in seconds
DEFAULT_X_FRAME_OPTIONS = "SAMEORIGIN"
DEFAULT_X_CONTENT_TYPE_OPTIONS = "nosniff"

# Security and redaction
REDACTED = "[REDACTED]"

# Fault handling
FAULT_LOGGER_MODULE = "fault handler"
UNKNOWN_FAULT_PREFIX = "unknown fault"
