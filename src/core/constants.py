"""Centralized constants for internal implementation details.

These are NOT environment-specific configuration. For environment-specific
settings, use `src/core/config.py` instead.

Categories:
- Connection names: Normalization limits and fallbacks
- Account identifiers: External account id format
- Timeouts and prefixes: HTTP client defaults
- Limits: Truncation and safety limits

Example:
    >>> from src.core.constants import CONNECTION_NAME_MAX_LENGTH
    >>> name[:CONNECTION_NAME_MAX_LENGTH]
"""

# =============================================================================
# Connection Names
# =============================================================================

CONNECTION_NAME_MAX_LENGTH: int = 50
"""Maximum length of a normalized connection name (provider stack-name limit)."""

CONNECTION_NAME_PREFIX: str = "cloudspend-"
"""Prefix added when a normalized name would not start with a letter."""

DEFAULT_CONNECTION_NAME: str = "cloudspend-connection"
"""Name used when normalization leaves nothing behind."""


# =============================================================================
# Account Identifiers
# =============================================================================

EXTERNAL_ACCOUNT_ID_LENGTH: int = 12
"""Number of digits in a cloud-provider account id."""


# =============================================================================
# Timeouts and Prefixes
# =============================================================================

BACKEND_TIMEOUT_DEFAULT: float = 30.0
"""Default timeout for backend API calls in seconds."""

BEARER_PREFIX: str = "Bearer "
"""HTTP Authorization header prefix for Bearer tokens."""


# =============================================================================
# Limits
# =============================================================================

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum length of a response body included in error details."""

TOKEN_LOG_PREFIX_LENGTH: int = 8
"""Characters of a correlation token written to logs."""
