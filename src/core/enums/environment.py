"""Runtime environments.

Used by Settings and the logger factory to pick environment-specific
behavior (console rendering in development, JSON everywhere else).
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
