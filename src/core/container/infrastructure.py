"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (structlog console adapter)
- Cost-dashboard backend API client (httpx)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings
from src.core.enums import Environment

if TYPE_CHECKING:
    from src.domain.protocols.cloud_connection_backend_protocol import (
        CloudConnectionBackendProtocol,
    )
    from src.domain.protocols.logger_protocol import LoggerProtocol


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    use_json = settings.environment != Environment.DEVELOPMENT
    level = "DEBUG" if settings.debug else settings.log_level
    return ConsoleAdapter(use_json=use_json, level=level)


@lru_cache()
def get_backend_client() -> "CloudConnectionBackendProtocol":
    """Get the backend API client singleton (app-scoped).

    Returns:
        Backend adapter implementing CloudConnectionBackendProtocol.

    Usage:
        backend = get_backend_client()
        result = await backend.check_connection_status(token)
    """
    from src.infrastructure.backend.cloud_connection_api import CloudConnectionAPIClient

    return CloudConnectionAPIClient(
        base_url=settings.backend_api_base_url,
        api_token=settings.backend_api_token,
        timeout=settings.backend_timeout_seconds,
    )
