"""Backend API adapters."""

from src.infrastructure.backend.cloud_connection_api import CloudConnectionAPIClient

__all__ = ["CloudConnectionAPIClient"]
