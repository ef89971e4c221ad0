"""API v1 router.

Mounts every v1 resource router under settings.api_v1_prefix.

Resources:
    /cloud-connections - Automated cloud-account connection workflows
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.routers.api.v1.cloud_connections import (
    router as cloud_connections_router,
)

v1_router = APIRouter(prefix=settings.api_v1_prefix)
v1_router.include_router(cloud_connections_router)

__all__ = ["v1_router"]
