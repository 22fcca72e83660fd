"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from vendorflow.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from vendorflow.api.v1.endpoints import (
    chains,
    documents,
    health,
    notifications,
    sharing_permissions,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(chains.router, prefix="/chains", tags=["chains"])
api_router.include_router(
    sharing_permissions.router, prefix="/users", tags=["sharing-permissions"]
)
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
