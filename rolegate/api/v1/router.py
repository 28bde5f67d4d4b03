"""API v1 router aggregation.

Mounts the health, auth, identity, role and permission routers. Services come
from rolegate.api.v1.dependencies; no route builds repositories itself.
"""

from fastapi import APIRouter

from rolegate.api.v1.endpoints import (
    auth,
    health,
    permissions,
    roles,
    user_roles,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(user_roles.router, prefix="/users", tags=["user-roles"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
