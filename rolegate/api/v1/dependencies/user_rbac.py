"""User, RBAC (roles/permissions), and auth service dependencies (composition root).

Every repository in a request is built on the same get_db_transactional
session (FastAPI caches the dependency per request), so a service call that
touches several tables commits or rolls back as one unit.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.services.auth_service import AuthService
from rolegate.application.services.permission_service import PermissionService
from rolegate.application.services.role_service import RoleService
from rolegate.application.services.token_service import TokenService
from rolegate.application.services.user_service import UserService
from rolegate.infrastructure.persistence.database import get_db_transactional
from rolegate.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from rolegate.infrastructure.services import PermissionResolver

from . import auth

DbSession = Annotated[AsyncSession, Depends(get_db_transactional)]


async def get_user_repo(db: DbSession) -> UserRepository:
    return UserRepository(db)


async def get_role_repo(db: DbSession) -> RoleRepository:
    return RoleRepository(db)


async def get_permission_repo(db: DbSession) -> PermissionRepository:
    return PermissionRepository(db)


async def get_role_permission_repo(db: DbSession) -> RolePermissionRepository:
    return RolePermissionRepository(db)


async def get_user_role_repo(db: DbSession) -> UserRoleRepository:
    return UserRoleRepository(db)


async def get_permission_resolver(db: DbSession) -> PermissionResolver:
    """Resolver for role names and the permission closure (same session as request)."""
    return PermissionResolver(db)


def get_permission_service(
    permission_repo: Annotated[PermissionRepository, Depends(get_permission_repo)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(get_role_permission_repo)
    ],
) -> PermissionService:
    """Permission service (composition root)."""
    return PermissionService(
        permission_repo=permission_repo,
        role_permission_repo=role_permission_repo,
    )


def get_role_service(
    role_repo: Annotated[RoleRepository, Depends(get_role_repo)],
    permission_repo: Annotated[PermissionRepository, Depends(get_permission_repo)],
    role_permission_repo: Annotated[
        RolePermissionRepository, Depends(get_role_permission_repo)
    ],
    user_role_repo: Annotated[UserRoleRepository, Depends(get_user_role_repo)],
) -> RoleService:
    """Role service for role lifecycle and role-permission edges (composition root)."""
    return RoleService(
        role_repo=role_repo,
        permission_repo=permission_repo,
        role_permission_repo=role_permission_repo,
        user_role_repo=user_role_repo,
    )


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
    role_repo: Annotated[RoleRepository, Depends(get_role_repo)],
    user_role_repo: Annotated[UserRoleRepository, Depends(get_user_role_repo)],
    permission_resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    auth_security: Annotated[auth.AuthSecurity, Depends(auth.get_auth_security)],
) -> UserService:
    """User service for identities and role assignment (composition root)."""
    return UserService(
        user_repo=user_repo,
        role_repo=role_repo,
        user_role_repo=user_role_repo,
        permission_resolver=permission_resolver,
        auth_security=auth_security,
    )


def get_token_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
    permission_resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    auth_security: Annotated[auth.AuthSecurity, Depends(auth.get_auth_security)],
) -> TokenService:
    """Token service: issue and refresh claim snapshots (composition root)."""
    return TokenService(
        user_repo=user_repo,
        permission_resolver=permission_resolver,
        security=auth_security,
    )


def get_auth_service(
    user_service: Annotated[UserService, Depends(get_user_service)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Auth service for register/login/refresh and profile (composition root)."""
    return AuthService(user_service=user_service, token_service=token_service)
