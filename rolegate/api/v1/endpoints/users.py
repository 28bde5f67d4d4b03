"""User API: list, get, create, update, delete, and effective permissions.

Get, update and the permissions listing are open to the identity itself or to
holders of the matching users:* permission.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from rolegate.api.v1.dependencies import authorize, get_user_service
from rolegate.application.dtos.user import UserUpdate as UserChanges
from rolegate.application.services.authorization_service import (
    require_owner_or_permission,
    require_permission,
)
from rolegate.application.services.user_service import UserService
from rolegate.core.limiter import limit_writes
from rolegate.domain.exceptions import AuthorizationException
from rolegate.domain.value_objects import TokenClaims
from rolegate.schemas.permission import PermissionGrantResponse
from rolegate.schemas.user import (
    UserCreateRequest,
    UserDetailResponse,
    UserListResponse,
    UserUpdate,
)

router = APIRouter()

_UPDATE_PERMISSION = "users:update"
_ADMIN_ONLY_FIELDS = ("email", "is_active")


@router.get("", response_model=UserListResponse)
async def list_users(
    _: Annotated[object, Depends(authorize(require_permission("users:read")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: str | None = None,
):
    """List users newest first; search matches email, first name and last name."""
    items, total = await user_service.list_users(skip=skip, limit=limit, search=search)
    return UserListResponse(
        items=[UserDetailResponse.from_detail(d) for d in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: str,
    _: Annotated[object, Depends(authorize(require_owner_or_permission("users:read")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user with roles and permissions."""
    detail = await user_service.get_user(user_id)
    return UserDetailResponse.from_detail(detail)


@router.post("", response_model=UserDetailResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreateRequest,
    claims: Annotated[TokenClaims, Depends(authorize(require_permission("users:create")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Create a user holding role_ids, or the default 'user' role when none are given."""
    detail = await user_service.create_user(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role_ids=body.role_ids or None,
        created_by=claims.identity_id,
    )
    return UserDetailResponse.from_detail(detail)


@router.patch("/{user_id}", response_model=UserDetailResponse)
@limit_writes
async def update_user(
    request: Request,
    user_id: str,
    body: UserUpdate,
    claims: Annotated[
        TokenClaims, Depends(authorize(require_owner_or_permission(_UPDATE_PERMISSION)))
    ],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update a user (partial). Absent fields are left unchanged.

    Owners may edit their own profile fields; email and is_active need users:update.
    """
    if _UPDATE_PERMISSION not in claims.permissions:
        restricted = [f for f in _ADMIN_ONLY_FIELDS if getattr(body, f) is not None]
        if restricted:
            raise AuthorizationException(
                f"Changing {' and '.join(restricted)} requires {_UPDATE_PERMISSION}",
                details={"fields": restricted, "required_permissions": [_UPDATE_PERMISSION]},
            )
    changes = UserChanges(
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        avatar_url=str(body.avatar_url) if body.avatar_url is not None else None,
        is_active=body.is_active,
    )
    detail = await user_service.update_user(user_id, changes)
    return UserDetailResponse.from_detail(detail)


@router.delete("/{user_id}", status_code=204)
@limit_writes
async def delete_user(
    request: Request,
    user_id: str,
    claims: Annotated[TokenClaims, Depends(authorize(require_permission("users:delete")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete a user. super_admin holders and the caller's own account are refused."""
    await user_service.delete_user(user_id, deleted_by=claims.identity_id)


@router.get("/{user_id}/permissions", response_model=list[PermissionGrantResponse])
async def get_user_permissions(
    user_id: str,
    _: Annotated[object, Depends(authorize(require_owner_or_permission("users:read")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """List the user's effective permissions, one entry each, with the granting role."""
    grants = await user_service.get_user_permissions(user_id)
    return [PermissionGrantResponse.from_grant(g) for g in grants]
