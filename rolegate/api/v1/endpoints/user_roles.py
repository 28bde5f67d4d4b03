"""User-roles API: replace a user's role set, or remove a single role."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from rolegate.api.v1.dependencies import authorize, get_user_service
from rolegate.application.services.authorization_service import require_permission
from rolegate.application.services.user_service import UserService
from rolegate.core.limiter import limit_writes
from rolegate.domain.value_objects import TokenClaims
from rolegate.schemas.user import UserDetailResponse, UserRolesAssign

router = APIRouter()


@router.put("/{user_id}/roles", response_model=UserDetailResponse)
@limit_writes
async def assign_roles(
    request: Request,
    user_id: str,
    body: UserRolesAssign,
    claims: Annotated[TokenClaims, Depends(authorize(require_permission("users:update")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Replace the user's roles with role_ids. super_admin cannot be dropped this way."""
    detail = await user_service.assign_roles(
        user_id, body.role_ids, assigned_by=claims.identity_id
    )
    return UserDetailResponse.from_detail(detail)


@router.delete("/{user_id}/roles/{role_id}", status_code=204)
@limit_writes
async def remove_role(
    request: Request,
    user_id: str,
    role_id: str,
    _: Annotated[object, Depends(authorize(require_permission("users:update")))],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Remove one role. The last role and super_admin cannot be removed."""
    await user_service.remove_role(user_id, role_id)
