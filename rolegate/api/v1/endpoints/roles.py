"""Roles API: list, get, create, update, delete, and role-permissions.

System roles (super_admin, admin, manager, user) can be read and have their
permission sets edited, but cannot be renamed or deleted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from rolegate.api.v1.dependencies import authorize, get_role_service
from rolegate.application.dtos.role import RoleUpdate as RoleChanges
from rolegate.application.services.authorization_service import require_permission
from rolegate.application.services.role_service import RoleService
from rolegate.core.limiter import limit_writes
from rolegate.schemas.role import (
    RoleCreate,
    RoleDetailResponse,
    RoleListResponse,
    RolePermissionsReplace,
    RoleSummaryResponse,
    RoleUpdate,
)

router = APIRouter()


@router.get("", response_model=RoleListResponse)
async def list_roles(
    _: Annotated[object, Depends(authorize(require_permission("roles:read")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: str | None = None,
):
    """List roles ordered by name (paginated), each with permissions and holder count."""
    items, total = await role_service.list_roles(skip=skip, limit=limit, search=search)
    return RoleListResponse(
        items=[RoleSummaryResponse.from_detail(d) for d in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{role_id}", response_model=RoleDetailResponse)
async def get_role(
    role_id: str,
    _: Annotated[object, Depends(authorize(require_permission("roles:read")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Get a role with its permissions and holder count."""
    return RoleDetailResponse.from_detail(await role_service.get_role(role_id))


@router.post("", response_model=RoleDetailResponse, status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreate,
    _: Annotated[object, Depends(authorize(require_permission("roles:create")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Create a role. Optionally attach permissions by id."""
    detail = await role_service.create_role(
        name=body.name,
        description=body.description,
        permission_ids=body.permission_ids,
    )
    return RoleDetailResponse.from_detail(detail)


@router.patch("/{role_id}", response_model=RoleDetailResponse)
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    _: Annotated[object, Depends(authorize(require_permission("roles:update")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Update role name and/or description. System roles cannot be updated."""
    detail = await role_service.update_role(
        role_id, RoleChanges(name=body.name, description=body.description)
    )
    return RoleDetailResponse.from_detail(detail)


@router.delete("/{role_id}", status_code=204)
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    _: Annotated[object, Depends(authorize(require_permission("roles:delete")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Delete a role no identity holds. System roles cannot be deleted."""
    await role_service.delete_role(role_id)


@router.put("/{role_id}/permissions", response_model=RoleDetailResponse)
@limit_writes
async def replace_role_permissions(
    request: Request,
    role_id: str,
    body: RolePermissionsReplace,
    _: Annotated[object, Depends(authorize(require_permission("roles:update")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Replace the role's whole permission set."""
    detail = await role_service.replace_role_permissions(role_id, body.permission_ids)
    return RoleDetailResponse.from_detail(detail)


@router.post("/{role_id}/permissions/{permission_id}", status_code=204)
@limit_writes
async def add_permission_to_role(
    request: Request,
    role_id: str,
    permission_id: str,
    _: Annotated[object, Depends(authorize(require_permission("roles:update")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Attach one permission. 409 if the role already has it."""
    await role_service.add_permission_to_role(role_id, permission_id)


@router.delete("/{role_id}/permissions/{permission_id}", status_code=204)
@limit_writes
async def remove_permission_from_role(
    request: Request,
    role_id: str,
    permission_id: str,
    _: Annotated[object, Depends(authorize(require_permission("roles:update")))],
    role_service: Annotated[RoleService, Depends(get_role_service)],
):
    """Detach one permission. 404 if the role does not have it."""
    await role_service.remove_permission_from_role(role_id, permission_id)
