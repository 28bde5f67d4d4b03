"""Permissions API: list, grouped, resource actions, get, create, update, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from rolegate.api.v1.dependencies import authorize, get_permission_service
from rolegate.application.dtos.permission import PermissionUpdate as PermissionChanges
from rolegate.application.services.authorization_service import require_permission
from rolegate.application.services.permission_service import PermissionService
from rolegate.core.limiter import limit_writes
from rolegate.schemas.permission import (
    PermissionCreate,
    PermissionDetailResponse,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
)

router = APIRouter()


@router.get("", response_model=PermissionListResponse)
async def list_permissions(
    _: Annotated[object, Depends(authorize(require_permission("permissions:read")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: str | None = None,
):
    """List permissions ordered by resource then action (paginated)."""
    items, total = await permission_service.list_permissions(
        skip=skip, limit=limit, search=search
    )
    return PermissionListResponse(
        items=[PermissionResponse.model_validate(p) for p in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/grouped", response_model=dict[str, list[PermissionResponse]])
async def list_permissions_grouped(
    _: Annotated[object, Depends(authorize(require_permission("permissions:read")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    """Every permission grouped by resource."""
    grouped = await permission_service.list_permissions_by_resource()
    return {
        resource: [PermissionResponse.model_validate(p) for p in permissions]
        for resource, permissions in grouped.items()
    }


@router.get("/resources/{resource}/actions", response_model=list[PermissionResponse])
async def get_resource_actions(
    resource: str,
    _: Annotated[object, Depends(authorize(require_permission("permissions:read")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    """Permissions defined for one resource, ordered by action."""
    permissions = await permission_service.get_resource_actions(resource)
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.get("/{permission_id}", response_model=PermissionDetailResponse)
async def get_permission(
    permission_id: str,
    _: Annotated[object, Depends(authorize(require_permission("permissions:read")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    """Get a permission with the roles it is attached to."""
    detail = await permission_service.get_permission(permission_id)
    return PermissionDetailResponse.from_detail(detail)


@router.post("", response_model=PermissionResponse, status_code=201)
@limit_writes
async def create_permission(
    request: Request,
    body: PermissionCreate,
    _: Annotated[object, Depends(authorize(require_permission("permissions:create")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    """Create a permission named resource:action."""
    created = await permission_service.create_permission(
        resource=body.resource,
        action=body.action,
        description=body.description,
    )
    return PermissionResponse.model_validate(created)


@router.patch("/{permission_id}", response_model=PermissionResponse)
@limit_writes
async def update_permission(
    request: Request,
    permission_id: str,
    body: PermissionUpdate,
    _: Annotated[object, Depends(authorize(require_permission("permissions:update")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    """Update resource, action and/or description; the name follows resource and action."""
    updated = await permission_service.update_permission(
        permission_id,
        PermissionChanges(
            resource=body.resource,
            action=body.action,
            description=body.description,
        ),
    )
    return PermissionResponse.model_validate(updated)


@router.delete("/{permission_id}", status_code=204)
@limit_writes
async def delete_permission(
    request: Request,
    permission_id: str,
    _: Annotated[object, Depends(authorize(require_permission("permissions:delete")))],
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
):
    """Delete a permission no role references."""
    await permission_service.delete_permission(permission_id)
