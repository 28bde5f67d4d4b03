"""Permission API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rolegate.application.dtos.permission import PermissionDetail, PermissionGrant


class PermissionCreate(BaseModel):
    """Request body for creating a permission. The name is derived as resource:action."""

    resource: str = Field(..., min_length=1, max_length=64)
    action: str = Field(..., min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=500)


class PermissionUpdate(BaseModel):
    """Request body for updating a permission (partial)."""

    resource: str | None = Field(default=None, min_length=1, max_length=64)
    action: str | None = Field(default=None, min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=500)


class PermissionResponse(BaseModel):
    """Permission list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    resource: str
    action: str
    description: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PermissionRoleRef(BaseModel):
    """Role that references a permission."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    is_system: bool


class PermissionDetailResponse(PermissionResponse):
    """Permission with the roles it is attached to."""

    roles: list[PermissionRoleRef]

    @classmethod
    def from_detail(cls, detail: PermissionDetail) -> "PermissionDetailResponse":
        return cls(
            **PermissionResponse.model_validate(detail.permission).model_dump(),
            roles=[PermissionRoleRef.model_validate(r) for r in detail.roles],
        )


class PermissionListResponse(BaseModel):
    """Paginated list of permissions."""

    items: list[PermissionResponse]
    total: int
    skip: int
    limit: int


class PermissionGrantResponse(BaseModel):
    """Held permission with the name of the role that grants it."""

    id: str
    name: str
    resource: str
    action: str
    description: str | None
    granted_by: str

    @classmethod
    def from_grant(cls, grant: PermissionGrant) -> "PermissionGrantResponse":
        p = grant.permission
        return cls(
            id=p.id,
            name=p.name,
            resource=p.resource,
            action=p.action,
            description=p.description,
            granted_by=grant.granted_by,
        )
