"""Role API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rolegate.application.dtos.role import RoleDetail
from rolegate.schemas.permission import PermissionResponse


class RoleCreate(BaseModel):
    """Request body for creating a role. Name pattern is enforced by the service."""

    name: str = Field(..., min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=500)
    permission_ids: list[str] = Field(default_factory=list, max_length=500)


class RoleUpdate(BaseModel):
    """Request body for updating a role (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=500)


class RolePermissionsReplace(BaseModel):
    """Request body for PUT /{role_id}/permissions (replaces the whole set).

    An empty list clears the role's permissions.
    """

    permission_ids: list[str] = Field(..., max_length=500)


class RoleResponse(BaseModel):
    """Role list item."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    is_system: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleSummaryResponse(RoleResponse):
    """Role list item with its permissions and holder count."""

    permissions: list[PermissionResponse]
    user_count: int
    permission_count: int

    @classmethod
    def _fields_from(cls, detail: RoleDetail) -> dict:
        return {
            **RoleResponse.model_validate(detail.role).model_dump(),
            "permissions": [PermissionResponse.model_validate(p) for p in detail.permissions],
            "user_count": detail.user_count,
            "permission_count": detail.permission_count,
        }

    @classmethod
    def from_detail(cls, detail: RoleDetail) -> "RoleSummaryResponse":
        return cls(**cls._fields_from(detail))


class RoleHolderResponse(BaseModel):
    """Identity holding a role."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    assigned_at: datetime | None = None


class RoleDetailResponse(RoleSummaryResponse):
    """Role with its permissions and the identities holding it."""

    holders: list[RoleHolderResponse]

    @classmethod
    def from_detail(cls, detail: RoleDetail) -> "RoleDetailResponse":
        return cls(
            **cls._fields_from(detail),
            holders=[RoleHolderResponse.model_validate(h) for h in detail.holders],
        )


class RoleListResponse(BaseModel):
    """Paginated list of roles."""

    items: list[RoleSummaryResponse]
    total: int
    skip: int
    limit: int
