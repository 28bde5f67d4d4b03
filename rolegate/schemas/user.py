"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

from rolegate.application.dtos.user import UserDetail


class UserCreateRequest(BaseModel):
    """Request body for creating a user (admin). Defaults to the 'user' role."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    role_ids: list[str] = Field(default_factory=list, max_length=100)


class UserUpdate(BaseModel):
    """Request body for updating a user (partial)."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    avatar_url: HttpUrl | None = None
    is_active: bool | None = None


class UserRolesAssign(BaseModel):
    """Request body for PUT /{user_id}/roles (replaces the whole set).

    An empty list is refused by the service (every user keeps a role).
    """

    role_ids: list[str] = Field(..., max_length=100)


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    avatar_url: str | None = None
    is_active: bool
    email_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserRoleResponse(BaseModel):
    """Role held by a user, with assignment metadata."""

    id: str
    name: str
    description: str | None
    is_system: bool
    assigned_at: datetime | None = None
    assigned_by: str | None = None


class UserDetailResponse(UserResponse):
    """User with held roles and the flattened permission names."""

    roles: list[UserRoleResponse]
    permissions: list[str]

    @classmethod
    def from_detail(cls, detail: UserDetail) -> "UserDetailResponse":
        return cls(
            **UserResponse.model_validate(detail.user).model_dump(),
            roles=[
                UserRoleResponse(
                    id=a.role.id,
                    name=a.role.name,
                    description=a.role.description,
                    is_system=a.role.is_system,
                    assigned_at=a.assigned_at,
                    assigned_by=a.assigned_by,
                )
                for a in detail.roles
            ],
            permissions=list(detail.permissions),
        )


class UserListResponse(BaseModel):
    """Paginated list of users."""

    items: list[UserDetailResponse]
    total: int
    skip: int
    limit: int
