"""Permission, RolePermission, and UserRole ORM models (RBAC graph)."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from rolegate.infrastructure.persistence.database import Base
from rolegate.infrastructure.persistence.models.mixins import CuidMixin, IdentifiedModel


class Permission(IdentifiedModel, Base):
    """Permission. Table: permission. Unique name, always f"{resource}:{action}"."""

    __tablename__ = "permission"

    name: Mapped[str] = mapped_column(String(129), nullable=False, unique=True)
    resource: Mapped[str] = mapped_column(String(64), nullable=False)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_permission_resource_action", "resource", "action"),
    )


class RolePermission(CuidMixin, Base):
    """Many-to-many role-permission. Table: role_permission.

    Deleting a role drops its edges; a referenced permission cannot be deleted.
    """

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="RESTRICT"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        Index("ix_role_permission_permission", "permission_id"),
    )


class UserRole(CuidMixin, Base):
    """Many-to-many user-role. Table: user_role.

    Deleting a user drops its edges; a held role cannot be deleted.
    """

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="RESTRICT"), nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
        Index("ix_user_role_role", "role_id"),
    )
