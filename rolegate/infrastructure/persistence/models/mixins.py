"""Column mixins shared by the user, role and permission tables.

Edge tables (role_permission, user_role) take only CuidMixin; their lifetime
is tied to the rows they connect.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from rolegate.shared.utils.generators import generate_cuid


class CuidMixin:
    """CUID2 string primary key, generated client-side."""

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class IdentifiedModel(CuidMixin, TimestampMixin):
    """Id plus timestamps: the columns every graph node carries."""

    __abstract__ = True
