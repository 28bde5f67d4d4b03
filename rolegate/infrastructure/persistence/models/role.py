"""Role ORM model. System roles (super_admin, admin, manager, user) are identified by name."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rolegate.domain.enums import SYSTEM_ROLE_NAMES
from rolegate.infrastructure.persistence.database import Base
from rolegate.infrastructure.persistence.models.mixins import IdentifiedModel


class Role(IdentifiedModel, Base):
    """Role. Table: role. Unique name (lowercase letters and underscores)."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_system(self) -> bool:
        return self.name in SYSTEM_ROLE_NAMES
