"""Domain enumerations for rolegate.

Enums represent fixed sets of domain values (error kinds, system roles,
token types).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ErrorKind(_ValuesMixin, str, Enum):
    """Closed classification of failures surfaced to the boundary.

    The boundary maps each kind to a protocol status; the core only
    decides the kind.
    """

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    INFRASTRUCTURE = "infrastructure"


class SystemRole(_ValuesMixin, str, Enum):
    """Fixed roles that exist in every deployment.

    Their name, description and existence cannot be changed through the
    update/delete paths. SUPER_ADMIN additionally cannot be removed from
    an identity that holds it.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class TokenType(_ValuesMixin, str, Enum):
    """Bearer token classes; each is signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


SYSTEM_ROLE_NAMES: frozenset[str] = frozenset(SystemRole.values())
DEFAULT_ROLE_NAME = SystemRole.USER.value
