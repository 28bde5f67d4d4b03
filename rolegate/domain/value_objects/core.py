"""Domain value objects for rolegate.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from rolegate.domain.enums import SystemRole

# Shared identifier pattern for role names, resources and actions.
_IDENTIFIER_RE = re.compile(r"^[a-z_]+$")

PERMISSION_SEPARATOR = ":"


def _validate_identifier(value: str, field_name: str) -> None:
    """Validate lowercase letters/underscores only. Raises ValueError on failure."""
    if not isinstance(value, str) or not _IDENTIFIER_RE.fullmatch(value):
        raise ValueError(
            f"{field_name} must be lowercase and can only contain letters and underscores"
        )


def is_valid_identifier(value: str) -> bool:
    """Return True if value matches ^[a-z_]+$."""
    return isinstance(value, str) and bool(_IDENTIFIER_RE.fullmatch(value))


@dataclass(frozen=True)
class RoleName:
    """Value object for a role name (lowercase letters and underscores)."""

    value: str

    def __post_init__(self) -> None:
        _validate_identifier(self.value, "Role name")


@dataclass(frozen=True)
class PermissionName:
    """Value object for a permission name derived as ``resource:action``.

    The name is never supplied directly; it is always computed from its
    two validated segments so the two can never drift apart.
    """

    resource: str
    action: str

    def __post_init__(self) -> None:
        _validate_identifier(self.resource, "Resource")
        _validate_identifier(self.action, "Action")

    @property
    def value(self) -> str:
        return f"{self.resource}{PERMISSION_SEPARATOR}{self.action}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TokenClaims:
    """Claim snapshot embedded in access and refresh tokens.

    Fixed shape shared by issuance and verification. Roles and permissions
    are frozensets so membership checks are O(1) and union is order-free.
    Only the four known claims are read back from a decoded payload.
    """

    identity_id: str
    email: str
    roles: frozenset[str]
    permissions: frozenset[str]

    @classmethod
    def build(
        cls,
        identity_id: str,
        email: str,
        roles: Iterable[str],
        permissions: Iterable[str],
    ) -> "TokenClaims":
        return cls(
            identity_id=identity_id,
            email=email,
            roles=frozenset(roles),
            permissions=frozenset(permissions),
        )

    @property
    def is_super_admin(self) -> bool:
        return SystemRole.SUPER_ADMIN.value in self.roles

    def to_payload(self) -> dict[str, Any]:
        """Return JWT claims (sorted lists for deterministic encoding)."""
        return {
            "sub": self.identity_id,
            "email": self.email,
            "roles": sorted(self.roles),
            "permissions": sorted(self.permissions),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TokenClaims":
        """Build claims from a decoded JWT payload.

        Raises:
            ValueError: If any claim is missing or has the wrong type.
        """
        identity_id = payload.get("sub")
        email = payload.get("email")
        roles = payload.get("roles")
        permissions = payload.get("permissions")
        if not isinstance(identity_id, str) or not identity_id:
            raise ValueError("Token missing required claim: sub")
        if not isinstance(email, str):
            raise ValueError("Token missing required claim: email")
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise ValueError("Token claim 'roles' must be a list of strings")
        if not isinstance(permissions, list) or not all(
            isinstance(p, str) for p in permissions
        ):
            raise ValueError("Token claim 'permissions' must be a list of strings")
        return cls.build(identity_id, email, roles, permissions)
