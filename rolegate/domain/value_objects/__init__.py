"""Domain value objects and shared value types."""

from rolegate.domain.value_objects.core import (
    PERMISSION_SEPARATOR,
    PermissionName,
    RoleName,
    TokenClaims,
    is_valid_identifier,
)

__all__ = [
    "PERMISSION_SEPARATOR",
    "PermissionName",
    "RoleName",
    "TokenClaims",
    "is_valid_identifier",
]
