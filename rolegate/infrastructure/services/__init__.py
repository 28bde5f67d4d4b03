"""Infrastructure implementations of application service interfaces."""

from rolegate.infrastructure.services.permission_resolver import PermissionResolver

__all__ = [
    "PermissionResolver",
]
