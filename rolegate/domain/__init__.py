"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from rolegate.domain.enums import (
    DEFAULT_ROLE_NAME,
    SYSTEM_ROLE_NAMES,
    ErrorKind,
    SystemRole,
    TokenType,
)
from rolegate.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    InfrastructureException,
    InvalidTokenException,
    ResourceNotFoundException,
    RolegateException,
    TokenExpiredException,
    ValidationException,
)
from rolegate.domain.value_objects import PermissionName, RoleName, TokenClaims

__all__ = [
    # Enums
    "DEFAULT_ROLE_NAME",
    "ErrorKind",
    "SYSTEM_ROLE_NAMES",
    "SystemRole",
    "TokenType",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ConflictException",
    "InfrastructureException",
    "InvalidTokenException",
    "ResourceNotFoundException",
    "RolegateException",
    "TokenExpiredException",
    "ValidationException",
    # Value objects
    "PermissionName",
    "RoleName",
    "TokenClaims",
]
