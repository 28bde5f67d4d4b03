"""Application layer: interfaces, DTOs, and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, resolver, security).
"""

from rolegate.application.interfaces import (
    IPermissionRepository,
    IPermissionResolver,
    IRolePermissionRepository,
    IRoleRepository,
    ISecurityService,
    IUserRepository,
    IUserRoleRepository,
)
from rolegate.application.services import (
    AuthService,
    PermissionService,
    RoleService,
    TokenService,
    UserService,
)

__all__ = [
    "AuthService",
    "IPermissionRepository",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ISecurityService",
    "IUserRepository",
    "IUserRoleRepository",
    "PermissionService",
    "RoleService",
    "TokenService",
    "UserService",
]
