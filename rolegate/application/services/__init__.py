"""Application services: credentials, graph mutations, tokens, and the authorization chain."""

from rolegate.application.services.auth_service import AuthService
from rolegate.application.services.authorization_service import (
    RequestContext,
    evaluate_chain,
    require_all_permissions,
    require_authenticated,
    require_owner_or_permission,
    require_permission,
    require_role,
    require_super_admin,
)
from rolegate.application.services.permission_service import PermissionService
from rolegate.application.services.role_service import RoleService
from rolegate.application.services.token_service import TokenService
from rolegate.application.services.user_service import UserService

__all__ = [
    "AuthService",
    "PermissionService",
    "RequestContext",
    "RoleService",
    "TokenService",
    "UserService",
    "evaluate_chain",
    "require_all_permissions",
    "require_authenticated",
    "require_owner_or_permission",
    "require_permission",
    "require_role",
    "require_super_admin",
]
