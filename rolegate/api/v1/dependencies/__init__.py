"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, never on repositories or security
helpers directly.
"""

from rolegate.api.v1.dependencies.auth import (
    AuthSecurity,
    CurrentClaims,
    authenticate,
    authorize,
    get_auth_security,
    optional_authenticate,
)
from rolegate.api.v1.dependencies.user_rbac import (
    get_auth_service,
    get_permission_resolver,
    get_permission_service,
    get_role_service,
    get_token_service,
    get_user_service,
)

__all__ = [
    "AuthSecurity",
    "CurrentClaims",
    "authenticate",
    "authorize",
    "get_auth_security",
    "get_auth_service",
    "get_permission_resolver",
    "get_permission_service",
    "get_role_service",
    "get_token_service",
    "get_user_service",
    "optional_authenticate",
]
