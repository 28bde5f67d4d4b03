"""Authorization chain: pure decision predicates over verified token claims.

Each predicate takes a RequestContext and either returns None (allow) or
raises (deny). evaluate_chain runs predicates in order and stops at the first
denial. No predicate verifies tokens or touches the database; the claims are
whatever snapshot the token carried when it was issued.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from rolegate.domain.exceptions import AuthenticationException, AuthorizationException
from rolegate.domain.value_objects import TokenClaims

_MSG_AUTH_REQUIRED = "Authentication required"


@dataclass(frozen=True)
class RequestContext:
    """Verified claims (None when anonymous) plus request-addressed identifiers."""

    claims: TokenClaims | None
    path_params: Mapping[str, str] = field(default_factory=dict)


Predicate = Callable[[RequestContext], None]


def _require_claims(context: RequestContext) -> TokenClaims:
    if context.claims is None:
        raise AuthenticationException(_MSG_AUTH_REQUIRED)
    return context.claims


def require_authenticated() -> Predicate:
    """Allow any verified identity."""

    def _check(context: RequestContext) -> None:
        _require_claims(context)

    return _check


def require_role(*roles: str) -> Predicate:
    """Allow when claims.roles intersects roles."""
    allowed = frozenset(roles)

    def _check(context: RequestContext) -> None:
        claims = _require_claims(context)
        if claims.roles.isdisjoint(allowed):
            raise AuthorizationException(
                f"Requires one of these roles: {', '.join(roles)}",
                details={"required_roles": list(roles)},
            )

    return _check


def require_permission(*permissions: str) -> Predicate:
    """Allow when claims.permissions intersects permissions (any one suffices)."""
    allowed = frozenset(permissions)

    def _check(context: RequestContext) -> None:
        claims = _require_claims(context)
        if claims.permissions.isdisjoint(allowed):
            raise AuthorizationException(
                f"Requires one of these permissions: {', '.join(permissions)}",
                details={"required_permissions": list(permissions)},
            )

    return _check


def require_all_permissions(*permissions: str) -> Predicate:
    """Allow only when claims.permissions is a superset of permissions."""
    required = frozenset(permissions)

    def _check(context: RequestContext) -> None:
        claims = _require_claims(context)
        if not required <= claims.permissions:
            raise AuthorizationException(
                f"Requires all of these permissions: {', '.join(permissions)}",
                details={
                    "required_permissions": list(permissions),
                    "missing_permissions": sorted(required - claims.permissions),
                },
            )

    return _check


def require_super_admin() -> Predicate:
    """Allow only identities holding the super_admin role."""

    def _check(context: RequestContext) -> None:
        claims = _require_claims(context)
        if not claims.is_super_admin:
            raise AuthorizationException("Super admin access required")

    return _check


def require_owner_or_permission(permission: str, param: str = "user_id") -> Predicate:
    """Allow when the path-addressed subject is the caller, or the caller holds permission."""

    def _check(context: RequestContext) -> None:
        claims = _require_claims(context)
        if context.path_params.get(param) == claims.identity_id:
            return
        if permission in claims.permissions:
            return
        raise AuthorizationException(
            "You can only access your own resources or need specific permission",
            details={"required_permissions": [permission]},
        )

    return _check


def evaluate_chain(context: RequestContext, *predicates: Predicate) -> None:
    """Run predicates in order; the first denial propagates and ends the chain."""
    for predicate in predicates:
        predicate(context)
