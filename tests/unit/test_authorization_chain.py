"""Tests for authorization predicates and the chain evaluator."""

import pytest

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
from rolegate.domain.exceptions import AuthenticationException, AuthorizationException
from rolegate.domain.value_objects import TokenClaims


def _ctx(
    identity_id: str = "u1",
    roles: tuple[str, ...] = ("user",),
    permissions: tuple[str, ...] = (),
    **path_params: str,
) -> RequestContext:
    claims = TokenClaims.build(identity_id, f"{identity_id}@example.com", roles, permissions)
    return RequestContext(claims=claims, path_params=path_params)


def test_anonymous_context_is_unauthorized() -> None:
    """Every predicate requires claims before deciding anything else."""
    anonymous = RequestContext(claims=None)
    for predicate in (
        require_authenticated(),
        require_role("admin"),
        require_permission("users:read"),
        require_super_admin(),
    ):
        with pytest.raises(AuthenticationException, match="Authentication required"):
            predicate(anonymous)


def test_require_authenticated_allows_any_identity() -> None:
    require_authenticated()(_ctx(roles=()))


class TestRequirePermission:
    def test_any_one_suffices(self) -> None:
        require_permission("users:read", "users:update")(_ctx(permissions=("users:update",)))

    def test_denies_with_listed_permissions(self) -> None:
        with pytest.raises(AuthorizationException) as exc_info:
            require_permission("users:read", "users:update")(_ctx(permissions=("roles:read",)))
        assert exc_info.value.message == (
            "Requires one of these permissions: users:read, users:update"
        )
        assert exc_info.value.details["required_permissions"] == ["users:read", "users:update"]


class TestRequireAllPermissions:
    def test_superset_allows(self) -> None:
        require_all_permissions("a:read", "a:update")(
            _ctx(permissions=("a:read", "a:update", "b:read"))
        )

    def test_partial_denies_with_missing(self) -> None:
        with pytest.raises(AuthorizationException) as exc_info:
            require_all_permissions("a:read", "a:update")(_ctx(permissions=("a:read",)))
        assert exc_info.value.details["missing_permissions"] == ["a:update"]


def test_require_role() -> None:
    require_role("admin", "manager")(_ctx(roles=("manager",)))
    with pytest.raises(AuthorizationException, match="Requires one of these roles: admin"):
        require_role("admin")(_ctx(roles=("user",)))


def test_require_super_admin() -> None:
    require_super_admin()(_ctx(roles=("super_admin",)))
    with pytest.raises(AuthorizationException, match="Super admin access required"):
        require_super_admin()(_ctx(roles=("admin",), permissions=("users:delete",)))


class TestOwnership:
    def test_owner_is_allowed_without_permission(self) -> None:
        """u1 reading u1 needs no permission."""
        require_owner_or_permission("users:read")(_ctx("u1", user_id="u1"))

    def test_other_subject_is_forbidden(self) -> None:
        """u1 reading u2 without users:read is denied."""
        with pytest.raises(AuthorizationException) as exc_info:
            require_owner_or_permission("users:read")(_ctx("u1", user_id="u2"))
        assert exc_info.value.message == (
            "You can only access your own resources or need specific permission"
        )

    def test_permission_overrides_ownership(self) -> None:
        require_owner_or_permission("users:read")(
            _ctx("u1", permissions=("users:read",), user_id="u2")
        )

    def test_custom_path_param(self) -> None:
        require_owner_or_permission("users:read", param="owner_id")(
            _ctx("u1", owner_id="u1")
        )


class TestEvaluateChain:
    def test_all_allow(self) -> None:
        evaluate_chain(
            _ctx(roles=("admin",), permissions=("roles:read",)),
            require_authenticated(),
            require_role("admin"),
            require_permission("roles:read"),
        )

    def test_first_denial_stops_chain(self) -> None:
        """Predicates after the first denial never run."""
        calls: list[str] = []

        def record(context: RequestContext) -> None:
            calls.append("ran")

        with pytest.raises(AuthorizationException, match="roles"):
            evaluate_chain(_ctx(roles=("user",)), require_role("admin"), record)
        assert calls == []

    def test_empty_chain_allows(self) -> None:
        evaluate_chain(RequestContext(claims=None))
