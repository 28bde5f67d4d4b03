"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rolegate.application.dtos.permission import PermissionGrant
    from rolegate.domain.value_objects import TokenClaims


# Permission resolver interface
class IPermissionResolver(Protocol):
    """Protocol for resolving an identity's role and permission closure."""

    async def get_user_role_names(self, user_id: str) -> set[str]:
        """Return names of every role the user holds."""

    async def get_user_permissions(self, user_id: str) -> set[str]:
        """Return the union of permission names across held roles."""

    async def get_permissions_for_users(self, user_ids: list[str]) -> dict[str, set[str]]:
        """Return the permission closure of each user (users without roles map to an empty set)."""

    async def get_permission_grants(self, user_id: str) -> list[PermissionGrant]:
        """Return held permissions deduplicated by id with the granting role name."""


# Security (hashing and token signing) interface
class ISecurityService(Protocol):
    """Protocol for password hashing and token signing (composition root provides it)."""

    def hash_password(self, password: str) -> str:
        """Return a salted one-way hash."""

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Return True when password matches the hash."""

    def validate_password(self, password: str) -> list[str]:
        """Return every violated strength rule (empty when acceptable)."""

    async def dummy_hash(self) -> str:
        """Return a valid hash used to equalize timing for unknown identities."""

    def create_access_token(self, claims: TokenClaims) -> str:
        """Sign an access token with the access secret."""

    def create_refresh_token(self, claims: TokenClaims) -> str:
        """Sign a refresh token with the refresh secret."""

    def verify_access_token(self, token: str) -> TokenClaims:
        """Return claims or raise TokenExpiredException / InvalidTokenException."""

    def verify_refresh_token(self, token: str) -> TokenClaims:
        """Return claims or raise TokenExpiredException / InvalidTokenException."""
