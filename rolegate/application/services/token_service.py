"""Token application service: issue, verify and refresh access/refresh token pairs."""

from __future__ import annotations

import logging

from rolegate.application.dtos.token import TokenPair
from rolegate.application.interfaces.repositories import IUserRepository
from rolegate.application.interfaces.services import IPermissionResolver, ISecurityService
from rolegate.domain.exceptions import AuthenticationException
from rolegate.domain.value_objects import TokenClaims

logger = logging.getLogger(__name__)

_MSG_INVALID_REFRESH = "Invalid refresh token"


class TokenService:
    """Issues token pairs that snapshot the identity's current role/permission closure.

    Issued tokens are authoritative until expiry: later graph changes only
    reach the caller through refresh or a new login.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        permission_resolver: IPermissionResolver,
        security: ISecurityService,
    ) -> None:
        self._user_repo = user_repo
        self._resolver = permission_resolver
        self._security = security

    async def resolve_claims(self, identity_id: str, email: str) -> TokenClaims:
        """Build a claim snapshot from the identity's roles and their permission union."""
        roles = await self._resolver.get_user_role_names(identity_id)
        permissions = await self._resolver.get_user_permissions(identity_id)
        return TokenClaims.build(identity_id, email, roles, permissions)

    def sign_pair(self, claims: TokenClaims) -> TokenPair:
        return TokenPair(
            access_token=self._security.create_access_token(claims),
            refresh_token=self._security.create_refresh_token(claims),
        )

    async def issue_token_pair(self, identity_id: str) -> TokenPair:
        """Resolve the current closure and issue both tokens with it.

        Raises:
            AuthenticationException: If the identity does not exist.
        """
        user = await self._user_repo.get_by_id(identity_id)
        if not user:
            raise AuthenticationException("Invalid credentials")
        claims = await self.resolve_claims(user.id, user.email)
        return self.sign_pair(claims)

    def verify_access_token(self, token: str) -> TokenClaims:
        """Return claims or raise TokenExpiredException / InvalidTokenException."""
        return self._security.verify_access_token(token)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        """Return claims or raise TokenExpiredException / InvalidTokenException."""
        return self._security.verify_refresh_token(token)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Verify the refresh token and issue a new pair from the current graph.

        Claims in the old token are not reused. A deleted or inactive identity
        fails as Unauthorized so refresh never reveals whether an id exists.
        """
        old_claims = self._security.verify_refresh_token(refresh_token)
        user = await self._user_repo.get_by_id(old_claims.identity_id)
        if not user or not user.is_active:
            logger.info("Refresh rejected for identity %s", old_claims.identity_id)
            raise AuthenticationException(_MSG_INVALID_REFRESH)
        claims = await self.resolve_claims(user.id, user.email)
        return self.sign_pair(claims)
