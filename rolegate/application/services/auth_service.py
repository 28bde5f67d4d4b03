"""Auth application service: register, login, refresh and self-service profile."""

from __future__ import annotations

import logging

from rolegate.application.dtos.token import AuthResult
from rolegate.application.dtos.user import UserDetail, UserUpdate
from rolegate.application.services.token_service import TokenService
from rolegate.application.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Composes UserService (credentials) and TokenService (claim snapshots)."""

    def __init__(self, user_service: UserService, token_service: TokenService) -> None:
        self._user_service = user_service
        self._token_service = token_service

    async def _issue(self, user_detail: UserDetail) -> AuthResult:
        user = user_detail.user
        claims = await self._token_service.resolve_claims(user.id, user.email)
        return AuthResult(user=user_detail, tokens=self._token_service.sign_pair(claims))

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> AuthResult:
        """Create a self-registered identity with the default role and issue tokens."""
        detail = await self._user_service.create_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        logger.info("User registered: %s", detail.user.id)
        return await self._issue(detail)

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and issue a token pair with the current closure."""
        user = await self._user_service.verify_credentials(email, password)
        detail = await self._user_service.get_user(user.id)
        logger.info("User logged in: %s", user.id)
        return await self._issue(detail)

    async def refresh(self, refresh_token: str) -> AuthResult:
        """Exchange a refresh token for a new pair built from the current graph."""
        tokens = await self._token_service.refresh(refresh_token)
        claims = self._token_service.verify_access_token(tokens.access_token)
        detail = await self._user_service.get_user(claims.identity_id)
        return AuthResult(user=detail, tokens=tokens)

    async def get_profile(self, user_id: str) -> UserDetail:
        return await self._user_service.get_user(user_id)

    async def update_profile(
        self,
        user_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        avatar_url: str | None = None,
    ) -> UserDetail:
        """Self-service update; email and active flag are admin-only fields."""
        return await self._user_service.update_user(
            user_id,
            UserUpdate(first_name=first_name, last_name=last_name, avatar_url=avatar_url),
        )

    async def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> None:
        await self._user_service.change_password(user_id, current_password, new_password)
