"""Auth and token dependencies (composition root).

authenticate verifies the bearer token only; it never reads the database.
Whatever roles and permissions the token carried at issue time are what the
authorization chain sees.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rolegate.application.services.authorization_service import (
    Predicate,
    RequestContext,
    evaluate_chain,
)
from rolegate.core.config import get_settings
from rolegate.domain.exceptions import AuthenticationException, RolegateException
from rolegate.domain.value_objects import TokenClaims
from rolegate.infrastructure.security.jwt import (
    create_access_token,
    create_refresh_token,
    verify_access_token,
    verify_refresh_token,
)
from rolegate.infrastructure.security.password import (
    get_dummy_hash,
    get_password_hash,
    validate_password_strength,
    verify_password,
)

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


class AuthSecurity:
    """Token signing and password hashing provided via DI (no direct infra imports in services)."""

    def hash_password(self, password: str) -> str:
        return get_password_hash(password, rounds=get_settings().password_hash_rounds)

    def verify_password(self, password: str, hashed_password: str) -> bool:
        return verify_password(password, hashed_password)

    def validate_password(self, password: str) -> list[str]:
        return validate_password_strength(password)

    async def dummy_hash(self) -> str:
        return await get_dummy_hash()

    def create_access_token(self, claims: TokenClaims) -> str:
        return create_access_token(claims)

    def create_refresh_token(self, claims: TokenClaims) -> str:
        return create_refresh_token(claims)

    def verify_access_token(self, token: str) -> TokenClaims:
        return verify_access_token(token)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return verify_refresh_token(token)


def get_auth_security() -> AuthSecurity:
    """Token creation and password hashing (composition root)."""
    return AuthSecurity()


def _bind_claims(request: Request, claims: TokenClaims) -> None:
    request.state.claims = claims


async def authenticate(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    security: Annotated[AuthSecurity, Depends(get_auth_security)],
) -> TokenClaims:
    """Verify the bearer access token and bind its claims to the request.

    Raises:
        AuthenticationException: Header missing or not a bearer token.
        TokenExpiredException: Token expired.
        InvalidTokenException: Bad signature, wrong token type or malformed claims.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("No token provided")
    claims = security.verify_access_token(credentials.credentials)
    _bind_claims(request, claims)
    return claims


async def optional_authenticate(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    security: Annotated[AuthSecurity, Depends(get_auth_security)],
) -> TokenClaims | None:
    """Return claims when a valid token is present; otherwise None. Never fails the request."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        claims = security.verify_access_token(credentials.credentials)
    except RolegateException as exc:
        logger.debug("Ignoring unusable token on optional route: %s", exc.message)
        return None
    _bind_claims(request, claims)
    return claims


def authorize(*predicates: Predicate) -> Callable[..., Awaitable[TokenClaims]]:
    """Dependency factory: authenticate, then run predicates in order (first denial wins)."""

    async def _authorize(
        request: Request,
        claims: Annotated[TokenClaims, Depends(authenticate)],
    ) -> TokenClaims:
        context = RequestContext(claims=claims, path_params=dict(request.path_params))
        evaluate_chain(context, *predicates)
        return claims

    return _authorize


CurrentClaims = Annotated[TokenClaims, Depends(authenticate)]
