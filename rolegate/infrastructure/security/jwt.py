"""JWT access and refresh token creation and verification.

Access and refresh tokens are signed with distinct secrets from
rolegate.core.config. Verification distinguishes an expired token from an
otherwise invalid one so callers can surface the reason.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from rolegate.core.config import get_settings
from rolegate.domain.enums import TokenType
from rolegate.domain.exceptions import InvalidTokenException, TokenExpiredException
from rolegate.domain.value_objects import TokenClaims


def _secret_for(token_type: TokenType) -> str:
    settings = get_settings()
    if token_type is TokenType.REFRESH:
        return settings.jwt_refresh_secret.get_secret_value()
    return settings.jwt_secret.get_secret_value()


def _encode(
    claims: TokenClaims,
    token_type: TokenType,
    expires_delta: timedelta,
) -> str:
    settings = get_settings()
    now = datetime.now(UTC)
    to_encode: dict[str, Any] = claims.to_payload()
    to_encode["type"] = token_type.value
    to_encode["iat"] = now
    to_encode["exp"] = now + expires_delta
    encoded = jwt.encode(
        to_encode,
        _secret_for(token_type),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def create_access_token(
    claims: TokenClaims,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token embedding the claim snapshot.

    Args:
        claims: Identity, email, roles and permissions to embed.
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=get_settings().access_token_expire_minutes)
    return _encode(claims, TokenType.ACCESS, expires_delta)


def create_refresh_token(
    claims: TokenClaims,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed refresh token (refresh secret, long lifetime)."""
    if expires_delta is None:
        expires_delta = timedelta(days=get_settings().refresh_token_expire_days)
    return _encode(claims, TokenType.REFRESH, expires_delta)


def _decode(
    token: str,
    token_type: TokenType,
    expired_message: str,
    invalid_message: str,
) -> TokenClaims:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        raise TokenExpiredException(expired_message) from None
    except JWTError:
        raise InvalidTokenException(invalid_message) from None
    if payload.get("type") != token_type.value:
        raise InvalidTokenException(invalid_message)
    try:
        return TokenClaims.from_payload(payload)
    except ValueError:
        raise InvalidTokenException(invalid_message) from None


def verify_access_token(token: str) -> TokenClaims:
    """Verify and decode an access token.

    Args:
        token: JWT string (e.g. from Authorization header).

    Returns:
        The embedded claim snapshot.

    Raises:
        TokenExpiredException: Signature valid but exp has passed.
        InvalidTokenException: Bad signature, malformed token, wrong type or claims.
    """
    return _decode(token, TokenType.ACCESS, "Token expired", "Invalid token")


def verify_refresh_token(token: str) -> TokenClaims:
    """Verify and decode a refresh token (refresh secret)."""
    return _decode(
        token,
        TokenType.REFRESH,
        "Refresh token expired",
        "Invalid refresh token",
    )
