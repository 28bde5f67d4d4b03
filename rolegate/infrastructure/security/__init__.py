"""Security: JWT tokens, password hashing, and strength policy."""

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

__all__ = [
    "create_access_token",
    "create_refresh_token",
    "get_dummy_hash",
    "get_password_hash",
    "validate_password_strength",
    "verify_access_token",
    "verify_password",
    "verify_refresh_token",
]
