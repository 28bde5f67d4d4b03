"""DTOs for token issuance (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolegate.application.dtos.user import UserDetail


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh token issued together with the same claim snapshot."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@dataclass(frozen=True)
class AuthResult:
    """Result of register/login: the identity and its fresh token pair."""

    user: UserDetail
    tokens: TokenPair
