"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Signing secrets (JWT_SECRET, JWT_REFRESH_SECRET) are
required and validated at load time; there is no default secret.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required: jwt_secret and jwt_refresh_secret must both be set
    and must differ.
    """

    # App
    app_name: str = "rolegate"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Database (empty = SQL not configured; persistence calls raise SqlNotConfiguredException)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Tokens: access and refresh are signed with distinct secrets
    jwt_secret: SecretStr = SecretStr("")
    jwt_refresh_secret: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Passwords: bcrypt work factor
    password_hash_rounds: int = 12

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate signing secrets and hashing cost.

        - JWT_SECRET and JWT_REFRESH_SECRET are required.
        - The two secrets must differ so a refresh token never verifies as access.
        - PASSWORD_HASH_ROUNDS must be within bcrypt's accepted range.
        """
        access_secret = self.jwt_secret.get_secret_value()
        refresh_secret = self.jwt_refresh_secret.get_secret_value()
        if not access_secret:
            raise ValueError(
                "JWT_SECRET is required. Generate with: openssl rand -hex 32."
            )
        if not refresh_secret:
            raise ValueError(
                "JWT_REFRESH_SECRET is required. Generate with: openssl rand -hex 32."
            )
        if access_secret == refresh_secret:
            raise ValueError("JWT_SECRET and JWT_REFRESH_SECRET must be different.")
        if not 4 <= self.password_hash_rounds <= 31:
            raise ValueError(
                f"PASSWORD_HASH_ROUNDS must be between 4 and 31, got {self.password_hash_rounds}"
            )
        if self.access_token_expire_minutes <= 0 or self.refresh_token_expire_days <= 0:
            raise ValueError("Token lifetimes must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
