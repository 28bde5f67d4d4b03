"""Pytest configuration and fixtures for rolegate.

Signing secrets and a cheap bcrypt cost are set before anything imports
rolegate settings. HTTP tests build the app with create_app() and swap the
service dependencies for in-memory fakes; tests marked requires_db use a real
session and are skipped when DATABASE_URL is unset.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-fedcba9876543210")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from rolegate.api.v1.dependencies import (  # noqa: E402
    AuthSecurity,
    get_auth_service,
    get_permission_service,
    get_role_service,
    get_token_service,
    get_user_service,
)
from rolegate.application.services.auth_service import AuthService  # noqa: E402
from rolegate.application.services.permission_service import PermissionService  # noqa: E402
from rolegate.application.services.role_service import RoleService  # noqa: E402
from rolegate.application.services.token_service import TokenService  # noqa: E402
from rolegate.application.services.user_service import UserService  # noqa: E402
from rolegate.core.config import get_settings  # noqa: E402
from rolegate.core.limiter import limiter  # noqa: E402
from rolegate.domain.value_objects import TokenClaims  # noqa: E402
from rolegate.infrastructure.persistence import database  # noqa: E402
from rolegate.main import create_app  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakePermissionRepository,
    FakePermissionResolver,
    FakeRolePermissionRepository,
    FakeRoleRepository,
    FakeUserRepository,
    FakeUserRoleRepository,
    InMemoryStore,
    seed_system_graph,
)


@pytest.fixture(autouse=True)
def _settings_cache():
    """Each test sees settings built from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def security() -> AuthSecurity:
    return AuthSecurity()


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh in-memory graph with system roles and the base permissions."""
    s = InMemoryStore()
    seed_system_graph(s)
    return s


@pytest.fixture
def role_service(store: InMemoryStore) -> RoleService:
    return RoleService(
        role_repo=FakeRoleRepository(store),
        permission_repo=FakePermissionRepository(store),
        role_permission_repo=FakeRolePermissionRepository(store),
        user_role_repo=FakeUserRoleRepository(store),
    )


@pytest.fixture
def permission_service(store: InMemoryStore) -> PermissionService:
    return PermissionService(
        permission_repo=FakePermissionRepository(store),
        role_permission_repo=FakeRolePermissionRepository(store),
    )


@pytest.fixture
def user_service(store: InMemoryStore, security: AuthSecurity) -> UserService:
    return UserService(
        user_repo=FakeUserRepository(store),
        role_repo=FakeRoleRepository(store),
        user_role_repo=FakeUserRoleRepository(store),
        permission_resolver=FakePermissionResolver(store),
        auth_security=security,
    )


@pytest.fixture
def token_service(store: InMemoryStore, security: AuthSecurity) -> TokenService:
    return TokenService(
        user_repo=FakeUserRepository(store),
        permission_resolver=FakePermissionResolver(store),
        security=security,
    )


@pytest.fixture
def auth_service(user_service: UserService, token_service: TokenService) -> AuthService:
    return AuthService(user_service=user_service, token_service=token_service)


@pytest.fixture
def app(
    role_service: RoleService,
    permission_service: PermissionService,
    user_service: UserService,
    token_service: TokenService,
    auth_service: AuthService,
) -> FastAPI:
    """Fresh app whose services run on the in-memory store."""
    application = create_app()
    application.dependency_overrides[get_role_service] = lambda: role_service
    application.dependency_overrides[get_permission_service] = lambda: permission_service
    application.dependency_overrides[get_user_service] = lambda: user_service
    application.dependency_overrides[get_token_service] = lambda: token_service
    application.dependency_overrides[get_auth_service] = lambda: auth_service
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client for the app with rate limiting switched off."""
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def bearer(security: AuthSecurity):
    """Build Authorization headers for an arbitrary claim snapshot."""

    def _make(
        identity_id: str = "user_x",
        roles: tuple[str, ...] = ("user",),
        permissions: tuple[str, ...] = (),
        email: str = "someone@example.com",
    ) -> dict[str, str]:
        claims = TokenClaims.build(identity_id, email, roles, permissions)
        return {"Authorization": f"Bearer {security.create_access_token(claims)}"}

    return _make


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL with the schema migrated (alembic upgrade head).
    Skips when Postgres is not configured; run without DB via:
    pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
