"""Tests for health and readiness endpoints."""

from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from rolegate.infrastructure.persistence.database import get_db


class _Session:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    async def execute(self, statement):
        if self.fail:
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
        return None


async def test_health_returns_200(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data


async def test_readiness_ok(app: FastAPI, client: AsyncClient) -> None:
    app.dependency_overrides[get_db] = lambda: _Session()
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200


async def test_readiness_database_down(app: FastAPI, client: AsyncClient) -> None:
    app.dependency_overrides[get_db] = lambda: _Session(fail=True)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "not_ready", "message": "Database unreachable"}
