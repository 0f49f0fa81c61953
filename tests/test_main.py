"""
Test suite for the FastAPI application: health probes, request correlation,
error handlers and settings parsing.
"""

import pytest
from fastapi import status
from httpx import AsyncClient
from pydantic import ValidationError

from stockroom.core.config import Settings


# ============================================================================
# Health Endpoints
# ============================================================================


class TestHealthEndpoints:
    """Test suite for health, readiness and liveness endpoints."""

    @pytest.mark.asyncio
    async def test_health_check_returns_200(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "test"
        assert "version" in data

    @pytest.mark.asyncio
    async def test_readiness_checks_database(self, async_client: AsyncClient):
        """
        Readiness runs a trivial query through the request session and
        reports the database as healthy.
        """
        response = await async_client.get("/ready")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ready"
        assert data["dependencies_ready"] is True
        assert data["database"] == "healthy"

    @pytest.mark.parametrize(
        "endpoint,expected_status",
        [
            ("/health", "healthy"),
            ("/ready", "ready"),
            ("/live", "alive"),
        ],
    )
    @pytest.mark.asyncio
    async def test_health_endpoints_status_values(
        self, async_client: AsyncClient, endpoint: str, expected_status: str
    ):
        response = await async_client.get(endpoint)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == expected_status


# ============================================================================
# Middleware
# ============================================================================


class TestRequestCorrelation:
    """Test suite for the request logging middleware."""

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, async_client: AsyncClient):
        response = await async_client.get(
            "/health", headers={"X-Request-ID": "req-123"}
        )

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_missing(self, async_client: AsyncClient):
        first = await async_client.get("/live")
        second = await async_client.get("/live")

        assert first.headers["X-Request-ID"]
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


# ============================================================================
# Exception Handlers
# ============================================================================


class TestExceptionHandlers:
    """Test suite for structured error responses."""

    @pytest.mark.asyncio
    async def test_validation_error_structure(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/orders", json={"quantity": "many"}, headers={"X-Request-ID": "bad-1"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error"] == "Validation Error"
        assert data["request_id"] == "bad-1"
        assert {tuple(d["loc"]) for d in data["details"]} >= {
            ("body", "product_id"),
            ("body", "quantity"),
        }

    @pytest.mark.asyncio
    async def test_unknown_route_returns_404(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/nothing-here")
        assert response.status_code == status.HTTP_404_NOT_FOUND


# ============================================================================
# Settings
# ============================================================================


class TestSettings:
    """Test suite for environment driven settings."""

    def test_cors_origins_accept_comma_separated_string(self):
        settings = Settings(cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_unsupported_database_url_rejected(self):
        with pytest.raises(ValidationError):
            Settings(database_url="mysql://root@localhost/stock")

    def test_sqlite_rejected_in_production(self):
        with pytest.raises(ValidationError, match="not supported in production"):
            Settings(
                database_url="sqlite+aiosqlite:///./stock.db", environment="production"
            )

    @pytest.mark.parametrize(
        "database_url",
        ["sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite://"],
    )
    def test_memory_sqlite_only_for_tests(self, database_url):
        with pytest.raises(ValidationError, match="only supported in the test environment"):
            Settings(database_url=database_url, environment="development")

        assert Settings(database_url=database_url, environment="test").is_sqlite

    def test_postgres_accepted_in_production(self):
        settings = Settings(
            database_url="postgresql://app@db:5432/stockroom", environment="production"
        )
        assert settings.is_production is True

    def test_sqlite_detection(self):
        settings = Settings(database_url="sqlite+aiosqlite:///./stock.db")

        assert settings.is_sqlite is True
        assert settings.csv_max_file_size_bytes == 10 * 1024 * 1024
