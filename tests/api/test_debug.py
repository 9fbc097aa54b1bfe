"""
Tests for /api/debug and /health: configuration and connectivity reporting.
"""

from httpx import ASGITransport, AsyncClient

from vmdash.config import Settings
from vmdash.main import create_app


class TestDebugEndpoint:
    async def test_reports_table_and_count(self, client: AsyncClient):
        await client.post(
            "/api/vms",
            json={
                "name": "diag-01",
                "region": "US West (Oregon)",
                "status": "Idling",
                "ipAddress": "52.89.123.45",
            },
        )
        resp = await client.get("/api/debug")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "success"
        assert data["database"]["connected"] is True
        assert data["database"]["vmsTableExists"] is True
        assert data["database"]["vmCount"] == 1
        assert data["database"]["dialect"] == "sqlite"

    async def test_reports_missing_database_url(self, unconfigured_client: AsyncClient):
        resp = await unconfigured_client.get("/api/debug")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "error"
        assert data["message"] == "DATABASE_URL environment variable is not set"
        assert data["database"]["configured"] is False


class TestHealth:
    async def test_healthy_with_reachable_database(self):
        app = create_app(Settings(database_url="sqlite+aiosqlite:///:memory:", _env_file=None))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/health")
        await app.state.database.dispose()
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
