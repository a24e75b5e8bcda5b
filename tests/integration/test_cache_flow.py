"""Integration tests for the /cache endpoints."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from src.op_storage.application.manager import StorageManager


class TestCacheInfo:
    async def test_info_empty(self, auth_client: AsyncClient) -> None:
        resp = await auth_client.get("/api/v1/cache/info")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["cache_key"] == "user_alice_accounts"
        assert data["cache_exists"] is False
        assert data["accounts_count"] == 0

    async def test_info_after_load(self, auth_client: AsyncClient) -> None:
        await auth_client.get("/api/v1/accounts")
        data = (await auth_client.get("/api/v1/cache/info")).json()["data"]
        assert data["cache_exists"] is True
        assert data["is_expired"] is False
        assert data["accounts_count"] == 1
        assert data["cache_ttl"] == 3600
        assert data["size_bytes"] > 0


class TestInvalidate:
    async def test_delete_forces_refetch(self, auth_client: AsyncClient, broker: AsyncMock) -> None:
        await auth_client.get("/api/v1/accounts")

        resp = await auth_client.delete("/api/v1/cache")
        assert resp.status_code == 200
        assert resp.json()["data"]["success"] is True

        overview = await auth_client.get("/api/v1/portfolio/overview")
        assert overview.status_code == 404

        await auth_client.get("/api/v1/accounts")
        assert broker.fetch_accounts_with_positions.await_count == 2

    async def test_delete_keeps_other_users(self, auth_client: AsyncClient, storage: StorageManager) -> None:
        await storage.store("user_bob_accounts", [], ttl=3600)
        await auth_client.delete("/api/v1/cache")
        assert await storage.exists("user_bob_accounts") is True


class TestRefresh:
    async def test_refresh_fetches_and_caches(self, auth_client: AsyncClient, broker: AsyncMock) -> None:
        await auth_client.get("/api/v1/accounts")

        resp = await auth_client.post("/api/v1/cache/refresh")

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Cache refreshed successfully"
        assert body["data"]["accounts_count"] == 1
        assert broker.fetch_accounts_with_positions.await_count == 2

        overview = await auth_client.get("/api/v1/portfolio/overview")
        assert overview.status_code == 200
