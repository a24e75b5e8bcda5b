"""Unit tests for RedisStorageDriver with a mocked redis.asyncio client."""

import json
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.op_storage.infrastructure.redis_driver import RedisStorageDriver


def _scan(keys: list[str]):
    async def scan_iter(match: str, count: int) -> AsyncIterator[str]:
        for key in keys:
            yield key

    return scan_iter


@pytest.fixture
def redis_mock() -> AsyncMock:
    return AsyncMock()


class TestSet:
    async def test_set_with_ttl_adds_grace_expiry(self, redis_mock: AsyncMock) -> None:
        driver = RedisStorageDriver(redis_mock, expire_grace=100)
        assert await driver.set("k", {"v": 1}, ttl=60) is True
        redis_mock.set.assert_awaited_once_with("k", json.dumps({"v": 1}), ex=160)

    async def test_set_without_ttl_has_no_expiry(self, redis_mock: AsyncMock) -> None:
        driver = RedisStorageDriver(redis_mock)
        await driver.set("k", {"v": 1})
        assert redis_mock.set.await_args.kwargs["ex"] is None

    async def test_set_failure_returns_false(self, redis_mock: AsyncMock) -> None:
        redis_mock.set.side_effect = RedisConnectionError("down")
        driver = RedisStorageDriver(redis_mock)
        assert await driver.set("k", {"v": 1}, ttl=10) is False


class TestGet:
    async def test_get_decodes_json(self, redis_mock: AsyncMock) -> None:
        redis_mock.get.return_value = '{"data": [1], "ttl": 5}'
        driver = RedisStorageDriver(redis_mock)
        assert await driver.get("k") == {"data": [1], "ttl": 5}

    async def test_get_missing(self, redis_mock: AsyncMock) -> None:
        redis_mock.get.return_value = None
        assert await RedisStorageDriver(redis_mock).get("k") is None

    async def test_get_corrupt_is_miss(self, redis_mock: AsyncMock) -> None:
        redis_mock.get.return_value = "{oops"
        assert await RedisStorageDriver(redis_mock).get("k") is None

    async def test_get_failure_is_miss(self, redis_mock: AsyncMock) -> None:
        redis_mock.get.side_effect = RedisConnectionError("down")
        assert await RedisStorageDriver(redis_mock).get("k") is None

    async def test_get_invalid_utf8_is_miss(self, redis_mock: AsyncMock) -> None:
        raw = b'{"data": "\xff"}'
        redis_mock.get.side_effect = UnicodeDecodeError("utf-8", raw, 10, 11, "invalid start byte")
        assert await RedisStorageDriver(redis_mock).get("k") is None


class TestOtherOps:
    async def test_exists(self, redis_mock: AsyncMock) -> None:
        redis_mock.exists.return_value = 1
        assert await RedisStorageDriver(redis_mock).exists("k") is True

    async def test_delete_failure_returns_false(self, redis_mock: AsyncMock) -> None:
        redis_mock.delete.side_effect = RedisConnectionError("down")
        assert await RedisStorageDriver(redis_mock).delete("k") is False

    async def test_size_uses_strlen(self, redis_mock: AsyncMock) -> None:
        redis_mock.strlen.return_value = 42
        assert await RedisStorageDriver(redis_mock).size("k") == 42

    async def test_clear_deletes_scanned_keys(self, redis_mock: AsyncMock) -> None:
        redis_mock.scan_iter = _scan(["p_user_u1_a", "p_user_u1_b"])
        driver = RedisStorageDriver(redis_mock)
        assert await driver.clear("p_user_u1_*") is True
        redis_mock.delete.assert_awaited_once_with("p_user_u1_a", "p_user_u1_b")

    async def test_clear_nothing_matched(self, redis_mock: AsyncMock) -> None:
        redis_mock.scan_iter = _scan([])
        assert await RedisStorageDriver(redis_mock).clear("x*") is True
        redis_mock.delete.assert_not_awaited()
