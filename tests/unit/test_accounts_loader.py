"""Unit tests for AccountsLoader cache-first behaviour."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.op_broker.domain.session import BrokerSession
from src.op_cache.application.service import CacheService
from src.op_common.errors import UpstreamFetchError
from src.op_portfolio.application.accounts import AccountsLoader
from src.op_portfolio.domain.models import Account, Position
from src.op_storage.application.manager import StorageManager
from src.op_storage.infrastructure.file_driver import FileStorageDriver

SESSION = BrokerSession("alice", "tok")
ACCOUNTS = [
    Account(
        "A1",
        "PEA",
        1000.0,
        (Position(isin_code="FR0000120271", weight=100.0, performance=5.0, valuation_date="2026-01-02T00:00:00"),),
    )
]


@pytest.fixture
def cache(tmp_path: Path, clock) -> CacheService:
    return CacheService(StorageManager(FileStorageDriver(tmp_path), clock=clock), default_ttl=3600)


@pytest.fixture
def client() -> AsyncMock:
    mock = AsyncMock()
    mock.fetch_accounts_with_positions.return_value = ACCOUNTS
    return mock


async def test_miss_fetches_and_caches(cache, client) -> None:
    loader = AccountsLoader(cache, client)

    assert await loader.load(SESSION) == ACCOUNTS
    assert await loader.load(SESSION) == ACCOUNTS

    client.fetch_accounts_with_positions.assert_awaited_once_with(SESSION)
    assert await loader.cached("alice") == ACCOUNTS


async def test_expired_entry_refetches(cache, client, clock) -> None:
    loader = AccountsLoader(cache, client)
    await loader.load(SESSION)
    clock.advance(3601)

    await loader.load(SESSION)

    assert client.fetch_accounts_with_positions.await_count == 2


async def test_cached_miss(cache, client) -> None:
    assert await AccountsLoader(cache, client).cached("alice") is None
    client.fetch_accounts_with_positions.assert_not_awaited()


async def test_cached_wrong_shape_is_miss(cache, client) -> None:
    await cache.set_user_accounts("alice", {"accountNumber": "A1"})
    assert await AccountsLoader(cache, client).cached("alice") is None


async def test_refresh_always_fetches(cache, client) -> None:
    loader = AccountsLoader(cache, client)
    await loader.load(SESSION)

    assert await loader.refresh(SESSION) == ACCOUNTS
    assert client.fetch_accounts_with_positions.await_count == 2


async def test_upstream_error_propagates(cache, client) -> None:
    client.fetch_accounts_with_positions.side_effect = UpstreamFetchError("down")
    with pytest.raises(UpstreamFetchError):
        await AccountsLoader(cache, client).load(SESSION)
    assert await cache.get_user_accounts("alice") is None
