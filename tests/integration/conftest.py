"""Integration-test fixtures.

Each test gets its own application built by create_app(), with the
long-lived collaborators swapped through dependency_overrides:
  - storage is a file-backed StorageManager under tmp_path;
  - the upstream broker is an AsyncMock returning canned accounts.
No external service is needed.
"""

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from config.settings import Settings, get_settings
from src.dependencies import get_broker_client, get_storage_manager
from src.main import create_app
from src.op_broker.domain.session import BrokerSession
from src.op_portfolio.domain.models import Account, Position
from src.op_storage.application.manager import StorageManager
from src.op_storage.infrastructure.file_driver import FileStorageDriver

ACCOUNTS = [
    Account(
        account_number="A1",
        label="PEA",
        value=1000.0,
        positions=(
            Position(
                isin_code="u1",
                label="Unit One",
                market_value=1000.0,
                pmvl=50.0,
                weight=100.0,
                performance=5.0,
                asset_class_code="EQ",
                asset_class="Actions",
                valuation_date="2026-01-02T00:00:00",
            ),
        ),
    )
]


@pytest.fixture
def storage(settings: Settings) -> StorageManager:
    return StorageManager(FileStorageDriver(settings.STORAGE_PATH), prefix=settings.STORAGE_PREFIX)


@pytest.fixture
def broker() -> AsyncMock:
    mock = AsyncMock()
    mock.login.return_value = BrokerSession("alice", "upstream-token", "uuid-1")
    mock.fetch_accounts_with_positions.return_value = ACCOUNTS
    return mock


@pytest.fixture
def app(settings: Settings, storage: StorageManager, broker: AsyncMock) -> FastAPI:
    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_storage_manager] = lambda: storage
    application.dependency_overrides[get_broker_client] = lambda: broker
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Client carrying the Bearer token of a successful login as ``alice``."""
    resp = await client.post("/api/v1/login", json={"user": "alice", "pass": "secret"})
    token = resp.json()["data"]["jwt"]
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client
