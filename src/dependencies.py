"""Dependency providers for FastAPI routers.

Long-lived collaborators (storage manager, upstream client) are built once in
the application lifespan and kept on ``app.state``; request-scoped services
are assembled from them here. Tests replace any of these through
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from config.settings import Settings, get_settings
from src.op_broker.domain.client import BrokerClientProtocol
from src.op_cache.application.service import CacheService
from src.op_common.errors import InternalError
from src.op_gateway.auth.service import AuthService
from src.op_portfolio.application.accounts import AccountsLoader
from src.op_portfolio.application.service import PortfolioService
from src.op_storage.application.manager import StorageManager

_portfolio_service = PortfolioService()


def get_storage_manager(request: Request) -> StorageManager:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise InternalError("Storage is not initialised")
    return storage


def get_broker_client(request: Request) -> BrokerClientProtocol:
    broker = getattr(request.app.state, "broker", None)
    if broker is None:
        raise InternalError("Upstream client is not initialised")
    return broker


def get_cache_service(
    storage: Annotated[StorageManager, Depends(get_storage_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CacheService:
    return CacheService(storage, default_ttl=settings.CACHE_TTL, enabled=settings.CACHE_ENABLED)


def get_portfolio_service() -> PortfolioService:
    return _portfolio_service


def get_accounts_loader(
    cache: Annotated[CacheService, Depends(get_cache_service)],
    client: Annotated[BrokerClientProtocol, Depends(get_broker_client)],
) -> AccountsLoader:
    return AccountsLoader(cache, client)


def get_auth_service(
    client: Annotated[BrokerClientProtocol, Depends(get_broker_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(client, settings)
