"""CacheService: per-user cache of the upstream "accounts" dataset.

Keys are ``user_{user_id}_{kind}`` inside the StorageManager namespace, with
the user id percent-encoded (see StorageManager.user_key).

A failed cache write is logged and reported as False; it never raises, so a
request that already holds fresh upstream data still succeeds.

refresh_user_accounts() does not coordinate concurrent callers: two
refreshes for the same user both hit upstream and the last write wins.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.op_cache.application.schemas import CacheReport
from src.op_storage.application.manager import StorageManager
from src.op_storage.domain.models import RecordInfo

logger = logging.getLogger("op.cache")

ACCOUNTS = "accounts"


class CacheService:
    def __init__(
        self,
        storage: StorageManager,
        default_ttl: int = 3600,
        enabled: bool = True,
    ) -> None:
        self._storage = storage
        self._default_ttl = default_ttl
        self._enabled = enabled

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    async def get_user_accounts(self, user_id: str) -> Any | None:
        if not self._enabled:
            return None
        return await self._storage.retrieve(self._storage.user_key(user_id, ACCOUNTS))

    async def set_user_accounts(self, user_id: str, data: Any, ttl: int | None = None) -> bool:
        if not self._enabled:
            return False
        key = self._storage.user_key(user_id, ACCOUNTS)
        ok = await self._storage.store(key, data, ttl if ttl is not None else self._default_ttl)
        if not ok:
            logger.warning("Cache write failed for user %s, serving uncached data", user_id)
        return ok

    async def invalidate_user(self, user_id: str) -> bool:
        return await self._storage.clear(self._storage.user_pattern(user_id))

    async def invalidate_all(self) -> bool:
        return await self._storage.clear()

    async def refresh_user_accounts(
        self,
        user_id: str,
        fetcher: Callable[[], Awaitable[Any]],
        ttl: int | None = None,
    ) -> Any:
        """Drop the cached accounts, fetch fresh data, store it and return it.

        Errors raised by ``fetcher`` propagate unchanged.
        """
        await self._storage.delete(self._storage.user_key(user_id, ACCOUNTS))
        data = await fetcher()
        await self.set_user_accounts(user_id, data, ttl)
        return data

    async def get_cache_info(self, user_id: str, kind: str = ACCOUNTS) -> RecordInfo | None:
        return await self._storage.get_info(self._storage.user_key(user_id, kind))

    async def get_detailed_cache_info(self, user_id: str) -> CacheReport:
        info = await self.get_cache_info(user_id)
        accounts_count = 0
        if info is not None:
            # get_info never deletes; this read may (lazily) drop an expired record
            data = await self.get_user_accounts(user_id)
            accounts_count = len(data) if isinstance(data, list) else 0
        return CacheReport.build(
            cache_key=self._storage.user_key(user_id, ACCOUNTS),
            default_ttl=self._default_ttl,
            info=info,
            accounts_count=accounts_count,
        )
