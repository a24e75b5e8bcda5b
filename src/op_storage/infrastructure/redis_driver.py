"""RedisStorageDriver: documents stored as JSON strings, one key each.

When a TTL is given the key also gets a native Redis expiry of
``ttl + expire_grace`` seconds. That only bounds memory: expiry correctness
is decided by StorageManager from the stored timestamp, and the grace period
keeps expired-but-unread records visible to StorageManager.get_info.
"""

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger("op.storage")

_SCAN_BATCH = 500


class RedisStorageDriver:
    def __init__(self, client: aioredis.Redis, expire_grace: int = 86400) -> None:
        self._redis = client
        self._expire_grace = expire_grace

    async def set(self, key: str, document: dict[str, Any], ttl: int | None = None) -> bool:
        try:
            payload = json.dumps(document, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("Redis storage: document for %s is not JSON-serializable: %s", key, exc)
            return False
        expire = ttl + self._expire_grace if ttl and ttl > 0 else None
        try:
            await self._redis.set(key, payload, ex=expire)
        except RedisError as exc:
            logger.warning("Redis storage: SET failed for %s: %s", key, exc)
            return False
        return True

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = await self._redis.get(key)
        except RedisError as exc:
            logger.warning("Redis storage: GET failed for %s: %s", key, exc)
            return None
        except UnicodeDecodeError:
            logger.warning("Redis storage: undecodable value under %s, treating as miss", key)
            return None
        if raw is None:
            return None
        try:
            document = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Redis storage: corrupt JSON under %s, treating as miss", key)
            return None
        return document if isinstance(document, dict) else None

    async def delete(self, key: str) -> bool:
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            logger.warning("Redis storage: DEL failed for %s: %s", key, exc)
            return False
        return True

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(key))
        except RedisError as exc:
            logger.warning("Redis storage: EXISTS failed for %s: %s", key, exc)
            return False

    async def clear(self, pattern: str = "*") -> bool:
        try:
            batch: list[str] = []
            async for key in self._redis.scan_iter(match=pattern, count=_SCAN_BATCH):
                batch.append(key)
                if len(batch) >= _SCAN_BATCH:
                    await self._redis.delete(*batch)
                    batch = []
            if batch:
                await self._redis.delete(*batch)
        except RedisError as exc:
            logger.warning("Redis storage: clear failed for pattern %s: %s", pattern, exc)
            return False
        return True

    async def size(self, key: str) -> int:
        try:
            return int(await self._redis.strlen(key))
        except RedisError as exc:
            logger.warning("Redis storage: STRLEN failed for %s: %s", key, exc)
            return 0

    async def close(self) -> None:
        await self._redis.aclose()
