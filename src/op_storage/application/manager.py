"""StorageManager: namespacing and TTL semantics on top of a StorageDriver.

Every record is written as an envelope::

    {"timestamp": "<ISO-8601>", "data": <payload>, "ttl": <seconds> | null}

under ``prefix + key``. A record is expired when ``ttl > 0`` and
``now - timestamp > ttl`` (whole seconds).

retrieve() and get_info() deliberately differ on expired records:
  - retrieve() deletes the record and reports a miss;
  - get_info() reports ``is_expired=True`` and leaves the record in place,
    so it can be used to inspect the cache without changing it.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any
from urllib.parse import quote

from src.op_common.datetime_utils import format_clock, parse_iso, utc_now
from src.op_storage.domain.driver import StorageDriver
from src.op_storage.domain.models import RecordInfo

logger = logging.getLogger("op.storage")


class StorageManager:
    def __init__(
        self,
        driver: StorageDriver,
        prefix: str = "",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._driver = driver
        self._prefix = prefix
        self._clock = clock

    @property
    def driver(self) -> StorageDriver:
        return self._driver

    @property
    def prefix(self) -> str:
        return self._prefix

    async def store(self, key: str, data: Any, ttl: int | None = None) -> bool:
        envelope = {
            "timestamp": self._clock().isoformat(timespec="seconds"),
            "data": data,
            "ttl": ttl,
        }
        return await self._driver.set(self._prefix + key, envelope, ttl)

    async def retrieve(self, key: str) -> Any | None:
        envelope = await self._driver.get(self._prefix + key)
        if envelope is None:
            return None

        written_at = _written_at(envelope, key)
        if written_at is None:
            return None

        ttl = _ttl(envelope)
        if ttl > 0 and self._age(written_at) > ttl:
            await self.delete(key)
            return None

        return envelope.get("data")

    async def delete(self, key: str) -> bool:
        return await self._driver.delete(self._prefix + key)

    async def exists(self, key: str) -> bool:
        return await self._driver.exists(self._prefix + key)

    async def clear(self, pattern: str = "*") -> bool:
        return await self._driver.clear(self._prefix + pattern)

    async def get_info(self, key: str) -> RecordInfo | None:
        """Metadata for ``key``; reports expired records without removing them."""
        envelope = await self._driver.get(self._prefix + key)
        if envelope is None:
            return None

        written_at = _written_at(envelope, key)
        if written_at is None:
            return None

        age = self._age(written_at)
        ttl = _ttl(envelope)
        expires_in = max(0, ttl - age) if ttl > 0 else None

        return RecordInfo(
            key=key,
            timestamp=envelope["timestamp"],
            age=age,
            age_human=format_clock(age),
            ttl=ttl,
            is_expired=ttl > 0 and age > ttl,
            expires_in=expires_in,
            expires_in_human=format_clock(expires_in) if expires_in is not None else None,
            size=await self._driver.size(self._prefix + key),
        )

    @staticmethod
    def user_key(user_id: str, kind: str) -> str:
        return f"user_{key_segment(user_id)}_{kind}"

    @staticmethod
    def user_pattern(user_id: str) -> str:
        """Glob matching every record of one user, and no other user's."""
        return f"user_{key_segment(user_id)}_*"

    @staticmethod
    def global_key(kind: str) -> str:
        return f"global_{kind}"

    async def close(self) -> None:
        await self._driver.close()

    def _age(self, written_at: datetime) -> int:
        return int(self._clock().timestamp()) - int(written_at.timestamp())


def _written_at(envelope: dict[str, Any], key: str) -> datetime | None:
    raw = envelope.get("timestamp")
    if not isinstance(raw, str):
        logger.warning("Storage: record %s has no timestamp, treating as miss", key)
        return None
    try:
        return parse_iso(raw)
    except ValueError:
        logger.warning("Storage: record %s has malformed timestamp %r", key, raw)
        return None


def _ttl(envelope: dict[str, Any]) -> int:
    try:
        return int(envelope.get("ttl") or 0)
    except (TypeError, ValueError):
        return 0


def key_segment(value: str) -> str:
    """Percent-encode an id for use inside a key.

    The result holds no "_" (the key separator), no path separators and no
    glob metacharacters, so ``user_<segment>_*`` cannot match another id.
    """
    return quote(value, safe="").replace("_", "%5F")
