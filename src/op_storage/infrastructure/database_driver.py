"""DatabaseStorageDriver: documents stored as JSON text in cache_storage.

Writes are a single upsert on the cache_key primary key, so concurrent
writers for the same key resolve to last-writer-wins. ``expires_at`` is
recorded for operators but never filtered on: StorageManager owns expiry.

Each call runs in its own short transaction from the injected session factory.
"""

import json
import logging
from datetime import timedelta
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.op_common.datetime_utils import utc_now

logger = logging.getLogger("op.storage")

# asyncpg raises OSError subclasses (e.g. ConnectionRefusedError) on connect, unwrapped
_DB_ERRORS = (SQLAlchemyError, OSError)

_UPSERT_SQL = text("""
    INSERT INTO cache_storage (cache_key, data, expires_at)
    VALUES (:cache_key, :data, :expires_at)
    ON CONFLICT (cache_key) DO UPDATE
        SET data = EXCLUDED.data,
            expires_at = EXCLUDED.expires_at,
            updated_at = NOW()
""")

_GET_SQL = text("SELECT data FROM cache_storage WHERE cache_key = :cache_key")

_EXISTS_SQL = text("SELECT 1 FROM cache_storage WHERE cache_key = :cache_key")

_DELETE_SQL = text("DELETE FROM cache_storage WHERE cache_key = :cache_key")

_DELETE_ALL_SQL = text("DELETE FROM cache_storage")

_DELETE_LIKE_SQL = text("DELETE FROM cache_storage WHERE cache_key LIKE :pattern ESCAPE '\\'")

_SIZE_SQL = text("SELECT LENGTH(data) FROM cache_storage WHERE cache_key = :cache_key")


def glob_to_like(pattern: str) -> str:
    """Translate a '*' glob into a LIKE pattern, escaping LIKE metacharacters."""
    escaped = pattern.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "%")


class DatabaseStorageDriver:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    async def set(self, key: str, document: dict[str, Any], ttl: int | None = None) -> bool:
        try:
            payload = json.dumps(document, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("DB storage: document for %s is not JSON-serializable: %s", key, exc)
            return False
        expires_at = utc_now() + timedelta(seconds=ttl) if ttl and ttl > 0 else None
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    _UPSERT_SQL,
                    {"cache_key": key, "data": payload, "expires_at": expires_at},
                )
        except _DB_ERRORS as exc:
            logger.warning("DB storage: upsert failed for %s: %s", key, exc)
            return False
        return True

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                raw = (await session.execute(_GET_SQL, {"cache_key": key})).scalar_one_or_none()
        except _DB_ERRORS as exc:
            logger.warning("DB storage: read failed for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            document = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("DB storage: corrupt JSON under %s, treating as miss", key)
            return None
        return document if isinstance(document, dict) else None

    async def delete(self, key: str) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(_DELETE_SQL, {"cache_key": key})
        except _DB_ERRORS as exc:
            logger.warning("DB storage: delete failed for %s: %s", key, exc)
            return False
        return True

    async def exists(self, key: str) -> bool:
        try:
            async with self._session_factory() as session:
                row = (await session.execute(_EXISTS_SQL, {"cache_key": key})).first()
        except _DB_ERRORS as exc:
            logger.warning("DB storage: exists failed for %s: %s", key, exc)
            return False
        return row is not None

    async def clear(self, pattern: str = "*") -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                if pattern == "*":
                    await session.execute(_DELETE_ALL_SQL)
                else:
                    await session.execute(_DELETE_LIKE_SQL, {"pattern": glob_to_like(pattern)})
        except _DB_ERRORS as exc:
            logger.warning("DB storage: clear failed for pattern %s: %s", pattern, exc)
            return False
        return True

    async def size(self, key: str) -> int:
        try:
            async with self._session_factory() as session:
                length = (await session.execute(_SIZE_SQL, {"cache_key": key})).scalar_one_or_none()
        except _DB_ERRORS as exc:
            logger.warning("DB storage: size failed for %s: %s", key, exc)
            return 0
        return int(length or 0)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
