"""FileStorageDriver: one pretty-printed JSON document per key.

Layout: ``<root>/<sanitized key>.json`` where path separators in the key are
replaced by underscores. Writers hold an exclusive flock on the target file
for the duration of the write; readers take a shared lock. The locked
sections run in a worker thread so a contended lock does not block the
event loop.
"""

import asyncio
import fcntl
import json
import logging
from pathlib import Path
from typing import Any

from src.op_common.errors import StorageConfigError

logger = logging.getLogger("op.storage")


class FileStorageDriver:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        try:
            self._root.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageConfigError(f"cannot create storage directory {self._root}: {exc}") from exc

    @property
    def root(self) -> Path:
        return self._root

    async def set(self, key: str, document: dict[str, Any], ttl: int | None = None) -> bool:
        path = self._path(key)
        try:
            payload = json.dumps(document, indent=4, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("File storage: document for %s is not JSON-serializable: %s", key, exc)
            return False
        try:
            await asyncio.to_thread(_write_locked, path, payload)
        except OSError as exc:
            logger.warning("File storage: write failed for %s: %s", key, exc)
            return False
        return True

    async def get(self, key: str) -> dict[str, Any] | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            raw = await asyncio.to_thread(_read_locked, path)
        except OSError as exc:
            logger.warning("File storage: read failed for %s: %s", key, exc)
            return None

        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("File storage: corrupt JSON in %s, treating as miss", path.name)
            return None
        if not isinstance(document, dict):
            logger.warning("File storage: unexpected document type in %s", path.name)
            return None
        return document

    async def delete(self, key: str) -> bool:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("File storage: delete failed for %s: %s", key, exc)
            return False
        return True

    async def exists(self, key: str) -> bool:
        return self._path(key).exists()

    async def clear(self, pattern: str = "*") -> bool:
        success = True
        for path in self._root.glob(_sanitize(pattern) + ".json"):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("File storage: could not remove %s: %s", path.name, exc)
                success = False
        return success

    async def size(self, key: str) -> int:
        try:
            return self._path(key).stat().st_size
        except OSError:
            return 0

    async def close(self) -> None:
        return None

    def _path(self, key: str) -> Path:
        return self._root / (_sanitize(key) + ".json")


def _sanitize(key: str) -> str:
    return key.replace("/", "_").replace("\\", "_")


def _write_locked(path: Path, payload: str) -> None:
    # "a" creates without truncating so the lock is taken before the old content goes
    with path.open("a", encoding="utf-8") as fh:
        fcntl.flock(fh, fcntl.LOCK_EX)
        try:
            fh.seek(0)
            fh.truncate()
            fh.write(payload)
            fh.flush()
        finally:
            fcntl.flock(fh, fcntl.LOCK_UN)


def _read_locked(path: Path) -> bytes:
    with path.open("rb") as fh:
        fcntl.flock(fh, fcntl.LOCK_SH)
        try:
            return fh.read()
        finally:
            fcntl.flock(fh, fcntl.LOCK_UN)
