"""StorageDriver Protocol: the capability set every backend provides.

Drivers persist opaque JSON-serializable documents by key. They know nothing
about TTL semantics; the ``ttl`` argument is only a native-expiry hint.

Failure policy: transient I/O errors are logged and surface as False / None / 0.
Unrecoverable configuration problems raise StorageConfigError at construction.
"""

from typing import Any, Protocol


class StorageDriver(Protocol):
    async def set(self, key: str, document: dict[str, Any], ttl: int | None = None) -> bool: ...

    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def delete(self, key: str) -> bool: ...

    async def exists(self, key: str) -> bool: ...

    async def clear(self, pattern: str = "*") -> bool: ...

    async def size(self, key: str) -> int: ...

    async def close(self) -> None: ...
