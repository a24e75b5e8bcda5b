"""Domain models for op_storage: pure dataclasses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecordInfo:
    """Metadata about a stored record, as seen by StorageManager.get_info."""

    key: str
    timestamp: str          # ISO-8601, as written by StorageManager.store
    age: int                # seconds since timestamp
    age_human: str
    ttl: int                # 0 = never expires
    is_expired: bool
    expires_in: int | None  # seconds left, None when ttl == 0
    expires_in_human: str | None
    size: int               # bytes as reported by the driver
