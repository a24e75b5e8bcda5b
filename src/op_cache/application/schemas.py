"""Pydantic schemas for op_cache API."""

from pydantic import BaseModel

from src.op_common.datetime_utils import format_duration
from src.op_common.money import size_display
from src.op_storage.domain.models import RecordInfo


class CacheReport(BaseModel):
    cache_key: str
    cache_exists: bool
    cache_ttl: int
    cache_ttl_human: str
    cache_timestamp: str | None
    cache_age: int | None
    cache_age_human: str | None
    is_expired: bool
    expires_in: int | None
    expires_in_human: str | None
    accounts_count: int
    size_bytes: int
    size_human: str

    @classmethod
    def build(
        cls,
        cache_key: str,
        default_ttl: int,
        info: RecordInfo | None,
        accounts_count: int,
    ) -> "CacheReport":
        size = info.size if info else 0
        return cls(
            cache_key=cache_key,
            cache_exists=info is not None,
            cache_ttl=default_ttl,
            cache_ttl_human=format_duration(default_ttl),
            cache_timestamp=info.timestamp if info else None,
            cache_age=info.age if info else None,
            cache_age_human=info.age_human if info else None,
            is_expired=info.is_expired if info else False,
            expires_in=info.expires_in if info else None,
            expires_in_human=info.expires_in_human if info else None,
            accounts_count=accounts_count,
            size_bytes=size,
            size_human=size_display(size),
        )


class InvalidateResponse(BaseModel):
    success: bool
    timestamp: str


class RefreshResponse(BaseModel):
    accounts_count: int
    timestamp: str
