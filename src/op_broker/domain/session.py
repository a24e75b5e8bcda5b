"""Upstream session credentials, carried inside our JWT between requests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BrokerSession:
    username: str
    token: str
    uuid: str | None = None  # upstream correlation id (X-UUID header)
