"""Redis client factory: used by the redis storage driver only."""

import redis.asyncio as aioredis


def create_redis(url: str) -> aioredis.Redis:
    """Create a pooled Redis client; connections are opened lazily."""
    return aioredis.from_url(url, decode_responses=True)
