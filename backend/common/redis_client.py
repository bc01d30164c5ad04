import json
import logging

import redis.asyncio as redis
from django.conf import settings
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


def get_redis_url():
    return getattr(settings, "REDIS_URL", "redis://127.0.0.1:6379/0")


def get_redis_client():
    """
    Async Redis clients are event-loop bound and must not be cached.
    """
    return redis.from_url(
        get_redis_url(),
        decode_responses=True,
    )


async def cache_get_json(client, key: str):
    """
    Best-effort read: a missing key, a Redis outage and an unreadable payload
    all come back as None.
    """
    try:
        raw = await client.get(key)
    except RedisError as exc:
        logger.warning("Redis read failed for %s: %s", key, exc)
        return None

    if not raw:
        return None

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable cache entry %s", key)
        return None


async def cache_set_json(client, key: str, value, ttl: int) -> bool:
    try:
        await client.set(key, json.dumps(value), ex=ttl)
    except RedisError as exc:
        logger.warning("Redis write failed for %s: %s", key, exc)
        return False
    return True
