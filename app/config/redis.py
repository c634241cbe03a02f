# app/config/redis.py
"""Redis client for the Celery broker (used by the health checks)"""
from typing import Optional

import redis

from app.config.settings import get_settings

settings = get_settings()

_broker_client: Optional[redis.Redis] = None


def get_broker_client() -> redis.Redis:
    """Shared client on the broker URL; connections are opened lazily"""
    global _broker_client
    if _broker_client is None:
        _broker_client = redis.Redis.from_url(
            settings.CELERY_BROKER_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_connect_timeout=2,
            socket_timeout=2,
            retry_on_timeout=True,
        )
    return _broker_client


def ping_broker() -> bool:
    """Raises redis.RedisError when the broker can't be reached"""
    return bool(get_broker_client().ping())
