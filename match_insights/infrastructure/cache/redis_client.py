"""
Redis Client Module

JSON get/set/delete over Redis for the prediction store. Every operation
degrades to a miss when the server is unreachable.
"""

import json
import logging
from typing import Any, Callable, Optional, TypeVar

import redis

from match_insights.config import REDIS_HOST, REDIS_PASSWORD, REDIS_PORT

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RedisClient:
    """Redis connection holding JSON-serialized prediction envelopes."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        password: Optional[str] = None,
        db: int = 0,
    ):
        self.host = host or REDIS_HOST or "localhost"
        self.port = port or REDIS_PORT
        self._redis: Optional[redis.Redis] = redis.Redis(
            host=self.host,
            port=self.port,
            db=db,
            password=password or REDIS_PASSWORD,
            decode_responses=True,
            socket_timeout=5,
        )
        if self.is_connected:
            logger.info(f"Connected to Redis at {self.host}:{self.port}")
        else:
            logger.warning(f"Redis at {self.host}:{self.port} unreachable, store stays in memory")

    @property
    def is_connected(self) -> bool:
        if self._redis is None:
            return False
        try:
            return bool(self._redis.ping())
        except redis.RedisError:
            return False

    def _run(self, action: str, key: str, operation: Callable[[redis.Redis], T], default: T) -> T:
        if not self.is_connected:
            return default
        try:
            return operation(self._redis)
        except (redis.RedisError, TypeError, ValueError) as e:
            logger.error(f"Redis {action} failed for key {key}: {e}")
            return default

    def get(self, key: str) -> Optional[Any]:
        """Stored JSON value, or None."""
        def load(r: redis.Redis) -> Optional[Any]:
            raw = r.get(key)
            return json.loads(raw) if raw else None

        return self._run("get", key, load, None)

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        return self._run(
            "set", key, lambda r: bool(r.set(key, json.dumps(value, default=str), ex=ttl_seconds)), False
        )

    def delete(self, key: str) -> bool:
        return self._run("delete", key, lambda r: bool(r.delete(key)), False)
