import time
from typing import Any, Callable, Dict, Optional, Tuple
import threading
import logging

from match_insights.config import STORE_TTL_SECONDS
from match_insights.infrastructure.cache.redis_client import RedisClient

logger = logging.getLogger(__name__)


class PredictionStore:
    """
    Holds the last envelope produced per key (e.g. one per date).

    In-memory entries live under an RLock and expire after ttl_seconds.
    When a RedisClient is given, entries are written through to Redis and
    read from it first. The store is owned by the caller of the engine;
    the transform itself never reads or writes it.
    """

    KEY_PREFIX = "predictions"

    def __init__(
        self,
        ttl_seconds: int = STORE_TTL_SECONDS,
        redis_client: Optional[RedisClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.redis = redis_client
        self._clock = clock
        self._memory: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.RLock()

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}:{key}"

    def get(self, key: str) -> Optional[Any]:
        """Get the stored value (Redis first, then memory); None if absent or expired."""
        full_key = self._key(key)
        if self.redis is not None and self.redis.is_connected:
            value = self.redis.get(full_key)
            if value is not None:
                return value

        with self._lock:
            entry = self._memory.get(full_key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._memory[full_key]
                logger.debug(f"Store entry {full_key} expired")
                return None
            return value

    def save(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value in memory and, when configured, in Redis."""
        full_key = self._key(key)
        if self.redis is not None and self.redis.is_connected:
            self.redis.set(full_key, value, self.ttl_seconds)

        with self._lock:
            self._memory[full_key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key: str) -> bool:
        """Remove an entry; True if anything was removed."""
        full_key = self._key(key)
        redis_ok = False
        if self.redis is not None and self.redis.is_connected:
            redis_ok = self.redis.delete(full_key)

        with self._lock:
            in_mem = self._memory.pop(full_key, None) is not None
            return redis_ok or in_mem

    def clear(self) -> None:
        with self._lock:
            self._memory.clear()
            logger.info("Prediction store cleared")
