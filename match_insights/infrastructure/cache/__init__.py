"""Infrastructure cache module."""

from .prediction_store import PredictionStore
from .redis_client import RedisClient

__all__ = ["PredictionStore", "RedisClient"]
