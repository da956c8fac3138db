"""
Dependencies Module

Factory functions wiring the engine's services from configuration.
"""

from functools import lru_cache

from match_insights.config import (
    EXECUTOR_KIND,
    LEAGUE_AVERAGE_GOALS_FALLBACK,
    MAX_WORKERS,
    PAGE_SIZE,
    REDIS_HOST,
    STORE_TTL_SECONDS,
)
from match_insights.domain.services.prediction_pipeline import PredictionPipeline
from match_insights.infrastructure.cache.prediction_store import PredictionStore
from match_insights.infrastructure.cache.redis_client import RedisClient
from match_insights.infrastructure.services.batch_processor import BatchProcessor
from match_insights.application.use_cases.use_cases import TransformPredictionsUseCase


@lru_cache()
def get_prediction_pipeline() -> PredictionPipeline:
    """Get the prediction pipeline (cached)."""
    return PredictionPipeline(league_goals_fallback=LEAGUE_AVERAGE_GOALS_FALLBACK)


@lru_cache()
def get_batch_processor() -> BatchProcessor:
    """Get the batch processor (cached)."""
    return BatchProcessor(max_workers=MAX_WORKERS, executor_kind=EXECUTOR_KIND)


def get_transform_use_case() -> TransformPredictionsUseCase:
    return TransformPredictionsUseCase(
        pipeline=get_prediction_pipeline(),
        batch_processor=get_batch_processor(),
        page_size=PAGE_SIZE,
    )


@lru_cache()
def get_prediction_store() -> PredictionStore:
    """Get the prediction store; Redis-backed only when REDIS_HOST is set (cached)."""
    redis_client = RedisClient() if REDIS_HOST else None
    return PredictionStore(ttl_seconds=STORE_TTL_SECONDS, redis_client=redis_client)
