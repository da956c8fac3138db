"""
Match prediction feature-extraction and scoring engine.

transform(batch) is the single entry point. It is a pure function of its
input: tie-breaking jitter is seeded from stable keys, zlib.crc32 of the
form string for form strength (uniform in [-2, 2)) and of the match id for
confidence (integer in [-2, 2]) and for the out-of-range confidence
re-roll (integer in [20, 40]). Re-running an unchanged batch therefore
yields identical records.
"""

from match_insights.dependencies import get_transform_use_case


def transform(batch, page=1):
    """
    Transform a batch of MatchAggregates into a PredictionEnvelopeDTO.

    Args:
        batch: Mapping of match id to MatchAggregate, or an iterable of them
        page: 1-based page of records to return

    Returns:
        PredictionEnvelopeDTO
    """
    return get_transform_use_case().execute(batch, page)


__all__ = ["transform"]
