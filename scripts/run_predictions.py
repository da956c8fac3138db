#!/usr/bin/env python3
"""
Prediction Batch Script
Reads a JSON batch of match aggregates, runs the transform and prints the
resulting envelope. Optionally keeps the envelope in the prediction store.
"""
import sys
import json
import argparse
import logging
from datetime import datetime

from pydantic import ValidationError

from match_insights import transform
from match_insights.application.dtos.dtos import MatchAggregateDTO
from match_insights.dependencies import get_prediction_store
from match_insights.domain.exceptions import PredictionException
from match_insights.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def load_batch(path: str) -> dict:
    """Load a batch file: either a list of aggregates or a mapping of match id to aggregate."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    items = raw.values() if isinstance(raw, dict) else raw
    batch = {}
    for item in items:
        aggregate = MatchAggregateDTO.model_validate(item).to_entity()
        batch[aggregate.match_id] = aggregate
    return batch


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Transform a batch of match aggregates into predictions")
    parser.add_argument("batch_file", help="Path to a JSON batch file")
    parser.add_argument("--store", action="store_true", help="Keep the envelope in the prediction store")
    parser.add_argument("--page", type=int, default=1, help="Page of records to print")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    start_time = datetime.now()

    try:
        batch = load_batch(args.batch_file)
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Could not load batch file {args.batch_file}: {e}")
        return 1

    try:
        envelope = transform(batch, page=args.page)
    except PredictionException as e:
        logger.error(f"Transform failed: {e}")
        return 1

    if args.store:
        store = get_prediction_store()
        key = f"{envelope.data.metadata.date}:page-{args.page}"
        store.save(key, envelope.model_dump(mode="json"))
        logger.info(f"Envelope stored under '{key}'")

    print(envelope.model_dump_json(indent=2))
    logger.info(f"Finished in {(datetime.now() - start_time).total_seconds():.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
