"""
Application Use Cases Module

Use cases orchestrate the flow of data between the domain layer and the
infrastructure layer. The batch transform is the engine's only entry point.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Union

from pydantic import ValidationError

from match_insights.domain.entities.entities import MatchAggregate
from match_insights.domain.entities.prediction import PredictionRecord
from match_insights.domain.exceptions import (
    EnvelopeBuildException,
    InsufficientDataException,
    MatchTransformException,
)
from match_insights.domain.services.prediction_pipeline import PredictionPipeline
from match_insights.infrastructure.services.batch_processor import BatchProcessor
from match_insights.utils.time_utils import get_current_time
from match_insights.application.dtos.dtos import (
    EnvelopeMetadataDTO,
    LeagueMetadataDTO,
    PaginationDTO,
    PredictionDataDTO,
    PredictionEnvelopeDTO,
    PredictionRecordDTO,
)


logger = logging.getLogger(__name__)

Batch = Union[Mapping[str, MatchAggregate], Iterable[MatchAggregate]]


@dataclass
class BatchResult:
    """Records that made it through a batch, plus what was dropped."""
    records: List[PredictionRecord] = field(default_factory=list)
    predictions: List[PredictionRecordDTO] = field(default_factory=list)
    skipped: int = 0
    errors: int = 0


class TransformPredictionsUseCase:
    """Use case for turning a batch of aggregates into a prediction envelope."""

    def __init__(
        self,
        pipeline: PredictionPipeline,
        batch_processor: BatchProcessor,
        page_size: int = 50,
    ):
        self.pipeline = pipeline
        self.batch_processor = batch_processor
        self.page_size = page_size

    def execute(self, batch: Batch, page: int = 1) -> PredictionEnvelopeDTO:
        """
        Transform a batch.

        Args:
            batch: Mapping of match id to aggregate, or any iterable of aggregates
            page: 1-based page of records to return

        Returns:
            PredictionEnvelopeDTO

        Raises:
            EnvelopeBuildException: If the envelope itself cannot be built
        """
        aggregates = list(batch.values()) if isinstance(batch, Mapping) else list(batch or ())
        logger.info(f"Transforming batch of {len(aggregates)} matches")

        result = self.predict_all(aggregates)
        logger.info(
            f"Batch done: {len(result.records)} successful, "
            f"{result.skipped} skipped, {result.errors} errors"
        )
        return self.build_envelope(result, page)

    def predict_all(self, aggregates: List[MatchAggregate]) -> BatchResult:
        """Run the pipeline over every aggregate; failures are isolated per match."""
        result = BatchResult()
        outcomes = self.batch_processor.run(self.pipeline.predict, aggregates)

        for aggregate, outcome in zip(aggregates, outcomes):
            match_id = getattr(aggregate, "match_id", None)
            if outcome.ok:
                try:
                    prediction = PredictionRecordDTO.model_validate(outcome.value)
                except ValidationError as e:
                    self._record_error(result, match_id, e)
                    continue
                result.records.append(outcome.value)
                result.predictions.append(prediction)
            elif isinstance(outcome.error, InsufficientDataException):
                result.skipped += 1
                logger.warning(f"Skipping match {match_id}: {outcome.error}")
            else:
                self._record_error(result, match_id, outcome.error)
        return result

    @staticmethod
    def _record_error(result: BatchResult, match_id: str, cause: BaseException) -> None:
        result.errors += 1
        error = MatchTransformException(match_id, cause)
        logger.error(str(error), exc_info=cause)

    def build_envelope(self, result: BatchResult, page: int = 1) -> PredictionEnvelopeDTO:
        """
        Fold league metadata in input order and wrap one page of records in the envelope.

        League metadata and counts always cover the whole batch; only the
        predictions list is paged.
        """
        try:
            if page < 1:
                raise ValueError(f"Page must be 1 or greater, got {page}")
            league_data = self.pipeline.assembler.fold_all(result.records)
            now = get_current_time()

            total = len(result.records)
            total_pages = math.ceil(total / self.page_size) if total else 0
            start = (page - 1) * self.page_size

            return PredictionEnvelopeDTO(
                data=PredictionDataDTO(
                    predictions=result.predictions[start:start + self.page_size],
                    metadata=EnvelopeMetadataDTO(
                        total=total,
                        skipped=result.skipped,
                        errors=result.errors,
                        date=now.strftime("%Y-%m-%d"),
                        last_updated=now,
                        league_data={
                            venue: LeagueMetadataDTO.from_metadata(metadata)
                            for venue, metadata in league_data.items()
                        },
                    ),
                ),
                pagination=PaginationDTO(
                    current_page=page,
                    total_pages=total_pages,
                    page_size=self.page_size,
                    total_items=total,
                    has_next=page < total_pages,
                    has_previous=page > 1,
                ),
            )
        except Exception as e:
            logger.error(f"Error building prediction envelope: {e}", exc_info=True)
            raise EnvelopeBuildException(f"Failed to build prediction envelope: {e}") from e
