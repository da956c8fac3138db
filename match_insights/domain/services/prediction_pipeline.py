"""
Prediction Pipeline Module

Runs every stage of the engine over one MatchAggregate:
resolver -> feature extractor / head-to-head analyzer / odds normalizer
-> composite scorer -> explanation generator -> record assembler.

The pipeline holds no mutable state, so one instance can serve many
threads, and it pickles for process pools.
"""

import logging
from typing import List, Optional

from match_insights.domain.constants import DEFAULT_LEAGUE_AVERAGE_GOALS
from match_insights.domain.entities.entities import HistoricalMatch, MatchAggregate
from match_insights.domain.entities.prediction import PredictionRecord
from match_insights.domain.services.composite_scorer import CompositeScorer
from match_insights.domain.services.explanation_generator import ExplanationGenerator
from match_insights.domain.services.head_to_head_analyzer import HeadToHeadAnalyzer
from match_insights.domain.services.odds_normalizer import OddsNormalizer
from match_insights.domain.services.record_assembler import RecordAssembler
from match_insights.domain.services.statistics_service import StatisticsService
from match_insights.domain.services.team_feature_extractor import TeamFeatureExtractor
from match_insights.domain.services.team_name_resolver import TeamNameResolver

logger = logging.getLogger(__name__)


def meeting_history(aggregate: MatchAggregate) -> List[HistoricalMatch]:
    """
    Matches the head-to-head analyzer looks through.

    The provider's head-to-head list when present; otherwise both teams'
    histories, with a meeting that appears in both counted once.
    """
    if aggregate.head_to_head:
        return list(aggregate.head_to_head)

    seen = set()
    merged = []
    for match in list(aggregate.home_history) + list(aggregate.away_history):
        key = match.id or (
            match.played_at,
            match.home_team.name if match.home_team else None,
            match.away_team.name if match.away_team else None,
            match.home_goals,
            match.away_goals,
        )
        if key in seen:
            continue
        seen.add(key)
        merged.append(match)
    return merged


class PredictionPipeline:
    """
    Turns one aggregate into one finished PredictionRecord.
    """

    def __init__(
        self,
        resolver: Optional[TeamNameResolver] = None,
        league_goals_fallback: float = DEFAULT_LEAGUE_AVERAGE_GOALS,
    ):
        self.resolver = resolver or TeamNameResolver()
        statistics_service = StatisticsService(self.resolver)
        self.feature_extractor = TeamFeatureExtractor(self.resolver, statistics_service=statistics_service)
        self.head_to_head_analyzer = HeadToHeadAnalyzer(self.resolver)
        self.odds_normalizer = OddsNormalizer()
        self.scorer = CompositeScorer(
            statistics_service=statistics_service,
            league_goals_fallback=league_goals_fallback,
        )
        self.explanation_generator = ExplanationGenerator()
        self.assembler = RecordAssembler(league_goals_fallback)

    def predict(self, aggregate: MatchAggregate) -> PredictionRecord:
        """
        Build the prediction record of one fixture.

        Raises:
            InsufficientDataException: If the aggregate has no match id or team names
        """
        aggregate.validate()

        home = self.feature_extractor.extract(
            aggregate.home_team, aggregate.home_stats, aggregate.home_history, aggregate.table
        )
        away = self.feature_extractor.extract(
            aggregate.away_team, aggregate.away_stats, aggregate.away_history, aggregate.table
        )
        head_to_head = self.head_to_head_analyzer.analyze(
            aggregate.home_team, aggregate.away_team, meeting_history(aggregate)
        )
        odds = self.odds_normalizer.normalize(aggregate.markets)

        score = self.scorer.score(aggregate, home, away, head_to_head, odds)
        reasons = self.explanation_generator.generate(home, away, head_to_head, odds, score.expected_goals)

        record = self.assembler.build(aggregate, home, away, head_to_head, odds, score, reasons)
        logger.debug(
            f"Match {record.match_id}: {home.name} vs {away.name} -> "
            f"{record.favorite.value} ({record.confidence}), xG {record.expected_goals}"
        )
        return record
