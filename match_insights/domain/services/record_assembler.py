"""
Record Assembler Module

Builds the PredictionRecord of a fixture, runs the last-resort default
pass over it and folds finished records into the per-venue metadata.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence

from match_insights.domain.constants import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    CONFIDENCE_REROLL_MAX,
    CONFIDENCE_REROLL_MIN,
    DEFAULT_AWAY_CORNERS,
    DEFAULT_FIRST_GOAL_RATE,
    DEFAULT_HOME_CORNERS,
    DEFAULT_LATE_GOAL_RATE,
    DEFAULT_LEAGUE_AVERAGE_GOALS,
    DEFAULT_TIME,
    DEFAULT_VENUE,
    EXPECTED_GOALS_MAX,
    EXPECTED_GOALS_MIN,
    NEUTRAL_DEFENSIVE_STRENGTH,
    UNKNOWN_LEAGUE,
)
from match_insights.domain.entities.entities import MatchAggregate
from match_insights.domain.entities.features import HeadToHeadFeatureSet, TeamFeatureSet
from match_insights.domain.entities.prediction import (
    CornerStats,
    FavoritePick,
    LeagueMetadata,
    PredictionRecord,
    ScoringPatterns,
)
from match_insights.domain.services.composite_scorer import CompositeScore
from match_insights.domain.services.odds_normalizer import OddsNormalizer
from match_insights.domain.value_objects.value_objects import MatchOdds
from match_insights.utils.seeding import seeded_randint
from match_insights.utils.time_utils import get_today_str, to_app_time

logger = logging.getLogger(__name__)


def _positive(value: Optional[float], default: float) -> float:
    return value if value is not None and value > 0 else default


def build_corner_stats(home: TeamFeatureSet, away: TeamFeatureSet) -> CornerStats:
    home_avg = round(_positive(home.average_corners, DEFAULT_HOME_CORNERS), 2)
    away_avg = round(_positive(away.average_corners, DEFAULT_AWAY_CORNERS), 2)
    return CornerStats(home_avg, away_avg, round(home_avg + away_avg, 2))


def build_scoring_patterns(home: TeamFeatureSet, away: TeamFeatureSet) -> ScoringPatterns:
    """First-goal rate falls back to the scoring-first win rate, then 50; late-goal rate to 30."""
    return ScoringPatterns(
        home_first_goal_rate=_positive(
            home.first_goal_rate, _positive(home.scoring_first_win_rate, DEFAULT_FIRST_GOAL_RATE)
        ),
        away_first_goal_rate=_positive(
            away.first_goal_rate, _positive(away.scoring_first_win_rate, DEFAULT_FIRST_GOAL_RATE)
        ),
        home_late_goal_rate=_positive(home.late_goal_rate, DEFAULT_LATE_GOAL_RATE),
        away_late_goal_rate=_positive(away.late_goal_rate, DEFAULT_LATE_GOAL_RATE),
    )


class RecordAssembler:
    """
    Assembles prediction records and the per-venue metadata of a batch.
    """

    def __init__(self, league_goals_fallback: float = DEFAULT_LEAGUE_AVERAGE_GOALS):
        self.league_goals_fallback = league_goals_fallback

    def build(
        self,
        aggregate: MatchAggregate,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: HeadToHeadFeatureSet,
        odds: MatchOdds,
        score: CompositeScore,
        reasons: Sequence[str],
    ) -> PredictionRecord:
        """
        Build the record of one fixture and run the default pass over it.

        Args:
            aggregate: Input aggregate (identity, kickoff, tournament)
            home: Home feature set
            away: Away feature set
            head_to_head: Pairwise summary
            odds: Normalized prices
            score: Composite scores
            reasons: Rendered justifications

        Returns:
            PredictionRecord with every field populated
        """
        kickoff = to_app_time(aggregate.kickoff)
        position_gap = abs(home.position - away.position) if home.position > 0 and away.position > 0 else 0

        record = PredictionRecord(
            match_id=aggregate.match_id,
            home_team=home,
            away_team=away,
            head_to_head=head_to_head,
            odds=odds,
            favorite=score.favorite,
            confidence=score.confidence,
            expected_goals=score.expected_goals,
            defensive_strength=score.defensive_strength,
            reasons=tuple(reasons),
            venue=aggregate.tournament or "",
            kickoff=kickoff,
            date=kickoff.strftime("%Y-%m-%d") if kickoff else "",
            time=kickoff.strftime("%H:%M") if kickoff else "",
            position_gap=position_gap,
            average_goals=score.average_goals,
            corner_stats=build_corner_stats(home, away),
            scoring_patterns=build_scoring_patterns(home, away),
        )
        return self.apply_defaults(record)

    def apply_defaults(self, record: PredictionRecord) -> PredictionRecord:
        """
        Last-resort pass: replace every empty string, non-positive number
        and missing nested object with its documented default.
        """
        changes = {}

        if not record.date:
            changes["date"] = get_today_str()
        if not record.time:
            changes["time"] = DEFAULT_TIME
        if not record.venue:
            changes["venue"] = DEFAULT_VENUE

        odds = OddsNormalizer.apply_defaults(record.odds)
        if odds != record.odds:
            changes["odds"] = odds

        if record.favorite in (None, FavoritePick.UNKNOWN):
            changes["favorite"] = OddsNormalizer.determine_favorite(odds)

        if not CONFIDENCE_MIN <= record.confidence <= CONFIDENCE_MAX:
            rerolled = seeded_randint(record.match_id, CONFIDENCE_REROLL_MIN, CONFIDENCE_REROLL_MAX)
            logger.debug(f"Match {record.match_id}: confidence {record.confidence} out of range, re-rolled to {rerolled}")
            changes["confidence"] = rerolled

        average_goals = record.average_goals
        if average_goals <= 0:
            average_goals = round(
                (record.home_team.home_avg_goals_scored + record.away_team.away_avg_goals_scored) / 2, 2
            )
            changes["average_goals"] = average_goals

        if record.expected_goals <= 0:
            fallback = average_goals if average_goals > 0 else self.league_goals_fallback
            changes["expected_goals"] = round(max(EXPECTED_GOALS_MIN, min(EXPECTED_GOALS_MAX, fallback)), 2)

        if record.defensive_strength <= 0:
            changes["defensive_strength"] = NEUTRAL_DEFENSIVE_STRENGTH

        if record.head_to_head is None:
            changes["head_to_head"] = HeadToHeadFeatureSet.empty()

        defaults = build_corner_stats(record.home_team, record.away_team)
        corners = record.corner_stats or defaults
        home_corners = _positive(corners.home_avg_corners, defaults.home_avg_corners)
        away_corners = _positive(corners.away_avg_corners, defaults.away_avg_corners)
        filled_corners = CornerStats(
            home_corners,
            away_corners,
            _positive(corners.total_avg_corners, round(home_corners + away_corners, 2)),
        )
        if filled_corners != record.corner_stats:
            changes["corner_stats"] = filled_corners

        pattern_defaults = build_scoring_patterns(record.home_team, record.away_team)
        patterns = record.scoring_patterns or pattern_defaults
        filled_patterns = ScoringPatterns(
            *(
                _positive(getattr(patterns, name), getattr(pattern_defaults, name))
                for name in ScoringPatterns.__dataclass_fields__
            )
        )
        if filled_patterns != record.scoring_patterns:
            changes["scoring_patterns"] = filled_patterns

        return replace(record, **changes) if changes else record

    # ============================================================
    # League metadata
    # ============================================================

    @staticmethod
    def league_key(record: PredictionRecord) -> str:
        return record.venue or UNKNOWN_LEAGUE

    def fold(self, league_data: Dict[str, LeagueMetadata], record: PredictionRecord) -> LeagueMetadata:
        """Fold one record into the metadata of its venue, creating it on first use."""
        key = self.league_key(record)
        metadata = league_data.get(key)
        if metadata is None:
            metadata = league_data[key] = LeagueMetadata(venue=key)
        metadata.fold(record)
        return metadata

    def fold_all(self, records: Iterable[PredictionRecord]) -> Dict[str, LeagueMetadata]:
        """Single-threaded reduction of a batch, in the given order."""
        league_data: Dict[str, LeagueMetadata] = {}
        for record in records:
            self.fold(league_data, record)
        return league_data
