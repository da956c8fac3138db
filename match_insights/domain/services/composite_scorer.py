"""
Composite Scorer Module

Combines the team feature sets, head-to-head summary and normalized odds
into the scalar outputs of a prediction record: favorite pick, confidence,
expected goals, defensive strength and average goals.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from match_insights.domain.constants import (
    DEFAULT_LEAGUE_AVERAGE_GOALS,
    DEFENSIVE_AWAY_WEIGHT,
    DEFENSIVE_HOME_WEIGHT,
    DEFENSIVE_STRENGTH_MAX,
    DEFENSIVE_STRENGTH_MIN,
    EXPECTED_GOALS_MAX,
    EXPECTED_GOALS_MIN,
    H2H_FACTOR_MAX,
    H2H_FACTOR_MIN,
    H2H_FACTOR_MIN_MEETINGS,
    LEAGUE_WEIGHT,
    MODEL_WEIGHT,
    NEUTRAL_DEFENSIVE_STRENGTH,
)
from match_insights.domain.entities.entities import MatchAggregate
from match_insights.domain.entities.features import HeadToHeadFeatureSet, TeamFeatureSet
from match_insights.domain.entities.prediction import FavoritePick
from match_insights.domain.services.confidence_calculator import ConfidenceCalculator
from match_insights.domain.services.form_analyzer import FormAnalyzer
from match_insights.domain.services.odds_normalizer import OddsNormalizer
from match_insights.domain.services.statistics_service import StatisticsService, safe_divide
from match_insights.domain.value_objects.value_objects import MatchOdds

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class CompositeScore:
    """Scalar outputs of the scorer for one fixture."""
    favorite: FavoritePick
    confidence: int
    expected_goals: float
    defensive_strength: float
    average_goals: float
    league_average_goals: float


class CompositeScorer:
    """
    Domain service producing the composite scores of a fixture.
    """

    def __init__(
        self,
        confidence_calculator: Optional[ConfidenceCalculator] = None,
        statistics_service: Optional[StatisticsService] = None,
        league_goals_fallback: float = DEFAULT_LEAGUE_AVERAGE_GOALS,
    ):
        self.confidence_calculator = confidence_calculator or ConfidenceCalculator()
        self.statistics_service = statistics_service or StatisticsService()
        self.league_goals_fallback = league_goals_fallback

    def score(
        self,
        aggregate: MatchAggregate,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: HeadToHeadFeatureSet,
        odds: MatchOdds,
    ) -> CompositeScore:
        """
        Score one fixture.

        Args:
            aggregate: Input aggregate (table, stats and league results are read)
            home: Home feature set
            away: Away feature set
            head_to_head: Pairwise summary
            odds: Normalized prices

        Returns:
            CompositeScore
        """
        favorite = OddsNormalizer.determine_favorite(odds)
        league_average = self.statistics_service.calculate_league_average_goals(
            aggregate.table,
            aggregate.home_stats,
            aggregate.away_stats,
            aggregate.league_matches,
            self.league_goals_fallback,
        )
        return CompositeScore(
            favorite=favorite,
            confidence=self.confidence_calculator.calculate(
                aggregate.match_id, home, away, head_to_head, odds, favorite
            ),
            expected_goals=self.calculate_expected_goals(home, away, head_to_head, league_average),
            defensive_strength=self.calculate_defensive_strength(home, away),
            average_goals=self.calculate_average_goals(home, away),
            league_average_goals=league_average,
        )

    # ============================================================
    # Expected goals
    # ============================================================

    @staticmethod
    def head_to_head_factor(
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: Optional[HeadToHeadFeatureSet],
    ) -> float:
        """
        Ratio of goals in previous meetings to what the venue averages predict.

        Only applied from three meetings on; limited to [0.7, 1.3].
        """
        if head_to_head is None or head_to_head.matches < H2H_FACTOR_MIN_MEETINGS:
            return 1.0
        expected = (home.home_avg_goals_scored + away.away_avg_goals_scored) / 2
        if expected <= 0:
            return 1.0
        return _clamp(head_to_head.avg_goals_per_match / expected, H2H_FACTOR_MIN, H2H_FACTOR_MAX)

    def calculate_expected_goals(
        self,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: Optional[HeadToHeadFeatureSet],
        league_average: float,
    ) -> float:
        """
        Expected total goals of the fixture, in [0.5, 6].

        Each side: venue scoring rate x own offensive efficiency x the
        opponent's inverse defensive efficiency, then the head-to-head
        factor and a form/momentum factor. The model total is blended 70/30
        with the league average.
        """
        try:
            h2h_factor = self.head_to_head_factor(home, away, head_to_head)

            home_expected = (
                home.home_avg_goals_scored
                * home.offensive_efficiency
                * (2 - away.defensive_efficiency)
                * 0.5
                * h2h_factor
            )
            away_expected = (
                away.away_avg_goals_scored
                * away.offensive_efficiency
                * (2 - home.defensive_efficiency)
                * 0.5
                * h2h_factor
            )

            home_expected *= 0.9 + home.form_strength / 100 * 0.2 + home.momentum / 100 * 0.1
            away_expected *= 0.9 + away.form_strength / 100 * 0.2 + away.momentum / 100 * 0.1

            total = home_expected + away_expected
            if league_average > 0:
                total = total * MODEL_WEIGHT + league_average * LEAGUE_WEIGHT

            return round(_clamp(total, EXPECTED_GOALS_MIN, EXPECTED_GOALS_MAX), 2)
        except Exception as e:
            logger.error(f"Error calculating expected goals: {e}", exc_info=True)
            return round(_clamp(self.league_goals_fallback, EXPECTED_GOALS_MIN, EXPECTED_GOALS_MAX), 2)

    # ============================================================
    # Defense
    # ============================================================

    @staticmethod
    def calculate_defensive_strength(home: TeamFeatureSet, away: TeamFeatureSet) -> float:
        """
        Combined defensive factor in [0, 1.5]; 1.0 is average.

        Inverse of venue goals conceded, adjusted by clean-sheet rate
        (up to +20%) and form (+/-5%), weighted 60/40 home/away. Neutral
        when neither side has conceded data.
        """
        home_conceded = home.home_avg_goals_conceded
        away_conceded = away.away_avg_goals_conceded
        if home_conceded <= 0 and away_conceded <= 0:
            return NEUTRAL_DEFENSIVE_STRENGTH

        try:
            home_defense = _clamp(1.0 / home_conceded if home_conceded > 0 else 0.0, 0.0, 1.5)
            away_defense = _clamp(1.0 / away_conceded if away_conceded > 0 else 0.0, 0.0, 1.5)

            home_clean_sheet_rate = safe_divide(home.home_clean_sheets, max(1, home.home_matches))
            away_clean_sheet_rate = safe_divide(away.away_clean_sheets, max(1, away.away_matches))
            home_defense *= 1 + home_clean_sheet_rate * 0.2
            away_defense *= 1 + away_clean_sheet_rate * 0.2

            home_defense *= 1 + (FormAnalyzer.calculate_form_numeric(home.form) - 0.5) * 0.1
            away_defense *= 1 + (FormAnalyzer.calculate_form_numeric(away.form) - 0.5) * 0.1

            combined = home_defense * DEFENSIVE_HOME_WEIGHT + away_defense * DEFENSIVE_AWAY_WEIGHT
            return round(_clamp(combined, DEFENSIVE_STRENGTH_MIN, DEFENSIVE_STRENGTH_MAX), 2)
        except Exception as e:
            logger.error(f"Error calculating defensive strength: {e}", exc_info=True)
            return NEUTRAL_DEFENSIVE_STRENGTH

    @staticmethod
    def calculate_average_goals(home: TeamFeatureSet, away: TeamFeatureSet) -> float:
        """Goals per match suggested by both teams' scoring and conceding rates."""
        if home.matches_played > 0 and away.matches_played > 0:
            home_side = home.avg_goals_scored + away.avg_goals_conceded
            away_side = away.avg_goals_scored + home.avg_goals_conceded
            return round((home_side + away_side) / 2, 2)
        return round((home.home_avg_goals_scored + away.away_avg_goals_scored) / 2, 2)
