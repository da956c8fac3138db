"""
Confidence Calculator Service Module

Calculates the composite confidence score of a prediction record from the
two team feature sets, the head-to-head summary and the market prices.
"""

import logging
from typing import Dict, Optional

from match_insights.domain.constants import (
    CONFIDENCE_BASE,
    CONFIDENCE_JITTER,
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    CONFIDENCE_ON_ERROR,
    NEUTRAL_PREDICTABILITY,
)
from match_insights.domain.entities.features import (
    HeadToHeadFeatureSet,
    RivalryIntensity,
    TeamFeatureSet,
)
from match_insights.domain.entities.prediction import FavoritePick
from match_insights.domain.services.form_analyzer import FormAnalyzer
from match_insights.domain.value_objects.value_objects import MatchOdds
from match_insights.utils.seeding import seeded_randint

logger = logging.getLogger(__name__)


class ConfidenceCalculator:
    """
    Calculates the 5-95 confidence score of a fixture.

    The score starts at 20; every factor below adds an independent
    contribution and the sum is rounded and clamped. The last factor is a
    jitter in [-2, 2] seeded by the match id, so a given match always gets
    the same score.
    """

    def calculate(
        self,
        match_id: str,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: Optional[HeadToHeadFeatureSet],
        odds: Optional[MatchOdds],
        favorite: FavoritePick,
    ) -> int:
        """
        Calculate the confidence score.

        Returns:
            Integer in [5, 95]; 30 if any factor fails
        """
        try:
            factors = self.contributions(match_id, home, away, head_to_head, odds, favorite)
            score = CONFIDENCE_BASE + sum(factors.values())
            return int(max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, round(score))))
        except Exception as e:
            logger.error(f"Error calculating confidence for match {match_id}: {e}", exc_info=True)
            return CONFIDENCE_ON_ERROR

    def contributions(
        self,
        match_id: str,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: Optional[HeadToHeadFeatureSet],
        odds: Optional[MatchOdds],
        favorite: FavoritePick,
    ) -> Dict[str, float]:
        """Every factor's contribution, keyed by factor name."""
        h2h = head_to_head or HeadToHeadFeatureSet.empty()
        return {
            'form': self._form_difference(home, away),
            'consistency': (home.form_consistency + away.form_consistency) / 2 * 5,
            'performance': self._performance_difference(home, away),
            'efficiency': self._efficiency_difference(home, away),
            'odds_closeness': self._odds_closeness(odds),
            'position_gap': self._position_gap(home, away),
            'head_to_head': self._head_to_head(h2h),
            'streaks': self._streak(home.form) + self._streak(away.form),
            'momentum': abs(home.momentum - away.momentum) / 100 * 5,
            'goal_difference': abs(home.home_avg_goals_scored - away.away_avg_goals_scored) * 2,
            'clean_sheets': abs(home.home_clean_sheets - away.away_clean_sheets) * 1,
            'favorite_strength': self._favorite_strength(odds, favorite),
            'jitter': seeded_randint(match_id, -CONFIDENCE_JITTER, CONFIDENCE_JITTER),
        }

    @staticmethod
    def _form_difference(home: TeamFeatureSet, away: TeamFeatureSet) -> float:
        if not home.form or not away.form:
            return 0.0
        return abs(home.form_strength - away.form_strength) * 0.1

    @staticmethod
    def _performance_difference(home: TeamFeatureSet, away: TeamFeatureSet) -> float:
        if home.performance_rating <= 0 or away.performance_rating <= 0:
            return 0.0
        return abs(home.performance_rating - away.performance_rating) / 100 * 10

    @staticmethod
    def _efficiency_difference(home: TeamFeatureSet, away: TeamFeatureSet) -> float:
        attack = abs(home.offensive_efficiency - away.offensive_efficiency)
        defense = abs(home.defensive_efficiency - away.defensive_efficiency)
        return (attack + defense) * 3

    @staticmethod
    def _odds_closeness(odds: Optional[MatchOdds]) -> float:
        """Larger when the two sides are priced far apart."""
        if odds is None or odds.home_win <= 0 or odds.away_win <= 0:
            return 0.0
        low = min(odds.home_win, odds.away_win)
        high = max(odds.home_win, odds.away_win)
        return (1 - low / high) * 10

    @staticmethod
    def _position_gap(home: TeamFeatureSet, away: TeamFeatureSet) -> float:
        if home.position <= 0 or away.position <= 0:
            return 0.0
        return min(abs(home.position - away.position), 5)

    @staticmethod
    def _head_to_head(h2h: HeadToHeadFeatureSet) -> float:
        if h2h.matches <= 0:
            return 0.0

        score = abs(h2h.dominance) * 5 + abs(h2h.recent_dominance) * 7
        score += abs(h2h.predictability - NEUTRAL_PREDICTABILITY) * 10

        if h2h.rivalry_intensity == RivalryIntensity.HIGH:
            score -= 2
        elif h2h.rivalry_intensity == RivalryIntensity.LOW:
            score += 2

        if h2h.win_streak >= 3:
            score += 3
        elif h2h.unbeaten_streak >= 4:
            score += 2
        return score

    @staticmethod
    def _streak(form: str) -> float:
        """+3 for an active three-match winning run, -3 for a losing one."""
        result, length = FormAnalyzer.leading_streak(form)
        if length < 3:
            return 0.0
        return {"W": 3.0, "L": -3.0}.get(result, 0.0)

    @staticmethod
    def _favorite_strength(odds: Optional[MatchOdds], favorite: FavoritePick) -> float:
        if odds is None or favorite in (FavoritePick.DRAW, FavoritePick.UNKNOWN):
            return 0.0
        price = odds.home_win if favorite == FavoritePick.HOME else odds.away_win
        if 0 < price < 1.5:
            return 5.0
        if 0 < price < 2.0:
            return 3.0
        return 0.0
