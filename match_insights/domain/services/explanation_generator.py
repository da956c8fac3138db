"""
Explanation Generator Module

Renders the ranked, human-readable justifications of a prediction record.
"""

import logging
from typing import List, Optional, Tuple

from match_insights.domain.constants import (
    EFFICIENCY_EDGE_THRESHOLD,
    FALLBACK_REASON,
    MAX_REASONS,
)
from match_insights.domain.entities.features import (
    FormTrend,
    HeadToHeadFeatureSet,
    ScoringPattern,
    TeamFeatureSet,
)
from match_insights.domain.entities.prediction import FavoritePick
from match_insights.domain.services.odds_normalizer import OddsNormalizer
from match_insights.domain.value_objects.value_objects import MatchOdds

logger = logging.getLogger(__name__)


class ExplanationGenerator:
    """
    Builds at most eight reason strings, in a fixed order:
    form, table, efficiency edges, performance rating, scoring potential,
    head-to-head, favorite, expected points, momentum and recent streaks.
    """

    def generate(
        self,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: Optional[HeadToHeadFeatureSet],
        odds: Optional[MatchOdds],
        expected_goals: float,
    ) -> Tuple[str, ...]:
        """
        Generate the reasons for one fixture.

        Returns:
            Tuple of reasons; a single generic reason if rendering fails
        """
        try:
            reasons = self._generate(home, away, head_to_head, odds, expected_goals)
        except Exception as e:
            logger.error(
                f"Error generating reasons for {getattr(home, 'name', None)} vs {getattr(away, 'name', None)}: {e}",
                exc_info=True,
            )
            return (FALLBACK_REASON,)
        return tuple(reasons[:MAX_REASONS])

    def _generate(
        self,
        home: TeamFeatureSet,
        away: TeamFeatureSet,
        head_to_head: Optional[HeadToHeadFeatureSet],
        odds: Optional[MatchOdds],
        expected_goals: float,
    ) -> List[str]:
        reasons = []

        for team in (home, away):
            if team.form:
                reasons.append(f"{team.name} form: {team.form} (consistency: {team.form_consistency:.2f})")

        reasons.append(
            f"League position: {home.name} ({home.tier.value}, {home.position}) "
            f"vs {away.name} ({away.tier.value}, {away.position})"
        )

        reasons.extend(self._efficiency_edges(home, away))

        if home.performance_rating > 0 and away.performance_rating > 0:
            diff = abs(home.performance_rating - away.performance_rating)
            leader = home.name if home.performance_rating > away.performance_rating else away.name
            size = "significant" if diff > 20 else "moderate" if diff > 10 else "slight"
            reasons.append(
                f"Performance rating: {leader} has {size} advantage "
                f"({home.performance_rating:.0f} vs {away.performance_rating:.0f})"
            )

        potential = "High" if expected_goals > 2.5 else "Moderate" if expected_goals > 1.5 else "Low"
        reasons.append(
            f"{potential}-scoring potential: {home.name} ({home.home_avg_goals_scored:.2f} home) "
            f"vs {away.name} ({away.away_avg_goals_scored:.2f} away)"
        )

        if head_to_head is not None and head_to_head.matches > 0:
            reasons.append(self._head_to_head(home, away, head_to_head))

        favorite_reason = self._favorite(home, away, odds)
        if favorite_reason:
            reasons.append(favorite_reason)

        if home.expected_points > 0 and away.expected_points > 0:
            reasons.append(
                f"Expected points: {home.name} ({home.expected_points:.2f}) "
                f"vs {away.name} ({away.expected_points:.2f})"
            )

        if abs(home.momentum) > 20 or abs(away.momentum) > 20:
            team = home if abs(home.momentum) > abs(away.momentum) else away
            direction = "positive" if team.momentum > 0 else "negative"
            reasons.append(f"Momentum: {team.name} has {direction} momentum ({abs(team.momentum):.1f})")

        streaks = self._streaks(home, away)
        if streaks:
            reasons.append(streaks)

        return reasons

    @staticmethod
    def _efficiency_edges(home: TeamFeatureSet, away: TeamFeatureSet) -> List[str]:
        edges = []
        pairs = (
            ("Attacking", home.offensive_efficiency, away.offensive_efficiency),
            ("Defensive", home.defensive_efficiency, away.defensive_efficiency),
        )
        for label, home_value, away_value in pairs:
            if abs(home_value - away_value) > EFFICIENCY_EDGE_THRESHOLD:
                leader = home.name if home_value > away_value else away.name
                edges.append(
                    f"{label} edge: {leader} ({max(home_value, away_value):.2f} vs {min(home_value, away_value):.2f})"
                )
        return edges

    @staticmethod
    def _head_to_head(home: TeamFeatureSet, away: TeamFeatureSet, h2h: HeadToHeadFeatureSet) -> str:
        parts = [f"H2H: {h2h.matches} previous matches with {h2h.avg_goals_per_match:.1f} goals/game"]
        if h2h.btts_rate > 0:
            parts.append(f"{h2h.btts_rate:.0f}% BTTS")
        if h2h.form_trend != FormTrend.NEUTRAL:
            parts.append(f"{h2h.form_trend.value} trend")

        dominant = home.name if h2h.dominance > 0 else away.name
        if abs(h2h.dominance) > 0.3:
            parts.append(f"{dominant} historically dominant")
        if h2h.scoring_pattern not in (ScoringPattern.BALANCED, ScoringPattern.CONSISTENT):
            parts.append(f"{h2h.scoring_pattern.value} scoring pattern")
        if h2h.unbeaten_streak >= 3:
            parts.append(f"{home.name} longest unbeaten run of {h2h.unbeaten_streak} matches")
        return ", ".join(parts)

    @staticmethod
    def _favorite(home: TeamFeatureSet, away: TeamFeatureSet, odds: Optional[MatchOdds]) -> Optional[str]:
        if odds is None or odds.home_win <= 0 or odds.away_win <= 0:
            return None
        prices = f"(H: {odds.home_win:.2f}, A: {odds.away_win:.2f})"
        favorite = OddsNormalizer.determine_favorite(odds)
        if favorite == FavoritePick.DRAW:
            return f"Draw likely: Tight odds {prices}"

        ratio = min(odds.home_win, odds.away_win) / max(odds.home_win, odds.away_win)
        strength = "Strong" if ratio < 0.5 else "Moderate" if ratio < 0.7 else "Slight"
        team = home.name if favorite == FavoritePick.HOME else away.name
        return f"{strength} favorite: {team} {prices}"

    @staticmethod
    def _streaks(home: TeamFeatureSet, away: TeamFeatureSet) -> Optional[str]:
        """Call out three or more wins (or losses) in a team's last five results."""
        if not home.recent_matches or not away.recent_matches:
            return None

        sentences = []
        for team in (home, away):
            last_five = [m.result for m in team.recent_matches[:5]]
            wins, losses = last_five.count("W"), last_five.count("L")
            if wins >= 3:
                sentences.append(f"{team.name} on {wins}-match win streak.")
            if losses >= 3:
                sentences.append(f"{team.name} on {losses}-match losing streak.")
        if not sentences:
            return None
        return "Recent form: " + " ".join(sentences)
