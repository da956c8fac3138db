"""
Team Feature Extractor Module

Derives the normalized TeamFeatureSet for one side of a fixture.

Every field prefers the pre-aggregated season statistic. When that is
absent or non-positive it is recomputed from the team's match history,
and when both are missing a neutral constant is used instead.
"""

import logging
import math
from typing import Optional, Sequence, Tuple

from match_insights.domain.constants import (
    DEFAULT_POSITION_TIER,
    DEFAULT_RELATIVE_STRENGTH,
    EFFICIENCY_MAX,
    EFFICIENCY_MIN,
    LEAGUE_AVERAGE_GOALS_BASELINE,
    MIN_CONCEDED_FOR_DEFENSIVE_RATIO,
    NEUTRAL_EFFICIENCY,
    POSITION_TIER_CUTOFFS,
    POSITION_TIER_FALLBACK,
    RECENT_MATCHES_LIMIT,
)
from match_insights.domain.entities.entities import (
    HistoricalMatch,
    TableRow,
    TeamRef,
    TeamSeasonStats,
)
from match_insights.domain.entities.features import PositionTier, RecentMatch, TeamFeatureSet
from match_insights.domain.services.fallback_chain import LayeredDefaults
from match_insights.domain.services.form_analyzer import FormAnalyzer, result_letter, sort_recent_first
from match_insights.domain.services.statistics_service import (
    HistoryStatistics,
    StatisticsService,
    safe_divide,
)
from match_insights.domain.services.team_name_resolver import TeamNameResolver
from match_insights.domain.value_objects.value_objects import PositionInfo

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _split(stats: Optional[TeamSeasonStats], attr: str, venue: str) -> Optional[float]:
    if stats is None:
        return None
    split = getattr(stats, attr)
    if split is None:
        return None
    return getattr(split, venue)


def _stats_rate(stats: Optional[TeamSeasonStats], attr: str, venue: str) -> Optional[float]:
    """Count per match for one venue, as a percentage."""
    count = _split(stats, attr, venue)
    matches = _split(stats, "matches", venue)
    if count is None or not matches:
        return None
    return count / matches * 100


def _stats_average(stats: Optional[TeamSeasonStats], attr: str, venue: str) -> Optional[float]:
    total = _split(stats, attr, venue)
    matches = _split(stats, "matches", venue)
    if total is None or not matches:
        return None
    return total / matches


def _stats_draws(stats: Optional[TeamSeasonStats], venue: str) -> Optional[float]:
    """Reported draws, else matches minus wins minus reported losses."""
    reported = _split(stats, "draws", venue)
    if reported:
        return reported
    losses = _split(stats, "losses", venue)
    if stats is None or losses is None:
        return None
    return max(0.0, _split(stats, "matches", venue) - _split(stats, "wins", venue) - losses)


def _stats_losses(stats: Optional[TeamSeasonStats], venue: str) -> Optional[float]:
    """Reported losses, else matches minus wins minus reported draws."""
    reported = _split(stats, "losses", venue)
    if reported:
        return reported
    draws = _split(stats, "draws", venue)
    if stats is None or draws is None:
        return None
    return max(0.0, _split(stats, "matches", venue) - _split(stats, "wins", venue) - draws)


def _half_share(stats: Optional[TeamSeasonStats], first: bool) -> Optional[float]:
    if stats is None or stats.first_half_goals is None or stats.second_half_goals is None:
        return None
    total = stats.first_half_goals + stats.second_half_goals
    if total <= 0:
        return None
    part = stats.first_half_goals if first else stats.second_half_goals
    return round(part / total * 100, 2)


class TeamFeatureExtractor:
    """
    Builds TeamFeatureSets from season stats, match history and the league table.
    """

    def __init__(
        self,
        resolver: Optional[TeamNameResolver] = None,
        form_analyzer: Optional[FormAnalyzer] = None,
        statistics_service: Optional[StatisticsService] = None,
    ):
        self.resolver = resolver or TeamNameResolver()
        self.form_analyzer = form_analyzer or FormAnalyzer(self.resolver)
        self.statistics_service = statistics_service or StatisticsService(self.resolver)

    # ============================================================
    # League position
    # ============================================================

    def calculate_position(self, team: TeamRef, table: Sequence[TableRow]) -> PositionInfo:
        """
        Place a team in the table.

        An unresolved team is put at the table midpoint; without a table the
        position is 0, which maps to the neutral tier.
        """
        if not table:
            return PositionInfo(0, DEFAULT_POSITION_TIER, DEFAULT_RELATIVE_STRENGTH)

        row = self.resolver.resolve(team, table, key=lambda r: r.team)
        if row is not None:
            position = row.position
        else:
            position = len(table) // 2
            logger.debug(f"Team '{team.name}' not found in table; using midpoint {position}")

        return self.position_info(position, len(table))

    @staticmethod
    def position_info(position: int, table_size: int) -> PositionInfo:
        if position <= 0 or table_size <= 0:
            return PositionInfo(0, DEFAULT_POSITION_TIER, DEFAULT_RELATIVE_STRENGTH)

        relative = (position - 1) / max(1, table_size - 1)
        strength = _clamp(1 - relative, 0.0, 1.0)

        tier = POSITION_TIER_FALLBACK
        for cutoff, label in POSITION_TIER_CUTOFFS:
            if position <= math.ceil(table_size * cutoff):
                tier = label
                break
        return PositionInfo(position, tier, round(strength, 4))

    # ============================================================
    # Derived metrics
    # ============================================================

    @staticmethod
    def calculate_efficiencies(
        avg_scored: float,
        avg_conceded: float,
        matches_played: int,
    ) -> Tuple[float, float]:
        """
        Offensive and defensive efficiency against the league baseline.

        Both are neutral (1.0) when the team has no recorded match.
        """
        if matches_played <= 0:
            return NEUTRAL_EFFICIENCY, NEUTRAL_EFFICIENCY
        offensive = _clamp(avg_scored / LEAGUE_AVERAGE_GOALS_BASELINE, EFFICIENCY_MIN, EFFICIENCY_MAX)
        defensive = _clamp(
            LEAGUE_AVERAGE_GOALS_BASELINE / max(avg_conceded, MIN_CONCEDED_FOR_DEFENSIVE_RATIO),
            EFFICIENCY_MIN,
            EFFICIENCY_MAX,
        )
        return round(offensive, 4), round(defensive, 4)

    @staticmethod
    def calculate_performance_rating(
        relative_strength: float,
        form_strength: float,
        avg_scored: float,
        avg_conceded: float,
        win_percentage: float,
    ) -> float:
        """
        Weighted 0-100 rating.

        30% table strength, 25% form, 15% attack (goals per game capped at 3),
        15% defense (1 - conceded/3, floored at 0), 15% win percentage.
        """
        attack = min(avg_scored, 3.0) / 3.0
        defense = max(0.0, 1 - avg_conceded / 3.0)
        rating = (
            relative_strength * 0.30
            + form_strength / 100 * 0.25
            + attack * 0.15
            + defense * 0.15
            + win_percentage / 100 * 0.15
        ) * 100
        return round(_clamp(rating, 0.0, 100.0), 2)

    @staticmethod
    def calculate_expected_points(win_percentage: float, form_strength: float, performance_rating: float) -> float:
        points = (
            3 * win_percentage / 100
            + 0.5 * (form_strength / 100 - 0.5)
            + 0.5 * (performance_rating / 100 - 0.5)
        )
        return round(_clamp(points, 0.0, 3.0), 2)

    def build_recent_matches(self, team: TeamRef, history: Sequence[HistoricalMatch]) -> Tuple[RecentMatch, ...]:
        recent = []
        for match in sort_recent_first(history):
            if match.outcome is None:
                continue
            is_home = self.resolver.plays_home(team, match.home_team)
            opponent = match.away_team if is_home else match.home_team
            score = f"{match.home_goals}-{match.away_goals}" if match.has_result else ""
            recent.append(RecentMatch(
                date=match.played_at.strftime("%Y-%m-%d") if match.played_at else "",
                opponent=opponent.name if opponent else "",
                is_home=is_home,
                result=result_letter(match.outcome, is_home),
                score=score,
            ))
            if len(recent) >= RECENT_MATCHES_LIMIT:
                break
        return tuple(recent)

    # ============================================================
    # Extraction
    # ============================================================

    def extract(
        self,
        team: TeamRef,
        stats: Optional[TeamSeasonStats] = None,
        history: Sequence[HistoricalMatch] = (),
        table: Sequence[TableRow] = (),
    ) -> TeamFeatureSet:
        """
        Build the feature set for one team.

        Args:
            team: Team identity
            stats: Pre-aggregated season statistics, if any
            history: Last-N matches, if any
            table: League table snapshot, if any

        Returns:
            TeamFeatureSet; a minimal fallback set if anything goes wrong
        """
        try:
            return self._extract(team, stats, history or (), table or ())
        except Exception as e:
            logger.error(f"Error extracting features for team '{getattr(team, 'name', None)}': {e}", exc_info=True)
            name = getattr(team, "name", None) or "Unknown Team"
            return TeamFeatureSet.fallback(name, getattr(team, "id", None))

    def _extract(
        self,
        team: TeamRef,
        stats: Optional[TeamSeasonStats],
        history: Sequence[HistoricalMatch],
        table: Sequence[TableRow],
    ) -> TeamFeatureSet:
        hist: HistoryStatistics = self.statistics_service.calculate_history_statistics(team, history)
        layers = LayeredDefaults()
        resolve = layers.resolve
        count = layers.resolve_count

        position = self.calculate_position(team, table)
        if position.position == 0:
            layers.mark_defaulted("position")

        form = self.form_analyzer.extract_form(team, history)
        if not form:
            layers.mark_defaulted("form")

        home_matches = count("home_matches", _split(stats, "matches", "home"), hist.home_matches)
        away_matches = count("away_matches", _split(stats, "matches", "away"), hist.away_matches)
        home_wins = count("home_wins", _split(stats, "wins", "home"), hist.home_wins)
        away_wins = count("away_wins", _split(stats, "wins", "away"), hist.away_wins)
        home_draws = count("home_draws", _stats_draws(stats, "home"), hist.home_draws)
        away_draws = count("away_draws", _stats_draws(stats, "away"), hist.away_draws)
        home_losses = count("home_losses", _stats_losses(stats, "home"), hist.home_losses)
        away_losses = count("away_losses", _stats_losses(stats, "away"), hist.away_losses)

        stats_win_pct = None
        if stats is not None and stats.matches.total:
            stats_win_pct = safe_divide(stats.wins.home + stats.wins.away, stats.matches.total) * 100
        win_percentage = resolve("win_percentage", stats_win_pct, hist.win_percentage)
        home_win_percentage = resolve("home_win_percentage", _stats_rate(stats, "wins", "home"), hist.home_win_percentage)
        away_win_percentage = resolve("away_win_percentage", _stats_rate(stats, "wins", "away"), hist.away_win_percentage)

        avg_scored = resolve("avg_goals_scored", _stats_average(stats, "goals_scored", "total"), hist.avg_goals_scored)
        home_avg_scored = resolve(
            "home_avg_goals_scored", _stats_average(stats, "goals_scored", "home"), hist.home_avg_goals_scored
        )
        away_avg_scored = resolve(
            "away_avg_goals_scored", _stats_average(stats, "goals_scored", "away"), hist.away_avg_goals_scored
        )
        avg_conceded = resolve(
            "avg_goals_conceded", _split(stats, "goals_conceded_average", "total"), hist.avg_goals_conceded
        )
        home_avg_conceded = resolve(
            "home_avg_goals_conceded", _split(stats, "goals_conceded_average", "home"), hist.home_avg_goals_conceded
        )
        away_avg_conceded = resolve(
            "away_avg_goals_conceded", _split(stats, "goals_conceded_average", "away"), hist.away_avg_goals_conceded
        )

        clean_sheets = count("clean_sheets", _split(stats, "clean_sheets", "total"), hist.clean_sheets)
        home_clean_sheets = count("home_clean_sheets", _split(stats, "clean_sheets", "home"), hist.home_clean_sheets)
        away_clean_sheets = count("away_clean_sheets", _split(stats, "clean_sheets", "away"), hist.away_clean_sheets)
        clean_sheet_percentage = resolve(
            "clean_sheet_percentage", _stats_rate(stats, "clean_sheets", "total"), hist.clean_sheet_percentage
        )

        btts_rate = resolve("btts_rate", _stats_rate(stats, "both_teams_scored", "total"), hist.btts_rate)
        home_btts_rate = resolve(
            "home_btts_rate", _stats_rate(stats, "both_teams_scored", "home"), hist.home_btts_rate
        )
        away_btts_rate = resolve(
            "away_btts_rate", _stats_rate(stats, "both_teams_scored", "away"), hist.away_btts_rate
        )

        average_corners = resolve("average_corners", hist.average_corners)
        first_goal_rate = resolve("first_goal_rate", hist.first_goal_rate)
        late_goal_rate = resolve("late_goal_rate", hist.late_goal_rate)

        matches_played = home_matches + away_matches
        offensive, defensive = self.calculate_efficiencies(avg_scored, avg_conceded, matches_played)

        form_strength = self.form_analyzer.calculate_form_strength(form)
        form_consistency = self.form_analyzer.calculate_form_consistency(form)
        performance_rating = self.calculate_performance_rating(
            position.relative_strength, form_strength, avg_scored, avg_conceded, win_percentage
        )
        expected_points = self.calculate_expected_points(win_percentage, form_strength, performance_rating)
        momentum = self.form_analyzer.calculate_momentum(form_strength, win_percentage, performance_rating)

        points_vs_top, points_vs_mid, points_vs_bottom = self.statistics_service.calculate_points_by_band(
            team, history, table
        )

        return TeamFeatureSet(
            name=team.name,
            team_id=team.id,
            position=position.position,
            tier=PositionTier(position.tier),
            relative_strength=position.relative_strength,
            form=form,
            form_strength=form_strength,
            form_consistency=form_consistency,
            momentum=momentum,
            offensive_efficiency=offensive,
            defensive_efficiency=defensive,
            home_matches=home_matches,
            away_matches=away_matches,
            home_wins=home_wins,
            away_wins=away_wins,
            home_draws=home_draws,
            away_draws=away_draws,
            home_losses=home_losses,
            away_losses=away_losses,
            win_percentage=round(win_percentage, 2),
            home_win_percentage=round(home_win_percentage, 2),
            away_win_percentage=round(away_win_percentage, 2),
            avg_goals_scored=round(avg_scored, 2),
            home_avg_goals_scored=round(home_avg_scored, 2),
            away_avg_goals_scored=round(away_avg_scored, 2),
            avg_goals_conceded=round(avg_conceded, 2),
            home_avg_goals_conceded=round(home_avg_conceded, 2),
            away_avg_goals_conceded=round(away_avg_conceded, 2),
            clean_sheets=clean_sheets,
            home_clean_sheets=home_clean_sheets,
            away_clean_sheets=away_clean_sheets,
            clean_sheet_percentage=round(clean_sheet_percentage, 2),
            btts_rate=round(btts_rate, 2),
            home_btts_rate=round(home_btts_rate, 2),
            away_btts_rate=round(away_btts_rate, 2),
            home_matches_over_15=hist.home_over_15,
            away_matches_over_15=hist.away_over_15,
            average_corners=round(average_corners, 2),
            first_goal_rate=first_goal_rate,
            late_goal_rate=late_goal_rate,
            scoring_first_win_rate=hist.scoring_first_win_rate,
            conceding_first_win_rate=hist.conceding_first_win_rate,
            first_half_goals_percent=_half_share(stats, first=True),
            second_half_goals_percent=_half_share(stats, first=False),
            points_vs_top=points_vs_top,
            points_vs_mid=points_vs_mid,
            points_vs_bottom=points_vs_bottom,
            performance_rating=performance_rating,
            expected_points=expected_points,
            recent_matches=self.build_recent_matches(team, history),
            defaulted_fields=layers.defaulted_fields,
        )
