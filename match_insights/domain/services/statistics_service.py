"""
Statistics Service Module

Recomputes team statistics from raw match history and estimates the
league-wide goal average. Used as the fallback source whenever
pre-aggregated season statistics are missing.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from match_insights.domain.constants import (
    LEAGUE_MATCHES_SAMPLE,
    MIN_TABLE_SIZE_FOR_BANDS,
    OPPONENT_BAND_SIZE,
)
from match_insights.domain.entities.entities import (
    GoalSide,
    HistoricalMatch,
    MatchOutcome,
    TableRow,
    TeamRef,
    TeamSeasonStats,
)
from match_insights.domain.services.team_name_resolver import TeamNameResolver

logger = logging.getLogger(__name__)


def safe_divide(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


@dataclass(frozen=True)
class HistoryStatistics:
    """Per-venue tallies rebuilt from a team's last-N matches."""
    home_matches: int = 0
    away_matches: int = 0
    home_goals: int = 0
    away_goals: int = 0
    home_conceded: int = 0
    away_conceded: int = 0
    home_wins: int = 0
    away_wins: int = 0
    home_draws: int = 0
    away_draws: int = 0
    home_losses: int = 0
    away_losses: int = 0
    home_clean_sheets: int = 0
    away_clean_sheets: int = 0
    home_btts: int = 0
    away_btts: int = 0
    home_over_15: int = 0
    away_over_15: int = 0
    average_corners: float = 0.0
    first_goal_rate: float = 0.0
    late_goal_rate: float = 0.0
    scoring_first_win_rate: Optional[float] = None
    conceding_first_win_rate: Optional[float] = None

    @property
    def matches(self) -> int:
        return self.home_matches + self.away_matches

    @property
    def clean_sheets(self) -> int:
        return self.home_clean_sheets + self.away_clean_sheets

    @property
    def avg_goals_scored(self) -> float:
        return safe_divide(self.home_goals + self.away_goals, self.matches)

    @property
    def home_avg_goals_scored(self) -> float:
        return safe_divide(self.home_goals, self.home_matches)

    @property
    def away_avg_goals_scored(self) -> float:
        return safe_divide(self.away_goals, self.away_matches)

    @property
    def avg_goals_conceded(self) -> float:
        return safe_divide(self.home_conceded + self.away_conceded, self.matches)

    @property
    def home_avg_goals_conceded(self) -> float:
        return safe_divide(self.home_conceded, self.home_matches)

    @property
    def away_avg_goals_conceded(self) -> float:
        return safe_divide(self.away_conceded, self.away_matches)

    @property
    def win_percentage(self) -> float:
        return safe_divide(self.home_wins + self.away_wins, self.matches) * 100

    @property
    def home_win_percentage(self) -> float:
        return safe_divide(self.home_wins, self.home_matches) * 100

    @property
    def away_win_percentage(self) -> float:
        return safe_divide(self.away_wins, self.away_matches) * 100

    @property
    def clean_sheet_percentage(self) -> float:
        return safe_divide(self.clean_sheets, self.matches) * 100

    @property
    def btts_rate(self) -> float:
        return safe_divide(self.home_btts + self.away_btts, self.matches) * 100

    @property
    def home_btts_rate(self) -> float:
        return safe_divide(self.home_btts, self.home_matches) * 100

    @property
    def away_btts_rate(self) -> float:
        return safe_divide(self.away_btts, self.away_matches) * 100


class StatisticsService:
    """
    Service for calculating team and league statistics from history.
    """

    def __init__(self, resolver: Optional[TeamNameResolver] = None):
        self.resolver = resolver or TeamNameResolver()

    def calculate_history_statistics(
        self,
        team: TeamRef,
        history: Sequence[HistoricalMatch],
    ) -> HistoryStatistics:
        """
        Rebuild per-venue statistics for a team from its recent matches.

        Args:
            team: Team whose perspective is used
            history: Its recent matches

        Returns:
            HistoryStatistics (all zero when no match has a result)
        """
        t = dict.fromkeys(HistoryStatistics.__dataclass_fields__, 0)
        corner_total = 0
        corner_matches = 0
        first_goal_marked = 0
        scored_first = 0
        last_goal_marked = 0
        scored_last = 0
        scored_first_wins = 0
        conceded_first = 0
        conceded_first_wins = 0

        for match in history:
            is_home = self.resolver.plays_home(team, match.home_team)

            if match.has_corners:
                corner_total += (match.home_corners or 0) + (match.away_corners or 0)
                corner_matches += 1

            own_side = GoalSide.HOME if is_home else GoalSide.AWAY
            won = match.outcome == (MatchOutcome.HOME_WIN if is_home else MatchOutcome.AWAY_WIN)

            if match.first_goal is not None:
                first_goal_marked += 1
                if match.first_goal == own_side:
                    scored_first += 1
                    if match.has_result and won:
                        scored_first_wins += 1
                else:
                    conceded_first += 1
                    if match.has_result and won:
                        conceded_first_wins += 1

            if match.last_goal is not None:
                last_goal_marked += 1
                if match.last_goal == own_side:
                    scored_last += 1

            if not match.has_result:
                continue

            venue = "home" if is_home else "away"
            goals_for = match.home_goals if is_home else match.away_goals
            goals_against = match.away_goals if is_home else match.home_goals

            t[f"{venue}_matches"] += 1
            t[f"{venue}_goals"] += goals_for
            t[f"{venue}_conceded"] += goals_against

            if match.outcome == MatchOutcome.DRAW:
                t[f"{venue}_draws"] += 1
            elif won:
                t[f"{venue}_wins"] += 1
            else:
                t[f"{venue}_losses"] += 1

            if goals_against == 0:
                t[f"{venue}_clean_sheets"] += 1
            if goals_for > 0 and goals_against > 0:
                t[f"{venue}_btts"] += 1
            if goals_for + goals_against > 1.5:
                t[f"{venue}_over_15"] += 1

        t["average_corners"] = safe_divide(corner_total, corner_matches)
        t["first_goal_rate"] = round(safe_divide(scored_first, first_goal_marked) * 100, 2)
        t["late_goal_rate"] = round(safe_divide(scored_last, last_goal_marked) * 100, 2)
        t["scoring_first_win_rate"] = (
            round(scored_first_wins / scored_first * 100, 2) if scored_first else None
        )
        t["conceding_first_win_rate"] = (
            round(conceded_first_wins / conceded_first * 100, 2) if conceded_first else None
        )
        return HistoryStatistics(**t)

    def calculate_points_by_band(
        self,
        team: TeamRef,
        history: Sequence[HistoricalMatch],
        table: Sequence[TableRow],
    ) -> Tuple[Optional[float], Optional[float], Optional[float]]:
        """
        Average points per match against top, middle and bottom opposition.

        Top and bottom are the first and last three table rows. A band with
        no meeting, or a table shorter than six rows, gives None.
        """
        if len(table) < MIN_TABLE_SIZE_FOR_BANDS:
            return None, None, None

        ordered = sorted(table, key=lambda r: r.position)
        top = ordered[:OPPONENT_BAND_SIZE]
        bottom = ordered[-OPPONENT_BAND_SIZE:]
        middle = ordered[OPPONENT_BAND_SIZE:-OPPONENT_BAND_SIZE]

        points = {"top": [], "mid": [], "bottom": []}
        for match in history:
            if match.outcome is None:
                continue
            is_home = self.resolver.plays_home(team, match.home_team)
            opponent = match.away_team if is_home else match.home_team
            row = self.resolver.resolve(opponent, ordered, key=lambda r: r.team)
            if row is None:
                continue

            if match.outcome == MatchOutcome.DRAW:
                earned = 1
            elif (match.outcome == MatchOutcome.HOME_WIN) == is_home:
                earned = 3
            else:
                earned = 0

            if row in top:
                points["top"].append(earned)
            elif row in bottom:
                points["bottom"].append(earned)
            elif row in middle:
                points["mid"].append(earned)

        def _average(values: List[int]) -> Optional[float]:
            return round(sum(values) / len(values), 2) if values else None

        return _average(points["top"]), _average(points["mid"]), _average(points["bottom"])

    @staticmethod
    def calculate_league_average_goals(
        table: Sequence[TableRow],
        home_stats: Optional[TeamSeasonStats],
        away_stats: Optional[TeamSeasonStats],
        recent_matches: Sequence[HistoricalMatch],
        fallback: float,
    ) -> float:
        """
        Estimate the league goal average.

        Sources in order: table goals-for per match played, the teams'
        season scoring averages, the mean total goals of up to 25 recent
        results, then the configured fallback.
        """
        played = sum(r.played for r in table)
        if played > 0:
            return round(sum(r.goals_for for r in table) / played, 2)

        team_averages = [
            safe_divide(s.goals_scored.total, s.matches.total)
            for s in (home_stats, away_stats)
            if s is not None
        ]
        team_averages = [a for a in team_averages if a > 0]
        if team_averages:
            return round(sum(team_averages) / len(team_averages), 2)

        decided = [m for m in recent_matches if m.has_result][:LEAGUE_MATCHES_SAMPLE]
        if decided:
            return round(sum(m.total_goals for m in decided) / len(decided), 2)

        logger.debug(f"No league goal data; using fallback {fallback}")
        return fallback
