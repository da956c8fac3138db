"""
Head-to-Head Analyzer Module

Derives pairwise historical features for a fixture from the provider's
list of previous meetings, always from the home team's perspective.
"""

import logging
from typing import List, Optional, Sequence

from match_insights.domain.constants import (
    H2H_HIGH_INTENSITY_GOALS,
    H2H_LOW_INTENSITY_GOALS,
    H2H_PATTERN_BALANCE,
    H2H_PATTERN_SHARE,
    H2H_RECENT_RESULTS_LIMIT,
    H2H_RECENT_WINDOW,
    H2H_SEASONALITY_THRESHOLD,
    H2H_TREND_THRESHOLD,
    NEUTRAL_PREDICTABILITY,
    PREDICTABILITY_MAX,
    PREDICTABILITY_MIN,
)
from match_insights.domain.entities.entities import HistoricalMatch, TeamRef
from match_insights.domain.entities.features import (
    FormTrend,
    HeadToHeadFeatureSet,
    HeadToHeadResult,
    RivalryIntensity,
    ScoringPattern,
    Seasonality,
)
from match_insights.domain.services.form_analyzer import sort_recent_first
from match_insights.domain.services.team_name_resolver import (
    AbbreviationMatcher,
    ContainsNameMatcher,
    ExactNameMatcher,
    NormalizedNameMatcher,
    TeamNameResolver,
    abbreviation_of,
)

logger = logging.getLogger(__name__)

STRICT_NAME_MATCHERS = (ExactNameMatcher(), ContainsNameMatcher())
LENIENT_NAME_MATCHERS = (AbbreviationMatcher(), NormalizedNameMatcher())

POINTS = {"W": 3, "D": 1, "L": 0}


def _points_per_game(results: Sequence[str]) -> float:
    return sum(POINTS[r] for r in results) / len(results)


def _dominance(results: Sequence[str]) -> float:
    if not results:
        return 0.0
    return (results.count("W") - results.count("L")) / len(results)


def _rate(count: int, total: int) -> float:
    return float(round(count / total * 100)) if total else 0.0


class HeadToHeadAnalyzer:
    """
    Builds HeadToHeadFeatureSets.

    Meetings are selected strictly first (ids, then names). Only when that
    yields nothing is a lenient pass (abbreviations, normalized names) tried.
    """

    def __init__(self, resolver: Optional[TeamNameResolver] = None):
        self.resolver = resolver or TeamNameResolver()

    # ============================================================
    # Meeting selection
    # ============================================================

    def _is_meeting(self, match: HistoricalMatch, home: TeamRef, away: TeamRef, lenient: bool) -> bool:
        if lenient:
            matchers = LENIENT_NAME_MATCHERS
        else:
            if home.id and away.id:
                ids = (match.home_team.id, match.away_team.id)
                if ids == (home.id, away.id) or ids == (away.id, home.id):
                    return True
            matchers = STRICT_NAME_MATCHERS

        same = self.resolver.is_same_team
        return (
            (same(home, match.home_team, matchers) and same(away, match.away_team, matchers))
            or (same(home, match.away_team, matchers) and same(away, match.home_team, matchers))
        )

    def select_meetings(
        self,
        home: TeamRef,
        away: TeamRef,
        history: Sequence[HistoricalMatch],
    ) -> List[HistoricalMatch]:
        """Previous meetings with a known scoreline, strict pass first, then lenient."""
        candidates = [
            m for m in history
            if m.has_result and m.home_team is not None and m.away_team is not None
        ]
        meetings = [m for m in candidates if self._is_meeting(m, home, away, lenient=False)]
        if not meetings:
            meetings = [m for m in candidates if self._is_meeting(m, home, away, lenient=True)]
            if meetings:
                logger.debug(f"H2H {home.name} vs {away.name}: {len(meetings)} meetings via lenient matching")
        return meetings

    # ============================================================
    # Analysis
    # ============================================================

    def analyze(
        self,
        home: TeamRef,
        away: TeamRef,
        history: Sequence[HistoricalMatch],
    ) -> HeadToHeadFeatureSet:
        """
        Summarize previous meetings of two teams.

        Args:
            home: Home team of the upcoming fixture
            away: Away team of the upcoming fixture
            history: Shared matchup list from the provider

        Returns:
            HeadToHeadFeatureSet; the empty set when nothing matched or on error
        """
        if not history or not home or not away or not home.name or not away.name:
            return HeadToHeadFeatureSet.empty()
        try:
            meetings = self.select_meetings(home, away, history)
            if not meetings:
                return HeadToHeadFeatureSet.empty()
            return self._summarize(home, meetings)
        except Exception as e:
            logger.error(f"Error analyzing head-to-head for {home.name} vs {away.name}: {e}", exc_info=True)
            return HeadToHeadFeatureSet.empty()

    def _hosts(self, home: TeamRef, match: HistoricalMatch) -> bool:
        """Whether the fixture's home team was the home side of a meeting, lenient names included."""
        if self.resolver.plays_home(home, match.home_team):
            return True
        if self.resolver.plays_home(home, match.away_team):
            return False
        return self.resolver.is_same_team(home, match.home_team, LENIENT_NAME_MATCHERS)

    def _summarize(self, home: TeamRef, meetings: Sequence[HistoricalMatch]) -> HeadToHeadFeatureSet:
        wins = draws = losses = 0
        goals_scored = goals_conceded = 0
        home_venue = away_venue = 0
        home_wins = away_wins = 0
        home_scored = home_conceded = away_scored = away_conceded = 0
        clean_sheets = home_clean_sheets = away_clean_sheets = 0
        btts = over_25 = over_35 = 0
        win_streak = draw_streak = unbeaten_streak = 0
        max_win = max_draw = max_unbeaten = 0
        early_goals = late_goals = timed = 0
        recent_split: List[str] = []
        older_split: List[str] = []
        dates = []
        displayed: List[HeadToHeadResult] = []

        for match in sort_recent_first(meetings):
            at_home = self._hosts(home, match)
            scored = match.home_goals if at_home else match.away_goals
            conceded = match.away_goals if at_home else match.home_goals

            if scored > conceded:
                result = "W"
                wins += 1
                win_streak += 1
                draw_streak = 0
                unbeaten_streak += 1
                if at_home:
                    home_wins += 1
                else:
                    away_wins += 1
            elif scored < conceded:
                result = "L"
                losses += 1
                win_streak = draw_streak = unbeaten_streak = 0
            else:
                result = "D"
                draws += 1
                win_streak = 0
                draw_streak += 1
                unbeaten_streak += 1
            max_win = max(max_win, win_streak)
            max_draw = max(max_draw, draw_streak)
            max_unbeaten = max(max_unbeaten, unbeaten_streak)

            goals_scored += scored
            goals_conceded += conceded
            if at_home:
                home_venue += 1
                home_scored += scored
                home_conceded += conceded
            else:
                away_venue += 1
                away_scored += scored
                away_conceded += conceded

            if conceded == 0:
                clean_sheets += 1
                if at_home:
                    home_clean_sheets += 1
                else:
                    away_clean_sheets += 1

            total = match.total_goals
            if match.home_goals > 0 and match.away_goals > 0:
                btts += 1
            if total > 2.5:
                over_25 += 1
            if total > 3.5:
                over_35 += 1

            if match.goal_period:
                period = match.goal_period.lower()
                if "1st" in period or "first" in period or "early" in period:
                    early_goals += 1
                    timed += 1
                elif "2nd" in period or "second" in period or "late" in period:
                    late_goals += 1
                    timed += 1

            if len(recent_split) < H2H_RECENT_WINDOW:
                recent_split.append(result)
            else:
                older_split.append(result)

            if match.played_at:
                dates.append(match.played_at)
                if len(displayed) < H2H_RECENT_RESULTS_LIMIT:
                    displayed.append(HeadToHeadResult(
                        date=match.played_at.strftime("%Y-%m-%d"),
                        result=(
                            f"{abbreviation_of(match.home_team)} {match.home_goals}-"
                            f"{match.away_goals} {abbreviation_of(match.away_team)}"
                        ),
                    ))

        count = wins + draws + losses
        dominance = _dominance(recent_split + older_split)
        recent_dominance = _dominance(recent_split)

        return HeadToHeadFeatureSet(
            matches=count,
            wins=wins,
            draws=draws,
            losses=losses,
            goals_scored=goals_scored,
            goals_conceded=goals_conceded,
            home_venue_matches=home_venue,
            away_venue_matches=away_venue,
            home_wins=home_wins,
            away_wins=away_wins,
            home_goals_scored=home_scored,
            home_goals_conceded=home_conceded,
            away_goals_scored=away_scored,
            away_goals_conceded=away_conceded,
            avg_goals_per_match=round((goals_scored + goals_conceded) / count, 2),
            avg_home_goals_per_match=round(home_scored / home_venue, 2) if home_venue else 0.0,
            avg_away_goals_per_match=round(away_scored / away_venue, 2) if away_venue else 0.0,
            btts_rate=_rate(btts, count),
            over_25_rate=_rate(over_25, count),
            over_35_rate=_rate(over_35, count),
            clean_sheet_rate=_rate(clean_sheets, count),
            home_clean_sheet_rate=_rate(home_clean_sheets, home_venue),
            away_clean_sheet_rate=_rate(away_clean_sheets, away_venue),
            dominance=round(dominance, 2),
            recent_dominance=round(recent_dominance, 2),
            win_streak=max_win,
            draw_streak=max_draw,
            unbeaten_streak=max_unbeaten,
            form_trend=self.calculate_trend(recent_split, older_split),
            avg_match_interval_days=self.calculate_average_interval(dates),
            seasonality=self.calculate_seasonality(recent_split, older_split),
            rivalry_intensity=self.calculate_rivalry_intensity(goals_scored + goals_conceded, count),
            scoring_pattern=self.calculate_scoring_pattern(early_goals, late_goals, timed),
            predictability=self.calculate_predictability(dominance, draws, count),
            recent_results=tuple(displayed),
        )

    # ============================================================
    # Qualitative tags
    # ============================================================

    @staticmethod
    def calculate_trend(recent: Sequence[str], older: Sequence[str]) -> FormTrend:
        """Points per game of the last three meetings against the rest."""
        if not recent or not older:
            return FormTrend.NEUTRAL
        delta = _points_per_game(recent) - _points_per_game(older)
        if delta >= H2H_TREND_THRESHOLD:
            return FormTrend.IMPROVING
        if delta <= -H2H_TREND_THRESHOLD:
            return FormTrend.DECLINING
        return FormTrend.NEUTRAL

    @staticmethod
    def calculate_seasonality(recent: Sequence[str], older: Sequence[str]) -> Seasonality:
        if len(recent) < 2 or len(older) < 2:
            return Seasonality.CONSISTENT
        recent_rate = recent.count("W") / len(recent)
        older_rate = older.count("W") / len(older)
        if abs(recent_rate - older_rate) > H2H_SEASONALITY_THRESHOLD:
            return Seasonality.IMPROVING if recent_rate > older_rate else Seasonality.DECLINING
        return Seasonality.CONSISTENT

    @staticmethod
    def calculate_rivalry_intensity(total_goals: int, matches: int) -> RivalryIntensity:
        if matches <= 0:
            return RivalryIntensity.MEDIUM
        goals_per_match = total_goals / matches
        if goals_per_match > H2H_HIGH_INTENSITY_GOALS:
            return RivalryIntensity.HIGH
        if goals_per_match < H2H_LOW_INTENSITY_GOALS:
            return RivalryIntensity.LOW
        return RivalryIntensity.MEDIUM

    @staticmethod
    def calculate_scoring_pattern(early: int, late: int, timed: int) -> ScoringPattern:
        if timed <= 0:
            return ScoringPattern.BALANCED
        early_share = early / timed
        late_share = late / timed
        if early_share > H2H_PATTERN_SHARE:
            return ScoringPattern.EARLY
        if late_share > H2H_PATTERN_SHARE:
            return ScoringPattern.LATE
        if abs(early_share - late_share) < H2H_PATTERN_BALANCE:
            return ScoringPattern.CONSISTENT
        return ScoringPattern.VOLATILE

    @staticmethod
    def calculate_predictability(dominance: float, draws: int, matches: int) -> float:
        """
        0.5 base, plus 25% of the (capped) dominance magnitude and 25% of a
        low-draw-rate factor, clamped to [0.1, 0.9]. Neutral below three meetings.
        """
        if matches <= 2:
            return NEUTRAL_PREDICTABILITY
        variance = min(abs(dominance), 0.8)
        consistency = max(0.5 - draws / matches, 0.0)
        predictability = 0.5 + variance * 0.25 + consistency * 0.25
        return round(max(PREDICTABILITY_MIN, min(PREDICTABILITY_MAX, predictability)), 2)

    @staticmethod
    def calculate_average_interval(dates: Sequence) -> float:
        """Mean days between consecutive meetings."""
        if len(dates) < 2:
            return 0.0
        stamps = sorted(d.timestamp() for d in dates)
        gaps = [(b - a) / 86400 for a, b in zip(stamps, stamps[1:])]
        return float(round(sum(gaps) / len(gaps)))
