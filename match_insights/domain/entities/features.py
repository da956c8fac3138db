"""
Derived Feature Entities

Feature sets are rebuilt on every transform and never mutated after construction.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum


class PositionTier(str, Enum):
    """Coarse league-position bucket."""
    TOP = "top"
    UPPER_MID = "upper-mid"
    MID_TABLE = "mid-table"
    LOWER_MID = "lower-mid"
    RELEGATION_ZONE = "relegation-zone"


class FormTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    NEUTRAL = "neutral"


class Seasonality(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    CONSISTENT = "consistent"


class RivalryIntensity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ScoringPattern(str, Enum):
    EARLY = "early"
    LATE = "late"
    CONSISTENT = "consistent"
    VOLATILE = "volatile"
    BALANCED = "balanced"


@dataclass(frozen=True)
class RecentMatch:
    """One entry of a team's recent-matches list."""
    date: str
    opponent: str
    is_home: bool
    result: str
    score: str


@dataclass(frozen=True)
class HeadToHeadResult:
    """A previous meeting rendered for display, e.g. "ARS 2-1 CHE"."""
    date: str
    result: str


@dataclass(frozen=True)
class TeamFeatureSet:
    """
    Normalized statistic bundle for one side of a fixture.

    Rates ending in _percentage or _rate are percentages (0-100).
    Efficiencies are ratios to the league baseline, 1.0 meaning average.
    defaulted_fields lists the fields that ended on their neutral constant
    because neither season stats nor match history could provide them.
    """
    name: str
    team_id: Optional[str] = None
    position: int = 0
    tier: PositionTier = PositionTier.MID_TABLE
    relative_strength: float = 0.5

    form: str = ""
    form_strength: float = 0.0
    form_consistency: float = 0.5
    momentum: float = 0.0

    offensive_efficiency: float = 1.0
    defensive_efficiency: float = 1.0

    home_matches: int = 0
    away_matches: int = 0
    home_wins: int = 0
    away_wins: int = 0
    home_draws: int = 0
    away_draws: int = 0
    home_losses: int = 0
    away_losses: int = 0
    win_percentage: float = 0.0
    home_win_percentage: float = 0.0
    away_win_percentage: float = 0.0

    avg_goals_scored: float = 0.0
    home_avg_goals_scored: float = 0.0
    away_avg_goals_scored: float = 0.0
    avg_goals_conceded: float = 0.0
    home_avg_goals_conceded: float = 0.0
    away_avg_goals_conceded: float = 0.0

    clean_sheets: int = 0
    home_clean_sheets: int = 0
    away_clean_sheets: int = 0
    clean_sheet_percentage: float = 0.0

    btts_rate: float = 0.0
    home_btts_rate: float = 0.0
    away_btts_rate: float = 0.0
    home_matches_over_15: int = 0
    away_matches_over_15: int = 0
    average_corners: float = 0.0

    first_goal_rate: float = 0.0
    late_goal_rate: float = 0.0
    scoring_first_win_rate: Optional[float] = None
    conceding_first_win_rate: Optional[float] = None
    first_half_goals_percent: Optional[float] = None
    second_half_goals_percent: Optional[float] = None

    points_vs_top: Optional[float] = None
    points_vs_mid: Optional[float] = None
    points_vs_bottom: Optional[float] = None

    performance_rating: float = 0.0
    expected_points: float = 0.0

    recent_matches: Tuple[RecentMatch, ...] = ()
    defaulted_fields: Tuple[str, ...] = ()
    is_fallback: bool = False

    @property
    def matches_played(self) -> int:
        return self.home_matches + self.away_matches

    @classmethod
    def fallback(cls, name: str, team_id: Optional[str] = None) -> "TeamFeatureSet":
        """Minimal feature set used when extraction fails."""
        return cls(name=name, team_id=team_id, is_fallback=True)


@dataclass(frozen=True)
class HeadToHeadFeatureSet:
    """
    Pairwise history from the home team's perspective.

    The defaults are the "empty" feature set returned when no meeting matched.
    """
    matches: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_scored: int = 0
    goals_conceded: int = 0

    home_venue_matches: int = 0
    away_venue_matches: int = 0
    home_wins: int = 0
    away_wins: int = 0
    home_goals_scored: int = 0
    home_goals_conceded: int = 0
    away_goals_scored: int = 0
    away_goals_conceded: int = 0

    avg_goals_per_match: float = 0.0
    avg_home_goals_per_match: float = 0.0
    avg_away_goals_per_match: float = 0.0
    btts_rate: float = 0.0
    over_25_rate: float = 0.0
    over_35_rate: float = 0.0
    clean_sheet_rate: float = 0.0
    home_clean_sheet_rate: float = 0.0
    away_clean_sheet_rate: float = 0.0

    dominance: float = 0.0
    recent_dominance: float = 0.0
    win_streak: int = 0
    draw_streak: int = 0
    unbeaten_streak: int = 0
    form_trend: FormTrend = FormTrend.NEUTRAL

    avg_match_interval_days: float = 0.0
    seasonality: Seasonality = Seasonality.CONSISTENT
    rivalry_intensity: RivalryIntensity = RivalryIntensity.MEDIUM
    scoring_pattern: ScoringPattern = ScoringPattern.BALANCED
    predictability: float = 0.5

    recent_results: Tuple[HeadToHeadResult, ...] = ()

    @classmethod
    def empty(cls) -> "HeadToHeadFeatureSet":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.matches == 0
