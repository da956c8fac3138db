"""
Prediction Record Entities

The output record of the engine and the per-league accumulator it is folded into.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple
from enum import Enum

from match_insights.domain.entities.features import HeadToHeadFeatureSet, TeamFeatureSet
from match_insights.domain.value_objects.value_objects import MatchOdds


class FavoritePick(str, Enum):
    """Outcome priced as most likely by the market."""
    HOME = "home"
    DRAW = "draw"
    AWAY = "away"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CornerStats:
    home_avg_corners: float
    away_avg_corners: float
    total_avg_corners: float


@dataclass(frozen=True)
class ScoringPatterns:
    home_first_goal_rate: float
    away_first_goal_rate: float
    home_late_goal_rate: float
    away_late_goal_rate: float


@dataclass(frozen=True)
class PredictionRecord:
    """
    Normalized prediction for one fixture.

    Attributes:
        match_id: Identifier of the fixture
        venue: Competition label the record is grouped under
        kickoff: Scheduled kickoff, when known
        date: Kickoff date as YYYY-MM-DD
        time: Kickoff time as HH:MM
        home_team: Home feature set
        away_team: Away feature set
        head_to_head: Pairwise history
        odds: Nine normalized prices
        favorite: Side with the lowest 1X2 price
        confidence: Composite confidence score (5-95)
        expected_goals: Expected total goals (0.5-6)
        defensive_strength: Combined defensive factor
        reasons: Ranked justification strings (at most 8)
    """
    match_id: str
    home_team: TeamFeatureSet
    away_team: TeamFeatureSet
    head_to_head: Optional[HeadToHeadFeatureSet]
    odds: Optional[MatchOdds]
    favorite: FavoritePick
    confidence: int
    expected_goals: float
    defensive_strength: float
    reasons: Tuple[str, ...] = ()
    venue: str = ""
    kickoff: Optional[datetime] = None
    date: str = ""
    time: str = ""
    position_gap: int = 0
    average_goals: float = 0.0
    corner_stats: Optional[CornerStats] = None
    scoring_patterns: Optional[ScoringPatterns] = None


def _running_mean(previous: float, value: float, count: int) -> float:
    return (previous * (count - 1) + value) / count


@dataclass
class LeagueMetadata:
    """
    Rolling statistics for one venue label over a single batch.

    Rates are percentages updated with an incremental mean as records are folded in.
    """
    venue: str
    matches: int = 0
    total_expected_goals: float = 0.0
    home_win_rate: float = 0.0
    draw_rate: float = 0.0
    away_win_rate: float = 0.0
    btts_rate: float = 0.0
    _btts_samples: int = field(default=0, init=False, repr=False)

    def fold(self, record: PredictionRecord) -> None:
        """Fold one finished record into the running statistics."""
        self.matches += 1
        n = self.matches
        self.total_expected_goals += round(record.expected_goals)

        self.home_win_rate = _running_mean(
            self.home_win_rate, 100.0 if record.favorite == FavoritePick.HOME else 0.0, n
        )
        self.draw_rate = _running_mean(
            self.draw_rate, 100.0 if record.favorite == FavoritePick.DRAW else 0.0, n
        )
        self.away_win_rate = _running_mean(
            self.away_win_rate, 100.0 if record.favorite == FavoritePick.AWAY else 0.0, n
        )

        btts = record.odds.btts_probability if record.odds else None
        if btts is not None:
            self._btts_samples += 1
            self.btts_rate = _running_mean(self.btts_rate, btts, self._btts_samples)

    @property
    def average_expected_goals(self) -> float:
        return self.total_expected_goals / self.matches if self.matches else 0.0
