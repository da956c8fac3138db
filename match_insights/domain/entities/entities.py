"""
Domain Entities Module

Input aggregates handed to the engine by the storage collaborator.
These entities are read-only snapshots: the pipeline never mutates them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from enum import Enum

from match_insights.domain.exceptions import InsufficientDataException


class MatchOutcome(Enum):
    """Possible outcomes of a football match."""
    HOME_WIN = "home_win"
    DRAW = "draw"
    AWAY_WIN = "away_win"


class GoalSide(str, Enum):
    """Side of the pitch credited with an event (winner, first goal, last goal)."""
    HOME = "home"
    AWAY = "away"


@dataclass(frozen=True)
class TeamRef:
    """
    Reference to a team as the provider spells it.

    Attributes:
        name: Full name of the team
        id: Provider identifier, when known
        medium_name: Alternative display name (e.g., "Man Utd")
        abbreviation: Short code (e.g., "MUN")
    """
    name: str
    id: Optional[str] = None
    medium_name: Optional[str] = None
    abbreviation: Optional[str] = None


@dataclass(frozen=True)
class TableRow:
    """One row of a league table snapshot."""
    team: TeamRef
    position: int
    played: int = 0
    goals_for: int = 0
    goals_against: int = 0


@dataclass(frozen=True)
class VenueSplit:
    """A statistic split by venue."""
    home: float = 0.0
    away: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class TeamSeasonStats:
    """
    Pre-aggregated season statistics for a team.

    Counts are absolute except goals_conceded_average, which is per match.
    draws and losses are optional because several providers omit them.
    """
    matches: VenueSplit = field(default_factory=VenueSplit)
    wins: VenueSplit = field(default_factory=VenueSplit)
    draws: Optional[VenueSplit] = None
    losses: Optional[VenueSplit] = None
    goals_scored: VenueSplit = field(default_factory=VenueSplit)
    goals_conceded_average: VenueSplit = field(default_factory=VenueSplit)
    clean_sheets: VenueSplit = field(default_factory=VenueSplit)
    both_teams_scored: VenueSplit = field(default_factory=VenueSplit)
    first_half_goals: Optional[float] = None
    second_half_goals: Optional[float] = None


@dataclass(frozen=True)
class MarketOutcome:
    """A priced outcome inside a market. The price is kept raw until normalized."""
    id: Optional[str] = None
    description: Optional[str] = None
    price: Any = None


@dataclass(frozen=True)
class MarketQuote:
    """A bookmaker market (1X2, totals, BTTS, ...)."""
    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    specifier: Optional[str] = None
    outcomes: List[MarketOutcome] = field(default_factory=list)


@dataclass(frozen=True)
class HistoricalMatch:
    """
    A finished (or partially reported) match from a team's history.

    Attributes:
        home_team: Home side of the historical match
        away_team: Away side of the historical match
        home_goals: Goals scored by the home side (None if unknown)
        away_goals: Goals scored by the away side (None if unknown)
        played_at: Kickoff timestamp
        winner: Explicit winner reported by the provider; None means draw or unknown
        first_goal: Side that scored first
        last_goal: Side that scored last
        goal_period: Free-text period marker ("1st half", "late", ...)
    """
    home_team: TeamRef
    away_team: TeamRef
    home_goals: Optional[int] = None
    away_goals: Optional[int] = None
    played_at: Optional[datetime] = None
    id: Optional[str] = None
    winner: Optional[GoalSide] = None
    home_corners: Optional[int] = None
    away_corners: Optional[int] = None
    first_goal: Optional[GoalSide] = None
    last_goal: Optional[GoalSide] = None
    goal_period: Optional[str] = None

    @property
    def has_result(self) -> bool:
        """Check if the scoreline is known."""
        return self.home_goals is not None and self.away_goals is not None

    @property
    def outcome(self) -> Optional[MatchOutcome]:
        """Get the outcome, trusting the explicit winner over the scoreline."""
        if self.winner == GoalSide.HOME:
            return MatchOutcome.HOME_WIN
        if self.winner == GoalSide.AWAY:
            return MatchOutcome.AWAY_WIN
        if not self.has_result:
            return None
        if self.home_goals > self.away_goals:
            return MatchOutcome.HOME_WIN
        elif self.home_goals < self.away_goals:
            return MatchOutcome.AWAY_WIN
        return MatchOutcome.DRAW

    @property
    def total_goals(self) -> Optional[int]:
        if not self.has_result:
            return None
        return self.home_goals + self.away_goals

    @property
    def has_corners(self) -> bool:
        return (self.home_corners or 0) > 0 or (self.away_corners or 0) > 0


@dataclass(frozen=True)
class MatchAggregate:
    """
    Everything known about an upcoming fixture.

    Attributes:
        match_id: Unique identifier of the fixture
        home_team: Home team reference
        away_team: Away team reference
        kickoff: Scheduled kickoff
        tournament: Competition name, used as the venue label of the record
        table: League table snapshot (may be empty)
        markets: Bookmaker markets (may be empty)
        home_history: Last-N matches of the home team
        away_history: Last-N matches of the away team
        home_stats: Pre-aggregated season statistics of the home team
        away_stats: Pre-aggregated season statistics of the away team
        head_to_head: Previous meetings as reported by the provider
        league_matches: Recent results of the competition
    """
    match_id: str
    home_team: TeamRef
    away_team: TeamRef
    kickoff: Optional[datetime] = None
    tournament: Optional[str] = None
    table: List[TableRow] = field(default_factory=list)
    markets: List[MarketQuote] = field(default_factory=list)
    home_history: List[HistoricalMatch] = field(default_factory=list)
    away_history: List[HistoricalMatch] = field(default_factory=list)
    home_stats: Optional[TeamSeasonStats] = None
    away_stats: Optional[TeamSeasonStats] = None
    head_to_head: List[HistoricalMatch] = field(default_factory=list)
    league_matches: List[HistoricalMatch] = field(default_factory=list)

    def validate(self) -> None:
        """Raise if the aggregate cannot produce a record at all."""
        if not self.match_id:
            raise InsufficientDataException("Match id is required")
        if self.home_team is None or not self.home_team.name:
            raise InsufficientDataException(f"Match {self.match_id}: home team name is required")
        if self.away_team is None or not self.away_team.name:
            raise InsufficientDataException(f"Match {self.match_id}: away team name is required")
