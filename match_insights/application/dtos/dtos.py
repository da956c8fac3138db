"""
Data Transfer Objects (DTOs) Module

DTOs are used to transfer data into and out of the engine.
They use Pydantic for validation and serialization.
"""

from datetime import datetime
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field

from match_insights.domain.entities.entities import (
    GoalSide,
    HistoricalMatch,
    MarketOutcome,
    MarketQuote,
    MatchAggregate,
    TableRow,
    TeamRef,
    TeamSeasonStats,
    VenueSplit,
)
from match_insights.domain.entities.features import (
    FormTrend,
    PositionTier,
    RivalryIntensity,
    ScoringPattern,
    Seasonality,
)
from match_insights.domain.entities.prediction import FavoritePick, LeagueMetadata


# ============================================================
# Input DTOs
# ============================================================

class TeamRefDTO(BaseModel):
    """Team reference as supplied by the storage collaborator."""
    name: str
    id: Optional[str] = None
    medium_name: Optional[str] = None
    abbreviation: Optional[str] = None

    def to_entity(self) -> TeamRef:
        return TeamRef(self.name, self.id, self.medium_name, self.abbreviation)


class TableRowDTO(BaseModel):
    team: TeamRefDTO
    position: int = Field(..., ge=0)
    played: int = Field(default=0, ge=0)
    goals_for: int = Field(default=0, ge=0)
    goals_against: int = Field(default=0, ge=0)

    def to_entity(self) -> TableRow:
        return TableRow(self.team.to_entity(), self.position, self.played, self.goals_for, self.goals_against)


class VenueSplitDTO(BaseModel):
    home: float = 0.0
    away: float = 0.0
    total: float = 0.0

    def to_entity(self) -> VenueSplit:
        return VenueSplit(self.home, self.away, self.total)


class TeamSeasonStatsDTO(BaseModel):
    """Pre-aggregated season statistics; goals_conceded_average is per match."""
    matches: VenueSplitDTO = Field(default_factory=VenueSplitDTO)
    wins: VenueSplitDTO = Field(default_factory=VenueSplitDTO)
    draws: Optional[VenueSplitDTO] = None
    losses: Optional[VenueSplitDTO] = None
    goals_scored: VenueSplitDTO = Field(default_factory=VenueSplitDTO)
    goals_conceded_average: VenueSplitDTO = Field(default_factory=VenueSplitDTO)
    clean_sheets: VenueSplitDTO = Field(default_factory=VenueSplitDTO)
    both_teams_scored: VenueSplitDTO = Field(default_factory=VenueSplitDTO)
    first_half_goals: Optional[float] = None
    second_half_goals: Optional[float] = None

    def to_entity(self) -> TeamSeasonStats:
        return TeamSeasonStats(
            matches=self.matches.to_entity(),
            wins=self.wins.to_entity(),
            draws=self.draws.to_entity() if self.draws else None,
            losses=self.losses.to_entity() if self.losses else None,
            goals_scored=self.goals_scored.to_entity(),
            goals_conceded_average=self.goals_conceded_average.to_entity(),
            clean_sheets=self.clean_sheets.to_entity(),
            both_teams_scored=self.both_teams_scored.to_entity(),
            first_half_goals=self.first_half_goals,
            second_half_goals=self.second_half_goals,
        )


class MarketOutcomeDTO(BaseModel):
    id: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[float, str]] = Field(default=None, description="Raw decimal price")

    def to_entity(self) -> MarketOutcome:
        return MarketOutcome(self.id, self.description, self.price)


class MarketQuoteDTO(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    specifier: Optional[str] = None
    outcomes: List[MarketOutcomeDTO] = Field(default_factory=list)

    def to_entity(self) -> MarketQuote:
        return MarketQuote(self.id, self.name, self.title, self.specifier, [o.to_entity() for o in self.outcomes])


class HistoricalMatchDTO(BaseModel):
    home_team: TeamRefDTO
    away_team: TeamRefDTO
    home_goals: Optional[int] = Field(default=None, ge=0)
    away_goals: Optional[int] = Field(default=None, ge=0)
    played_at: Optional[datetime] = None
    id: Optional[str] = None
    winner: Optional[GoalSide] = None
    home_corners: Optional[int] = None
    away_corners: Optional[int] = None
    first_goal: Optional[GoalSide] = None
    last_goal: Optional[GoalSide] = None
    goal_period: Optional[str] = None

    def to_entity(self) -> HistoricalMatch:
        return HistoricalMatch(
            home_team=self.home_team.to_entity(),
            away_team=self.away_team.to_entity(),
            home_goals=self.home_goals,
            away_goals=self.away_goals,
            played_at=self.played_at,
            id=self.id,
            winner=self.winner,
            home_corners=self.home_corners,
            away_corners=self.away_corners,
            first_goal=self.first_goal,
            last_goal=self.last_goal,
            goal_period=self.goal_period,
        )


class MatchAggregateDTO(BaseModel):
    """One fixture of an input batch."""
    match_id: str = Field(..., description="Match identifier")
    home_team: TeamRefDTO
    away_team: TeamRefDTO
    kickoff: Optional[datetime] = None
    tournament: Optional[str] = None
    table: List[TableRowDTO] = Field(default_factory=list)
    markets: List[MarketQuoteDTO] = Field(default_factory=list)
    home_history: List[HistoricalMatchDTO] = Field(default_factory=list)
    away_history: List[HistoricalMatchDTO] = Field(default_factory=list)
    home_stats: Optional[TeamSeasonStatsDTO] = None
    away_stats: Optional[TeamSeasonStatsDTO] = None
    head_to_head: List[HistoricalMatchDTO] = Field(default_factory=list)
    league_matches: List[HistoricalMatchDTO] = Field(default_factory=list)

    def to_entity(self) -> MatchAggregate:
        return MatchAggregate(
            match_id=self.match_id,
            home_team=self.home_team.to_entity(),
            away_team=self.away_team.to_entity(),
            kickoff=self.kickoff,
            tournament=self.tournament,
            table=[r.to_entity() for r in self.table],
            markets=[m.to_entity() for m in self.markets],
            home_history=[m.to_entity() for m in self.home_history],
            away_history=[m.to_entity() for m in self.away_history],
            home_stats=self.home_stats.to_entity() if self.home_stats else None,
            away_stats=self.away_stats.to_entity() if self.away_stats else None,
            head_to_head=[m.to_entity() for m in self.head_to_head],
            league_matches=[m.to_entity() for m in self.league_matches],
        )


# ============================================================
# Response DTOs
# ============================================================

class RecentMatchDTO(BaseModel):
    date: str
    opponent: str
    is_home: bool
    result: str
    score: str

    class Config:
        from_attributes = True


class TeamFeatureSetDTO(BaseModel):
    """Team feature set data transfer object."""
    name: str
    team_id: Optional[str] = None
    position: int = Field(..., ge=0)
    tier: PositionTier
    relative_strength: float = Field(..., ge=0, le=1)

    form: str = Field(..., max_length=5)
    form_strength: float = Field(..., ge=0, le=100)
    form_consistency: float = Field(..., ge=0, le=1)
    momentum: float = Field(..., ge=-100, le=100)

    offensive_efficiency: float
    defensive_efficiency: float

    home_matches: int
    away_matches: int
    home_wins: int
    away_wins: int
    home_draws: int
    away_draws: int
    home_losses: int
    away_losses: int
    win_percentage: float
    home_win_percentage: float
    away_win_percentage: float

    avg_goals_scored: float
    home_avg_goals_scored: float
    away_avg_goals_scored: float
    avg_goals_conceded: float
    home_avg_goals_conceded: float
    away_avg_goals_conceded: float

    clean_sheets: int
    home_clean_sheets: int
    away_clean_sheets: int
    clean_sheet_percentage: float

    btts_rate: float
    home_btts_rate: float
    away_btts_rate: float
    home_matches_over_15: int
    away_matches_over_15: int
    average_corners: float

    first_goal_rate: float
    late_goal_rate: float
    scoring_first_win_rate: Optional[float] = None
    conceding_first_win_rate: Optional[float] = None
    first_half_goals_percent: Optional[float] = None
    second_half_goals_percent: Optional[float] = None

    points_vs_top: Optional[float] = None
    points_vs_mid: Optional[float] = None
    points_vs_bottom: Optional[float] = None

    performance_rating: float = Field(..., ge=0, le=100)
    expected_points: float = Field(..., ge=0, le=3)

    recent_matches: List[RecentMatchDTO] = Field(default_factory=list)
    defaulted_fields: List[str] = Field(default_factory=list)
    is_fallback: bool = False

    class Config:
        from_attributes = True


class HeadToHeadResultDTO(BaseModel):
    date: str
    result: str

    class Config:
        from_attributes = True


class HeadToHeadDTO(BaseModel):
    """Head-to-head feature set data transfer object."""
    matches: int = Field(..., ge=0)
    wins: int
    draws: int
    losses: int
    goals_scored: int
    goals_conceded: int

    home_venue_matches: int
    away_venue_matches: int
    home_wins: int
    away_wins: int
    home_goals_scored: int
    home_goals_conceded: int
    away_goals_scored: int
    away_goals_conceded: int

    avg_goals_per_match: float
    avg_home_goals_per_match: float
    avg_away_goals_per_match: float
    btts_rate: float
    over_25_rate: float
    over_35_rate: float
    clean_sheet_rate: float
    home_clean_sheet_rate: float
    away_clean_sheet_rate: float

    dominance: float = Field(..., ge=-1, le=1)
    recent_dominance: float = Field(..., ge=-1, le=1)
    win_streak: int
    draw_streak: int
    unbeaten_streak: int
    form_trend: FormTrend

    avg_match_interval_days: float
    seasonality: Seasonality
    rivalry_intensity: RivalryIntensity
    scoring_pattern: ScoringPattern
    predictability: float = Field(..., ge=0.1, le=0.9)

    recent_results: List[HeadToHeadResultDTO] = Field(default_factory=list)

    class Config:
        from_attributes = True


class MatchOddsDTO(BaseModel):
    """Normalized prices; every field is strictly positive."""
    home_win: float = Field(..., gt=0)
    draw: float = Field(..., gt=0)
    away_win: float = Field(..., gt=0)
    over_15: float = Field(..., gt=0)
    under_15: float = Field(..., gt=0)
    over_25: float = Field(..., gt=0)
    under_25: float = Field(..., gt=0)
    btts_yes: float = Field(..., gt=0)
    btts_no: float = Field(..., gt=0)

    class Config:
        from_attributes = True


class CornerStatsDTO(BaseModel):
    home_avg_corners: float
    away_avg_corners: float
    total_avg_corners: float

    class Config:
        from_attributes = True


class ScoringPatternsDTO(BaseModel):
    home_first_goal_rate: float
    away_first_goal_rate: float
    home_late_goal_rate: float
    away_late_goal_rate: float

    class Config:
        from_attributes = True


class PredictionRecordDTO(BaseModel):
    """Prediction record data transfer object."""
    match_id: str
    venue: str
    kickoff: Optional[datetime] = None
    date: str
    time: str
    home_team: TeamFeatureSetDTO
    away_team: TeamFeatureSetDTO
    head_to_head: HeadToHeadDTO
    odds: MatchOddsDTO
    favorite: FavoritePick
    confidence: int = Field(..., ge=5, le=95)
    expected_goals: float = Field(..., ge=0.5, le=6)
    defensive_strength: float = Field(..., ge=0, le=1.5)
    average_goals: float
    position_gap: int
    corner_stats: CornerStatsDTO
    scoring_patterns: ScoringPatternsDTO
    reasons: List[str] = Field(default_factory=list, max_length=8)

    class Config:
        from_attributes = True


class LeagueMetadataDTO(BaseModel):
    """Per-venue rolling statistics, rounded to one decimal."""
    matches: int
    total_goals: float
    average_goals: float
    home_win_rate: float
    draw_rate: float
    away_win_rate: float
    btts_rate: float

    @classmethod
    def from_metadata(cls, metadata: LeagueMetadata) -> "LeagueMetadataDTO":
        return cls(
            matches=metadata.matches,
            total_goals=round(metadata.total_expected_goals, 1),
            average_goals=round(metadata.average_expected_goals, 1),
            home_win_rate=round(metadata.home_win_rate, 1),
            draw_rate=round(metadata.draw_rate, 1),
            away_win_rate=round(metadata.away_win_rate, 1),
            btts_rate=round(metadata.btts_rate, 1),
        )


class EnvelopeMetadataDTO(BaseModel):
    total: int = Field(..., ge=0, description="Successful records")
    skipped: int = Field(default=0, ge=0, description="Aggregates rejected as invalid")
    errors: int = Field(default=0, ge=0, description="Matches that failed unexpectedly")
    date: str
    last_updated: datetime
    league_data: Dict[str, LeagueMetadataDTO] = Field(default_factory=dict)


class PredictionDataDTO(BaseModel):
    predictions: List[PredictionRecordDTO] = Field(default_factory=list)
    metadata: EnvelopeMetadataDTO


class PaginationDTO(BaseModel):
    current_page: int = 1
    total_pages: int = Field(..., ge=0)
    page_size: int = Field(..., ge=1)
    total_items: int = Field(..., ge=0)
    has_next: bool
    has_previous: bool


class PredictionEnvelopeDTO(BaseModel):
    """Output of a batch transform."""
    data: PredictionDataDTO
    pagination: PaginationDTO
