"""
Shared builders for the test suite.

Builders are exposed as fixtures returning factory callables so each test
can describe exactly the aggregate it needs.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

import pytest

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

REFERENCE_DATE = datetime(2024, 5, 1, 15, 0)

TABLE_NAMES = (
    "Dynamo", "Rovers", "Athletic", "City", "Albion",
    "Town", "Wanderers", "County", "Rangers", "Harriers",
)


def build_match(
    home: str,
    away: str,
    home_goals: Optional[int],
    away_goals: Optional[int],
    days_ago: Optional[int] = 7,
    **kwargs,
) -> HistoricalMatch:
    played_at = REFERENCE_DATE - timedelta(days=days_ago) if days_ago is not None else None
    return HistoricalMatch(
        home_team=TeamRef(home),
        away_team=TeamRef(away),
        home_goals=home_goals,
        away_goals=away_goals,
        played_at=played_at,
        **kwargs,
    )


def build_table(names: Sequence[str] = TABLE_NAMES, played: int = 20, goals_for: int = 30) -> List[TableRow]:
    return [
        TableRow(TeamRef(name), position=i + 1, played=played, goals_for=goals_for, goals_against=goals_for)
        for i, name in enumerate(names)
    ]


def build_market(market_id=None, name=None, outcomes=(), specifier=None, title=None) -> MarketQuote:
    return MarketQuote(
        id=market_id,
        name=name,
        title=title,
        specifier=specifier,
        outcomes=[MarketOutcome(*o) for o in outcomes],
    )


def build_markets(home=1.8, draw=3.6, away=4.5) -> List[MarketQuote]:
    """1X2, both totals lines and BTTS, priced the way providers label them."""
    return [
        build_market("1", "1X2", [("1", "Home", home), ("2", "Draw", draw), ("3", "Away", away)]),
        build_market("18", "Over/Under", [("12", "Over 1.5", 1.3), ("13", "Under 1.5", 3.4)], "total=1.5"),
        build_market("18", "Over/Under", [("12", "Over 2.5", 1.9), ("13", "Under 2.5", 1.9)], "total=2.5"),
        build_market("29", "Both Teams To Score", [("74", "Yes", 1.8), ("76", "No", 2.0)]),
    ]


def build_stats(
    matches=(10, 10),
    wins=(6, 4),
    draws=(2, 3),
    losses=(2, 3),
    goals=(20, 12),
    conceded_average=(0.8, 1.2),
    clean_sheets=(4, 2),
    btts=(5, 6),
) -> TeamSeasonStats:
    def split(pair):
        return VenueSplit(pair[0], pair[1], pair[0] + pair[1])

    return TeamSeasonStats(
        matches=split(matches),
        wins=split(wins),
        draws=split(draws),
        losses=split(losses),
        goals_scored=split(goals),
        goals_conceded_average=VenueSplit(
            conceded_average[0], conceded_average[1], (conceded_average[0] + conceded_average[1]) / 2
        ),
        clean_sheets=split(clean_sheets),
        both_teams_scored=split(btts),
        first_half_goals=14,
        second_half_goals=18,
    )


def build_complete_aggregate(match_id: str = "match-1", tournament: str = "Premier League") -> MatchAggregate:
    """An aggregate where every team field has a real source."""
    home_history = [
        build_match("Rovers", "Athletic", 2, 1, 7, home_corners=6, away_corners=4,
                    first_goal=GoalSide.HOME, last_goal=GoalSide.HOME),
        build_match("City", "Rovers", 0, 0, 14, home_corners=5, away_corners=5),
        build_match("Rovers", "Albion", 1, 2, 21, first_goal=GoalSide.AWAY, last_goal=GoalSide.AWAY),
    ]
    away_history = [
        build_match("Wanderers", "Town", 1, 0, 7, home_corners=7, away_corners=3,
                    first_goal=GoalSide.HOME, last_goal=GoalSide.HOME),
        build_match("County", "Wanderers", 2, 2, 14, home_corners=4, away_corners=4,
                    first_goal=GoalSide.HOME, last_goal=GoalSide.AWAY),
    ]
    return MatchAggregate(
        match_id=match_id,
        home_team=TeamRef("Rovers", id="t-rov"),
        away_team=TeamRef("Wanderers", id="t-wan"),
        kickoff=datetime(2024, 5, 4, 15, 0),
        tournament=tournament,
        table=build_table(),
        markets=build_markets(),
        home_history=home_history,
        away_history=away_history,
        home_stats=build_stats(),
        away_stats=build_stats(
            wins=(3, 2), draws=(3, 3), losses=(4, 5), goals=(12, 8),
            conceded_average=(1.4, 1.8), clean_sheets=(2, 1), btts=(6, 5),
        ),
    )


def build_bare_aggregate(match_id: str = "match-bare", home: str = "Rovers", away: str = "Wanderers") -> MatchAggregate:
    """Only identity: no table, history, statistics or markets."""
    return MatchAggregate(match_id=match_id, home_team=TeamRef(home), away_team=TeamRef(away))


@pytest.fixture
def make_match():
    return build_match


@pytest.fixture
def make_table():
    return build_table


@pytest.fixture
def make_market():
    return build_market


@pytest.fixture
def make_markets():
    return build_markets


@pytest.fixture
def make_stats():
    return build_stats


@pytest.fixture
def complete_aggregate():
    return build_complete_aggregate()


@pytest.fixture
def bare_aggregate():
    return build_bare_aggregate()


@pytest.fixture
def make_complete_aggregate():
    return build_complete_aggregate


@pytest.fixture
def make_bare_aggregate():
    return build_bare_aggregate
