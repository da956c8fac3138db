"""
Unit Tests for Domain Entities and Input DTOs
"""

from datetime import datetime

import pytest

from match_insights.application.dtos.dtos import LeagueMetadataDTO, MatchAggregateDTO
from match_insights.domain.entities.entities import (
    GoalSide,
    MatchAggregate,
    MatchOutcome,
    TeamRef,
)
from match_insights.domain.entities.prediction import LeagueMetadata
from match_insights.domain.exceptions import InsufficientDataException


class TestHistoricalMatch:
    """Tests for HistoricalMatch properties."""

    def test_outcome_from_score(self, make_match):
        """Test outcomes derived from the scoreline."""
        assert make_match("Rovers", "City", 2, 1).outcome == MatchOutcome.HOME_WIN
        assert make_match("Rovers", "City", 1, 1).outcome == MatchOutcome.DRAW
        assert make_match("Rovers", "City", 0, 3).outcome == MatchOutcome.AWAY_WIN

    def test_explicit_winner_wins(self, make_match):
        """Test the reported winner overrides the scoreline."""
        match = make_match("Rovers", "City", 1, 1, winner=GoalSide.AWAY)
        assert match.outcome == MatchOutcome.AWAY_WIN

    def test_unknown_result(self, make_match):
        """Test a match without a score has no outcome."""
        match = make_match("Rovers", "City", None, None)
        assert match.outcome is None
        assert match.total_goals is None
        assert not match.has_corners


class TestMatchAggregate:
    """Tests for MatchAggregate.validate."""

    def test_valid(self, bare_aggregate):
        """Test identity-only aggregates are valid."""
        bare_aggregate.validate()

    @pytest.mark.parametrize("match_id,home,away", [
        ("", "Rovers", "Wanderers"),
        ("m-1", "", "Wanderers"),
        ("m-1", "Rovers", ""),
    ])
    def test_missing_identity(self, match_id, home, away):
        """Test that a missing id or team name is rejected."""
        aggregate = MatchAggregate(match_id=match_id, home_team=TeamRef(home), away_team=TeamRef(away))
        with pytest.raises(InsufficientDataException):
            aggregate.validate()


class TestDTOs:
    """Tests for the pydantic boundary models."""

    def test_aggregate_to_entity(self):
        """Test a raw payload converts into domain entities."""
        payload = {
            "match_id": "m-1",
            "home_team": {"name": "Rovers", "abbreviation": "ROV"},
            "away_team": {"name": "Wanderers"},
            "kickoff": "2024-05-04T15:00:00",
            "tournament": "Premier League",
            "table": [{"team": {"name": "Rovers"}, "position": 2, "played": 20, "goals_for": 30}],
            "markets": [{"id": "1", "name": "1X2", "outcomes": [{"id": "1", "price": "1.80"}]}],
            "home_history": [{
                "home_team": {"name": "Rovers"}, "away_team": {"name": "City"},
                "home_goals": 2, "away_goals": 0, "winner": "home",
            }],
        }
        aggregate = MatchAggregateDTO(**payload).to_entity()

        assert aggregate.home_team == TeamRef("Rovers", abbreviation="ROV")
        assert aggregate.kickoff == datetime(2024, 5, 4, 15, 0)
        assert aggregate.table[0].position == 2
        assert aggregate.markets[0].outcomes[0].price == "1.80"
        assert aggregate.home_history[0].winner == GoalSide.HOME
        assert aggregate.home_stats is None

    def test_league_metadata_rounding(self):
        """Test metadata rates are rounded to one decimal."""
        metadata = LeagueMetadata(
            venue="Premier League", matches=3, total_expected_goals=7.0,
            home_win_rate=100 / 3, draw_rate=100 / 3, away_win_rate=100 / 3, btts_rate=55.04,
        )
        dto = LeagueMetadataDTO.from_metadata(metadata)

        assert dto.matches == 3
        assert dto.total_goals == 7.0
        assert dto.average_goals == 2.3
        assert dto.home_win_rate == 33.3
        assert dto.btts_rate == 55.0
