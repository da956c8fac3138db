"""
Unit Tests for Record Assembler

Tests the default pass over prediction records and the per-venue
league metadata fold.
"""

import pytest

from match_insights.domain.entities.features import HeadToHeadFeatureSet, TeamFeatureSet
from match_insights.domain.entities.prediction import (
    CornerStats,
    FavoritePick,
    LeagueMetadata,
    PredictionRecord,
    ScoringPatterns,
)
from match_insights.domain.services.record_assembler import (
    RecordAssembler,
    build_corner_stats,
    build_scoring_patterns,
)
from match_insights.domain.value_objects.value_objects import MatchOdds
from match_insights.utils.seeding import seeded_randint


def make_record(match_id="m-1", venue="Premier League", favorite=FavoritePick.HOME, expected_goals=2.6,
                odds=None, **kwargs) -> PredictionRecord:
    fields = dict(
        match_id=match_id,
        home_team=TeamFeatureSet(name="Rovers"),
        away_team=TeamFeatureSet(name="Wanderers"),
        head_to_head=HeadToHeadFeatureSet.empty(),
        odds=odds or MatchOdds(1.8, 3.6, 4.5, 1.3, 3.4, 1.9, 1.9, 1.9, 1.9),
        favorite=favorite,
        confidence=40,
        expected_goals=expected_goals,
        defensive_strength=1.0,
        venue=venue,
        date="2024-05-04",
        time="15:00",
        average_goals=2.4,
    )
    fields.update(kwargs)
    return PredictionRecord(**fields)


class TestDefaults:
    """Tests for RecordAssembler.apply_defaults."""

    @pytest.fixture
    def assembler(self):
        """Create record assembler."""
        return RecordAssembler()

    def test_every_empty_field_is_filled(self, assembler):
        """Test the default pass over an empty record."""
        record = make_record(
            venue="", date="", time="", odds=MatchOdds(), favorite=FavoritePick.UNKNOWN, confidence=0,
            expected_goals=0.0, defensive_strength=0.0, average_goals=0.0, head_to_head=None,
        )
        filled = assembler.apply_defaults(record)

        assert filled.venue == "Unknown"
        assert filled.time == "00:00"
        assert len(filled.date) == 10
        assert filled.odds.is_complete
        assert filled.favorite == FavoritePick.AWAY
        assert filled.confidence == seeded_randint("m-1", 20, 40)
        assert 20 <= filled.confidence <= 40
        assert filled.expected_goals == 2.5
        assert filled.defensive_strength == 1.0
        assert filled.head_to_head == HeadToHeadFeatureSet.empty()
        assert filled.corner_stats == CornerStats(8.11, 7.61, 15.72)
        assert filled.scoring_patterns == ScoringPatterns(50.0, 50.0, 30.0, 30.0)

    def test_expected_goals_falls_back_to_average_goals(self, assembler):
        """Test that a known average goals value seeds missing expected goals."""
        filled = assembler.apply_defaults(make_record(expected_goals=0.0, average_goals=3.1))
        assert filled.expected_goals == 3.1

    def test_complete_record_is_unchanged(self, assembler):
        """Test that a populated record passes through untouched."""
        record = make_record(
            corner_stats=CornerStats(9.0, 8.0, 17.0),
            scoring_patterns=ScoringPatterns(60.0, 40.0, 35.0, 25.0),
        )
        assert assembler.apply_defaults(record) == record

    def test_corner_and_pattern_sources(self):
        """Test team values win over the historical constants."""
        home = TeamFeatureSet(name="Rovers", average_corners=10.0, first_goal_rate=0.0,
                              scoring_first_win_rate=70.0, late_goal_rate=40.0)
        away = TeamFeatureSet(name="Wanderers")

        assert build_corner_stats(home, away) == CornerStats(10.0, 7.61, 17.61)
        assert build_scoring_patterns(home, away) == ScoringPatterns(70.0, 50.0, 40.0, 30.0)


class TestLeagueMetadata:
    """Tests for the per-venue fold."""

    @pytest.fixture
    def assembler(self):
        """Create record assembler."""
        return RecordAssembler()

    def test_fold_running_rates(self, assembler):
        """Test running means of the favorite rates and summed goals."""
        records = [
            make_record("m-1", favorite=FavoritePick.HOME, expected_goals=2.6),
            make_record("m-2", favorite=FavoritePick.AWAY, expected_goals=1.4),
            make_record("m-3", venue="La Liga", favorite=FavoritePick.DRAW, expected_goals=2.0),
        ]
        league_data = assembler.fold_all(records)

        premier = league_data["Premier League"]
        assert premier.matches == 2
        assert premier.total_expected_goals == 4
        assert premier.average_expected_goals == 2.0
        assert premier.home_win_rate == pytest.approx(50.0)
        assert premier.away_win_rate == pytest.approx(50.0)
        assert premier.draw_rate == 0.0
        assert premier.btts_rate == pytest.approx(50.0)
        assert league_data["La Liga"].draw_rate == pytest.approx(100.0)

    def test_unknown_league_key(self, assembler):
        """Test records without a venue are grouped under a fixed key."""
        assert RecordAssembler.league_key(make_record(venue="")) == "Unknown League"
        assert list(assembler.fold_all([make_record(venue="")])) == ["Unknown League"]

    def test_fold_is_order_dependent_only_through_input(self, assembler):
        """Test that folding the same records twice gives the same metadata."""
        records = [make_record(f"m-{i}", expected_goals=1.0 + i / 10) for i in range(5)]
        first = assembler.fold_all(records)
        second = assembler.fold_all(records)
        assert first == second

    def test_empty_metadata(self):
        """Test a fresh metadata entry."""
        metadata = LeagueMetadata(venue="Premier League")
        assert metadata.matches == 0
        assert metadata.average_expected_goals == 0.0
