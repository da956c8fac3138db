"""
Unit Tests for Form Analyzer

Tests form extraction and the form-derived metrics.
"""

import pytest

from match_insights.domain.entities.entities import GoalSide, TeamRef
from match_insights.domain.services.form_analyzer import FormAnalyzer, sort_recent_first


class TestFormExtraction:
    """Tests for FormAnalyzer.extract_form."""

    @pytest.fixture
    def analyzer(self):
        """Create form analyzer."""
        return FormAnalyzer()

    def test_form_is_most_recent_first(self, analyzer, make_match):
        """Test results are read from the team's perspective, newest first."""
        history = [
            make_match("Rovers", "Albion", 1, 2, days_ago=21),
            make_match("Rovers", "Athletic", 2, 1, days_ago=7),
            make_match("City", "Rovers", 0, 0, days_ago=14),
        ]
        assert analyzer.extract_form(TeamRef("Rovers"), history) == "WDL"

    def test_away_wins_count_as_wins(self, analyzer, make_match):
        """Test that an away victory is a W for the away side."""
        history = [make_match("City", "Rovers", 0, 3)]
        assert analyzer.extract_form(TeamRef("Rovers"), history) == "W"

    def test_explicit_winner_overrides_scoreline(self, analyzer, make_match):
        """Test that the reported winner is trusted (e.g. penalty shoot-outs)."""
        history = [make_match("Rovers", "City", 1, 1, winner=GoalSide.HOME)]
        assert analyzer.extract_form(TeamRef("Rovers"), history) == "W"

    def test_form_is_capped_at_five(self, analyzer, make_match):
        """Test that only the five latest results are used."""
        history = [make_match("Rovers", "City", 1, 0, days_ago=d) for d in range(1, 9)]
        assert analyzer.extract_form(TeamRef("Rovers"), history) == "WWWWW"

    def test_unplayed_matches_are_ignored(self, analyzer, make_match):
        """Test that matches without a result never enter the form."""
        history = [make_match("Rovers", "City", None, None, days_ago=1)]
        assert analyzer.extract_form(TeamRef("Rovers"), history) == ""

    def test_undated_matches_sink(self, make_match):
        """Test that undated matches go after dated ones."""
        undated = make_match("Rovers", "City", 1, 0, days_ago=None)
        dated = make_match("Rovers", "Town", 1, 0, days_ago=30)
        assert sort_recent_first([undated, dated]) == [dated, undated]


class TestFormMetrics:
    """Tests for form strength, consistency, numeric form and momentum."""

    def test_empty_form_strength(self):
        """Test that an empty form scores zero."""
        assert FormAnalyzer.calculate_form_strength("") == 0.0

    def test_winning_form_strength(self):
        """Test five wins: 50 + 10 * 0.8 plus jitter."""
        strength = FormAnalyzer.calculate_form_strength("WWWWW")
        assert 56.0 <= strength <= 60.0
        assert strength == pytest.approx(58.0 + FormAnalyzer.jitter("WWWWW"), abs=1e-3)

    def test_losing_form_strength(self):
        """Test five losses: 50 - 10 * 0.8 plus jitter."""
        strength = FormAnalyzer.calculate_form_strength("LLLLL")
        assert 40.0 <= strength <= 44.0

    def test_form_strength_is_deterministic(self):
        """Test that the same form always gets the same strength."""
        assert FormAnalyzer.calculate_form_strength("WDLWW") == FormAnalyzer.calculate_form_strength("WDLWW")
        assert FormAnalyzer.jitter("WDLWW") == FormAnalyzer.jitter("WDLWW")

    def test_draws_stay_near_base(self):
        """Test that an all-draw form differs from the base score only by jitter."""
        assert abs(FormAnalyzer.calculate_form_strength("DDDDD") - 50.0) <= 2.0

    def test_consistency(self):
        """Test consistency for uniform, alternating and short forms."""
        assert FormAnalyzer.calculate_form_consistency("WWWWW") == 1.0
        assert FormAnalyzer.calculate_form_consistency("WD") == 0.5
        assert FormAnalyzer.calculate_form_consistency("WDWDW") == pytest.approx(0.42)
        assert FormAnalyzer.calculate_form_consistency("WWWLL") == pytest.approx(0.645)

    def test_form_numeric(self):
        """Test decay-weighted points share."""
        assert FormAnalyzer.calculate_form_numeric("") == 0.0
        assert FormAnalyzer.calculate_form_numeric("W") == 1.0
        assert FormAnalyzer.calculate_form_numeric("L") == 0.0
        assert FormAnalyzer.calculate_form_numeric("WL") == pytest.approx(1 / 1.8)

    def test_momentum(self):
        """Test momentum against the season level, clamped to [-100, 100]."""
        assert FormAnalyzer.calculate_momentum(80, 50, 60) == pytest.approx(25.0)
        assert FormAnalyzer.calculate_momentum(0, 100, 100) == pytest.approx(-100.0)
        assert -100 <= FormAnalyzer.calculate_momentum(100, 0, 0) <= 100

    def test_leading_streak(self):
        """Test the run at the head of the form."""
        assert FormAnalyzer.leading_streak("WWDL") == ("W", 2)
        assert FormAnalyzer.leading_streak("") == ("", 0)
