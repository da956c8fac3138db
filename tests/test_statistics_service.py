"""
Unit Tests for Statistics Service

Tests history statistics, points by opponent band and the league goal average.
"""

import pytest

from match_insights.domain.entities.entities import GoalSide, TeamRef
from match_insights.domain.services.statistics_service import StatisticsService


class TestHistoryStatistics:
    """Tests for StatisticsService.calculate_history_statistics."""

    @pytest.fixture
    def service(self):
        """Create statistics service."""
        return StatisticsService()

    @pytest.fixture
    def history(self, make_match):
        """Three results of Rovers: home win, away draw, away loss."""
        return [
            make_match("Rovers", "Town", 2, 0, days_ago=7, home_corners=6, away_corners=2,
                       first_goal=GoalSide.HOME, last_goal=GoalSide.HOME),
            make_match("Town", "Rovers", 1, 1, days_ago=14, home_corners=4, away_corners=4,
                       first_goal=GoalSide.HOME, last_goal=GoalSide.AWAY),
            make_match("City", "Rovers", 3, 1, days_ago=21),
        ]

    def test_venue_tallies(self, service, history):
        """Test counts are split by venue from the team's perspective."""
        stats = service.calculate_history_statistics(TeamRef("Rovers"), history)

        assert stats.home_matches == 1
        assert stats.away_matches == 2
        assert (stats.home_wins, stats.home_draws, stats.home_losses) == (1, 0, 0)
        assert (stats.away_wins, stats.away_draws, stats.away_losses) == (0, 1, 1)
        assert stats.home_goals == 2
        assert stats.away_goals == 2
        assert stats.away_conceded == 4
        assert stats.home_clean_sheets == 1
        assert stats.away_btts == 2
        assert stats.home_over_15 == 1

    def test_derived_rates(self, service, history):
        """Test averages and percentages derived from the tallies."""
        stats = service.calculate_history_statistics(TeamRef("Rovers"), history)

        assert stats.win_percentage == pytest.approx(100 / 3)
        assert stats.avg_goals_scored == pytest.approx(4 / 3)
        assert stats.away_avg_goals_conceded == pytest.approx(2.0)
        assert stats.clean_sheet_percentage == pytest.approx(100 / 3)

    def test_event_rates(self, service, history):
        """Test corners, first goal and last goal rates."""
        stats = service.calculate_history_statistics(TeamRef("Rovers"), history)

        assert stats.average_corners == pytest.approx(8.0)
        assert stats.first_goal_rate == 50.0
        assert stats.late_goal_rate == 100.0
        assert stats.scoring_first_win_rate == 100.0
        assert stats.conceding_first_win_rate == 0.0

    def test_empty_history(self, service):
        """Test that no history gives all-zero statistics."""
        stats = service.calculate_history_statistics(TeamRef("Rovers"), [])
        assert stats.matches == 0
        assert stats.win_percentage == 0.0
        assert stats.scoring_first_win_rate is None


class TestPointsByBand:
    """Tests for StatisticsService.calculate_points_by_band."""

    @pytest.fixture
    def service(self):
        """Create statistics service."""
        return StatisticsService()

    def test_points_against_each_band(self, service, make_match, make_table):
        """Test average points against top, middle and bottom opposition."""
        table = make_table(["Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot", "Golf"])
        history = [
            make_match("Alpha", "Bravo", 2, 0),
            make_match("Delta", "Alpha", 1, 1),
            make_match("Foxtrot", "Alpha", 2, 1),
        ]
        assert service.calculate_points_by_band(TeamRef("Alpha"), history, table) == (3.0, 1.0, 0.0)

    def test_short_table_gives_none(self, service, make_match, make_table):
        """Test that bands need at least six rows."""
        table = make_table(["Alpha", "Bravo", "Charlie"])
        history = [make_match("Alpha", "Bravo", 2, 0)]
        assert service.calculate_points_by_band(TeamRef("Alpha"), history, table) == (None, None, None)


class TestLeagueAverageGoals:
    """Tests for StatisticsService.calculate_league_average_goals."""

    def test_from_table(self, make_table):
        """Test goals for per match played across the table."""
        table = make_table(["Alpha", "Bravo"], played=10, goals_for=14)
        assert StatisticsService.calculate_league_average_goals(table, None, None, [], 2.5) == 1.4

    def test_from_team_stats(self, make_stats):
        """Test the mean of the teams' season scoring averages."""
        home = make_stats(goals=(20, 12))
        away = make_stats(goals=(12, 8))
        assert StatisticsService.calculate_league_average_goals([], home, away, [], 2.5) == pytest.approx(1.3)

    def test_from_league_results(self, make_match):
        """Test the mean total goals of recent league results."""
        results = [make_match("A", "B", 2, 1), make_match("C", "D", 0, 0), make_match("E", "F", None, None)]
        assert StatisticsService.calculate_league_average_goals([], None, None, results, 2.5) == 1.5

    def test_fallback(self):
        """Test the configured fallback when nothing is known."""
        assert StatisticsService.calculate_league_average_goals([], None, None, [], 2.5) == 2.5
