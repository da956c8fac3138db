"""
Unit Tests for Explanation Generator
"""

import pytest

from match_insights.domain.constants import FALLBACK_REASON
from match_insights.domain.entities.entities import TeamRef
from match_insights.domain.entities.features import (
    FormTrend,
    HeadToHeadFeatureSet,
    PositionTier,
    RecentMatch,
    TeamFeatureSet,
)
from match_insights.domain.services.explanation_generator import ExplanationGenerator
from match_insights.domain.services.head_to_head_analyzer import HeadToHeadAnalyzer
from match_insights.domain.value_objects.value_objects import MatchOdds


def recent(result: str) -> RecentMatch:
    return RecentMatch(date="2024-04-01", opponent="City", is_home=True, result=result, score="1-0")


class TestExplanationGenerator:
    """Tests for ExplanationGenerator.generate."""

    @pytest.fixture
    def generator(self):
        """Create explanation generator."""
        return ExplanationGenerator()

    @pytest.fixture
    def home(self):
        """Home feature set with form and table data."""
        return TeamFeatureSet(
            name="Rovers", position=2, tier=PositionTier.TOP, form="WWDWL", form_consistency=0.62,
            performance_rating=72.0, expected_points=2.1, home_avg_goals_scored=2.0,
            offensive_efficiency=1.6, defensive_efficiency=1.2,
        )

    @pytest.fixture
    def away(self):
        """Away feature set with form and table data."""
        return TeamFeatureSet(
            name="Wanderers", position=7, tier=PositionTier.LOWER_MID, form="LDL", form_consistency=0.5,
            performance_rating=45.0, expected_points=0.9, away_avg_goals_scored=0.8,
            offensive_efficiency=0.9, defensive_efficiency=1.1,
        )

    def test_reason_order(self, generator, home, away):
        """Test reasons come out in their fixed order."""
        reasons = generator.generate(home, away, None, MatchOdds(1.8, 3.6, 4.5), 2.7)

        assert reasons[0] == "Rovers form: WWDWL (consistency: 0.62)"
        assert reasons[1] == "Wanderers form: LDL (consistency: 0.50)"
        assert reasons[2] == "League position: Rovers (top, 2) vs Wanderers (lower-mid, 7)"
        assert reasons[3] == "Attacking edge: Rovers (1.60 vs 0.90)"
        assert reasons[4] == "Performance rating: Rovers has significant advantage (72 vs 45)"
        assert reasons[5] == "High-scoring potential: Rovers (2.00 home) vs Wanderers (0.80 away)"
        assert reasons[6] == "Strong favorite: Rovers (H: 1.80, A: 4.50)"
        assert reasons[7] == "Expected points: Rovers (2.10) vs Wanderers (0.90)"
        assert len(reasons) == 8

    def test_reasons_are_capped(self, generator, home, away):
        """Test that no more than eight reasons are returned."""
        h2h = HeadToHeadFeatureSet(matches=4, avg_goals_per_match=2.75, btts_rate=50.0)
        reasons = generator.generate(home, away, h2h, MatchOdds(1.8, 3.6, 4.5), 2.7)
        assert len(reasons) == 8

    def test_head_to_head_reason(self, generator):
        """Test the head-to-head sentence and its optional parts."""
        h2h = HeadToHeadFeatureSet(
            matches=4, avg_goals_per_match=2.75, btts_rate=50.0, form_trend=FormTrend.IMPROVING,
            dominance=0.5, unbeaten_streak=3,
        )
        reasons = generator.generate(TeamFeatureSet(name="Rovers"), TeamFeatureSet(name="Wanderers"), h2h, None, 1.0)

        assert (
            "H2H: 4 previous matches with 2.8 goals/game, 50% BTTS, improving trend, "
            "Rovers historically dominant, Rovers longest unbeaten run of 3 matches"
        ) in reasons

    def test_draw_favorite(self, generator):
        """Test the tight-odds sentence when the draw is cheapest."""
        reasons = generator.generate(
            TeamFeatureSet(name="Rovers"), TeamFeatureSet(name="Wanderers"), None, MatchOdds(3.0, 2.5, 3.0), 1.0
        )
        assert "Draw likely: Tight odds (H: 3.00, A: 3.00)" in reasons

    def test_scoring_potential_labels(self, generator):
        """Test the scoring label follows expected goals."""
        home, away = TeamFeatureSet(name="Rovers"), TeamFeatureSet(name="Wanderers")
        assert any(r.startswith("Low-scoring") for r in generator.generate(home, away, None, None, 1.2))
        assert any(r.startswith("Moderate-scoring") for r in generator.generate(home, away, None, None, 2.0))

    def test_momentum_and_streaks(self, generator):
        """Test momentum and recent win/loss runs."""
        home = TeamFeatureSet(name="Rovers", momentum=35.0, recent_matches=tuple(recent(r) for r in "WWWDL"))
        away = TeamFeatureSet(name="Wanderers", momentum=-5.0, recent_matches=tuple(recent(r) for r in "LLDLW"))
        reasons = generator.generate(home, away, None, None, 1.0)

        assert "Momentum: Rovers has positive momentum (35.0)" in reasons
        assert reasons[-1] == "Recent form: Rovers on 3-match win streak. Wanderers on 3-match losing streak."

    def test_failure_returns_generic_reason(self, generator):
        """Test the single generic reason when rendering fails."""
        assert generator.generate(None, None, None, None, 1.0) == (FALLBACK_REASON,)

    def test_unbeaten_run_belongs_to_home_side(self, generator, make_match):
        """Test the unbeaten run names the home side even when the away side dominates."""
        meetings = [
            make_match("Rovers", "Wanderers", 1, 1, days_ago=10),
            make_match("Wanderers", "Rovers", 0, 0, days_ago=40),
            make_match("Rovers", "Wanderers", 2, 2, days_ago=70),
            make_match("Rovers", "Wanderers", 0, 2, days_ago=100),
            make_match("Wanderers", "Rovers", 3, 1, days_ago=130),
        ]
        h2h = HeadToHeadAnalyzer().analyze(TeamRef("Rovers"), TeamRef("Wanderers"), meetings)
        assert h2h.dominance == pytest.approx(-0.4)
        assert h2h.unbeaten_streak == 3

        reasons = generator.generate(TeamFeatureSet(name="Rovers"), TeamFeatureSet(name="Wanderers"), h2h, None, 1.0)
        h2h_reason = next(r for r in reasons if r.startswith("H2H:"))

        assert "Wanderers historically dominant" in h2h_reason
        assert "Rovers longest unbeaten run of 3 matches" in h2h_reason
        assert "Wanderers longest unbeaten run" not in h2h_reason
