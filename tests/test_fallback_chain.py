"""
Unit Tests for Layered Default Resolution
"""

from match_insights.domain.services.fallback_chain import (
    DEFAULT_SOURCE,
    FallbackChain,
    LayeredDefaults,
    Resolved,
)


class TestFallbackChain:
    """Tests for FallbackChain."""

    def test_first_positive_source_wins(self):
        """Test that the first positive source is used."""
        chain = FallbackChain("win_percentage", (("stats", 55.0), ("history", 40.0)))
        assert chain.resolve() == Resolved(55.0, "stats")

    def test_non_positive_source_is_skipped(self):
        """Test that zero and None count as missing."""
        chain = FallbackChain("win_percentage", (("stats", 0.0), ("history", 40.0)))
        assert chain.resolve() == Resolved(40.0, "history")

        chain = FallbackChain("win_percentage", (("stats", None), ("history", 40.0)))
        assert chain.resolve().source == "history"

    def test_callable_source_is_evaluated(self):
        """Test that a callable source is called lazily."""
        chain = FallbackChain("avg", (("stats", None), ("history", lambda: 1.5)))
        assert chain.resolve().value == 1.5

    def test_default_when_everything_missing(self):
        """Test the constant default and its marker."""
        resolved = FallbackChain("avg", (("stats", None), ("history", 0)), default=2.5).resolve()
        assert resolved.value == 2.5
        assert resolved.source == DEFAULT_SOURCE
        assert resolved.defaulted


class TestLayeredDefaults:
    """Tests for LayeredDefaults."""

    def test_defaulted_fields_are_recorded_once(self):
        """Test that every field ending on its default is remembered, in order."""
        layers = LayeredDefaults()
        assert layers.resolve("a", 1.0, 2.0) == 1.0
        assert layers.resolve("b", None, 0.0, default=3.0) == 3.0
        layers.mark_defaulted("c")
        layers.mark_defaulted("b")
        assert layers.defaulted_fields == ("b", "c")

    def test_resolve_count_rounds(self):
        """Test that counts are rounded to integers."""
        layers = LayeredDefaults()
        assert layers.resolve_count("home_wins", 6.0, 2) == 6
        assert layers.resolve_count("away_wins", None, 3) == 3
        assert layers.resolve_count("home_draws", None, None) == 0
        assert layers.defaulted_fields == ("home_draws",)
