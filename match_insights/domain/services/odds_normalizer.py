"""
Odds Normalizer Module

Extracts 1X2, totals (1.5 / 2.5) and both-teams-to-score prices from a
provider's market list, then imputes every price still missing so the
result always carries nine positive prices.
"""

import logging
import math
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from match_insights.domain.constants import (
    ASSUMED_AWAY_PROBABILITY,
    ASSUMED_DRAW_PROBABILITY,
    ASSUMED_HOME_PROBABILITY,
    BOOKMAKER_MARGIN,
    DEFAULT_BTTS_NO_PRICE,
    DEFAULT_BTTS_YES_PRICE,
    DEFAULT_OVER_15_PRICE,
    DEFAULT_OVER_25_PRICE,
    DEFAULT_UNDER_15_PRICE,
    DEFAULT_UNDER_25_PRICE,
)
from match_insights.domain.entities.entities import MarketOutcome, MarketQuote
from match_insights.domain.entities.prediction import FavoritePick
from match_insights.domain.value_objects.value_objects import MatchOdds

logger = logging.getLogger(__name__)

MARKET_1X2 = "1"
MARKET_TOTALS = "18"
MARKET_BTTS = "29"
OUTCOME_OVER = "12"
OUTCOME_UNDER = "13"
OUTCOME_BTTS_YES = "74"
OUTCOME_BTTS_NO = "76"


def _has(text: Optional[str], needle: str) -> bool:
    return bool(text) and needle.casefold() in text.casefold()


def _equals(text: Optional[str], *values: str) -> bool:
    return bool(text) and any(text.casefold() == v.casefold() for v in values)


def parse_price(raw: Any) -> float:
    """
    Parse a decimal price.

    Anything that is not a finite positive number counts as missing (0.0).
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        value = float(str(raw).strip().replace(",", "."))
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value <= 0:
        return 0.0
    return value


def estimate_odds_from_probability(probability: float) -> float:
    """Decimal price for an assumed probability, shortened by a 10% margin."""
    return round(1 / (probability / BOOKMAKER_MARGIN), 2)


DEFAULT_PRICES: Dict[str, float] = {
    "home_win": estimate_odds_from_probability(ASSUMED_HOME_PROBABILITY),
    "draw": estimate_odds_from_probability(ASSUMED_DRAW_PROBABILITY),
    "away_win": estimate_odds_from_probability(ASSUMED_AWAY_PROBABILITY),
    "over_15": DEFAULT_OVER_15_PRICE,
    "under_15": DEFAULT_UNDER_15_PRICE,
    "over_25": DEFAULT_OVER_25_PRICE,
    "under_25": DEFAULT_UNDER_25_PRICE,
    "btts_yes": DEFAULT_BTTS_YES_PRICE,
    "btts_no": DEFAULT_BTTS_NO_PRICE,
}


class OddsNormalizer:
    """
    Two-tier price extraction: provider-specific market parsing first,
    probability-based and historical defaults second.
    """

    # ============================================================
    # Market lookup
    # ============================================================

    @staticmethod
    def _find_market(markets: Sequence[MarketQuote], predicate: Callable[[MarketQuote], bool]) -> Optional[MarketQuote]:
        return next((m for m in markets if m is not None and predicate(m)), None)

    @staticmethod
    def _find_price(outcomes: Iterable[MarketOutcome], predicate: Callable[[MarketOutcome], bool]) -> float:
        outcome = next((o for o in outcomes if o is not None and predicate(o)), None)
        return parse_price(outcome.price) if outcome is not None else 0.0

    @staticmethod
    def is_1x2_market(market: MarketQuote) -> bool:
        return (
            market.id == MARKET_1X2
            or _has(market.name, "1X2")
            or _has(market.title, "1X2")
            or _has(market.title, "1,X,2")
        )

    @staticmethod
    def is_totals_market(market: MarketQuote) -> bool:
        return market.id == MARKET_TOTALS or _has(market.name, "Over/Under")

    @staticmethod
    def is_btts_market(market: MarketQuote) -> bool:
        return (
            market.id == MARKET_BTTS
            or _has(market.name, "GG/NG")
            or _has(market.name, "Both Teams To Score")
            or _has(market.title, "Both Teams To Score")
            or _has(market.name, "BTTS")
        )

    # ============================================================
    # Extraction
    # ============================================================

    def extract_1x2(self, markets: Sequence[MarketQuote]) -> Dict[str, float]:
        market = self._find_market(markets, self.is_1x2_market)
        if market is None or not market.outcomes:
            return {}
        return {
            "home_win": self._find_price(
                market.outcomes, lambda o: o.id == "1" or _equals(o.description, "Home", "1")
            ),
            "draw": self._find_price(
                market.outcomes, lambda o: o.id == "2" or _equals(o.description, "Draw", "X")
            ),
            "away_win": self._find_price(
                market.outcomes, lambda o: o.id == "3" or _equals(o.description, "Away", "2")
            ),
        }

    def extract_totals(self, markets: Sequence[MarketQuote], line: str) -> Dict[str, float]:
        """
        Over/under prices for one goal line ("1.5" or "2.5").

        The market carrying total=<line> is preferred; otherwise every totals
        market is scanned for outcomes described as "Over <line>"/"Under <line>".
        """
        key = line.replace(".", "")
        over_label, under_label = f"Over {line}", f"Under {line}"

        def is_line_market(m: MarketQuote) -> bool:
            if not _has(m.specifier, f"total={line}"):
                return False
            return m.id == MARKET_TOTALS or (_has(m.name, "Over/Under") and _has(m.title, "Goals"))

        market = self._find_market(markets, is_line_market)
        if market is not None:
            return {
                f"over_{key}": self._find_price(
                    market.outcomes, lambda o: o.id == OUTCOME_OVER or _has(o.description, over_label)
                ),
                f"under_{key}": self._find_price(
                    market.outcomes, lambda o: o.id == OUTCOME_UNDER or _has(o.description, under_label)
                ),
            }

        prices: Dict[str, float] = {}
        for m in markets:
            if m is None or not self.is_totals_market(m):
                continue
            for outcome in m.outcomes or ():
                price = parse_price(outcome.price)
                if price <= 0:
                    continue
                if _has(outcome.description, over_label):
                    prices[f"over_{key}"] = price
                elif _has(outcome.description, under_label):
                    prices[f"under_{key}"] = price
        return prices

    def extract_btts(self, markets: Sequence[MarketQuote]) -> Dict[str, float]:
        market = self._find_market(markets, self.is_btts_market)
        if market is None or not market.outcomes:
            return {}
        return {
            "btts_yes": self._find_price(
                market.outcomes, lambda o: o.id == OUTCOME_BTTS_YES or _equals(o.description, "Yes", "GG")
            ),
            "btts_no": self._find_price(
                market.outcomes, lambda o: o.id == OUTCOME_BTTS_NO or _equals(o.description, "No", "NG")
            ),
        }

    def extract(self, markets: Optional[Sequence[MarketQuote]]) -> MatchOdds:
        """Prices found in the markets; unknown prices stay 0.0."""
        markets = list(markets or ())
        if not markets:
            return MatchOdds()
        prices: Dict[str, float] = {}
        prices.update(self.extract_1x2(markets))
        prices.update(self.extract_totals(markets, "1.5"))
        prices.update(self.extract_totals(markets, "2.5"))
        prices.update(self.extract_btts(markets))
        return MatchOdds(**prices)

    # ============================================================
    # Imputation
    # ============================================================

    @staticmethod
    def apply_defaults(odds: Optional[MatchOdds]) -> MatchOdds:
        """Replace every unknown price with its default."""
        odds = odds or MatchOdds()
        missing = odds.missing_fields()
        if not missing:
            return odds
        logger.debug(f"Imputing default prices for {missing}")
        return replace(odds, **{name: DEFAULT_PRICES[name] for name in missing})

    def normalize(self, markets: Optional[Sequence[MarketQuote]]) -> MatchOdds:
        """
        Extract and impute.

        Args:
            markets: Provider market list (may be empty)

        Returns:
            MatchOdds with nine positive prices
        """
        try:
            odds = self.extract(markets)
        except Exception as e:
            logger.error(f"Error extracting odds: {e}", exc_info=True)
            odds = MatchOdds()
        return self.apply_defaults(odds)

    @staticmethod
    def determine_favorite(odds: Optional[MatchOdds]) -> FavoritePick:
        """
        Side with the lowest positive 1X2 price.

        The draw wins only when strictly cheaper than both sides; a home/away
        tie goes to the away side.
        """
        if odds is None:
            return FavoritePick.UNKNOWN
        home, draw, away = odds.home_win, odds.draw, odds.away_win
        if home <= 0 and draw <= 0 and away <= 0:
            return FavoritePick.UNKNOWN
        if draw > 0 and (home <= 0 or draw < home) and (away <= 0 or draw < away):
            return FavoritePick.DRAW
        if home > 0 and away > 0:
            return FavoritePick.HOME if home < away else FavoritePick.AWAY
        if home > 0:
            return FavoritePick.HOME
        if away > 0:
            return FavoritePick.AWAY
        return FavoritePick.UNKNOWN
