"""
Domain Value Objects Module

Value objects are immutable objects that are defined by their attributes rather than identity.
They encapsulate validation logic and provide type safety.
"""

from dataclasses import dataclass, fields
from typing import List, Optional


@dataclass(frozen=True)
class MatchOdds:
    """
    Decimal prices for the three market families handled by the engine.

    A price of 0.0 means "unknown" and is never a valid price; the odds
    normalizer replaces every unknown price before a record is finalized.
    """
    home_win: float = 0.0
    draw: float = 0.0
    away_win: float = 0.0
    over_15: float = 0.0
    under_15: float = 0.0
    over_25: float = 0.0
    under_25: float = 0.0
    btts_yes: float = 0.0
    btts_no: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"Odds cannot be negative ({f.name}={getattr(self, f.name)})")

    def missing_fields(self) -> List[str]:
        """Names of the prices still unknown."""
        return [f.name for f in fields(self) if getattr(self, f.name) <= 0]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    @property
    def btts_probability(self) -> Optional[float]:
        """Implied probability (0-100) that both teams score, margin removed."""
        if self.btts_yes <= 0 or self.btts_no <= 0:
            return None
        yes_prob = 1 / self.btts_yes
        no_prob = 1 / self.btts_no
        return yes_prob / (yes_prob + no_prob) * 100


@dataclass(frozen=True)
class PositionInfo:
    """
    Where a team sits in its league table.

    position is 0 when the team could not be placed.
    """
    position: int
    tier: str
    relative_strength: float

    def __post_init__(self):
        if not 0.0 <= self.relative_strength <= 1.0:
            raise ValueError(f"Relative strength must be between 0 and 1, got {self.relative_strength}")
