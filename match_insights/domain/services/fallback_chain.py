"""
Layered Default Resolution

Each derived field is resolved through an ordered chain of sources:
"try source A, else B, else a constant". A source may be a value or a
zero-argument callable; None and non-positive results count as missing.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "default"

Source = Union[Optional[float], Callable[[], Optional[float]]]


@dataclass(frozen=True)
class Resolved:
    """Outcome of a chain: the value and the label of the source that produced it."""
    value: float
    source: str

    @property
    def defaulted(self) -> bool:
        return self.source == DEFAULT_SOURCE


@dataclass(frozen=True)
class FallbackChain:
    """
    Ordered sources for one field.

    Example:
        >>> FallbackChain("win_percentage", (("stats", 0.0), ("history", 40.0))).resolve()
        Resolved(value=40.0, source='history')
    """
    field_name: str
    sources: Tuple[Tuple[str, Source], ...]
    default: float = 0.0

    def resolve(self) -> Resolved:
        for label, source in self.sources:
            value = source() if callable(source) else source
            if value is not None and value > 0:
                return Resolved(value, label)
        return Resolved(self.default, DEFAULT_SOURCE)


class LayeredDefaults:
    """
    Resolves many fields of one feature set and remembers which ones
    ended on their constant default.
    """

    def __init__(self, primary: str = "stats", secondary: str = "history"):
        self.primary = primary
        self.secondary = secondary
        self._defaulted: List[str] = []

    def resolve(self, field_name: str, preferred: Source, fallback: Source = None, default: float = 0.0) -> float:
        chain = FallbackChain(
            field_name,
            ((self.primary, preferred), (self.secondary, fallback)),
            default,
        )
        resolved = chain.resolve()
        if resolved.defaulted:
            logger.debug(f"Field '{field_name}' fell back to default {default}")
            self.mark_defaulted(field_name)
        return resolved.value

    def mark_defaulted(self, field_name: str) -> None:
        """Record a field resolved outside a chain that ended on its default."""
        if field_name not in self._defaulted:
            self._defaulted.append(field_name)

    def resolve_count(self, field_name: str, preferred: Source, fallback: Source = None) -> int:
        return int(round(self.resolve(field_name, preferred, fallback, 0)))

    @property
    def defaulted_fields(self) -> Tuple[str, ...]:
        return tuple(self._defaulted)

