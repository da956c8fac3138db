"""
Team Name Resolver Module

Matches a free-text team name against a roster using an ordered list of
NameMatcher strategies. The first strategy that finds a candidate wins.
A miss is not an error: callers fall back to a positional default.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, TypeVar, Union

from match_insights.domain.constants import ABBREVIATION_STOP_WORDS
from match_insights.domain.entities.entities import TeamRef

logger = logging.getLogger(__name__)

T = TypeVar('T')

_WORD_SPLIT = re.compile(r"[ \-]+")


def string_matches(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; empty values never match."""
    if not a or not b:
        return False
    return a.casefold() == b.casefold()


def contains_team_name(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive containment in either direction."""
    if not a or not b:
        return False
    a, b = a.casefold(), b.casefold()
    return a in b or b in a


def extract_abbreviation(name: Optional[str]) -> str:
    """
    Derive a short code from a team name.

    Single-word names give their first three characters; otherwise the
    upper-cased initials of every word except fc/sc/ac/the
    ("Manchester United" -> "MU", "The Strongest" -> "S").
    """
    if not name:
        return ""
    words = [w for w in _WORD_SPLIT.split(name) if w]
    if len(words) <= 1:
        return name[:3]
    return "".join(w[0].upper() for w in words if w.lower() not in ABBREVIATION_STOP_WORDS)


def normalize_team_name(name: Optional[str]) -> str:
    """Lowercase and keep only letters, digits and whitespace."""
    if not name:
        return ""
    return "".join(c for c in name.lower() if c.isalnum() or c.isspace()).strip()


def abbreviation_of(team: TeamRef) -> str:
    """Provider abbreviation when present, otherwise the first three letters of the name."""
    if team.abbreviation:
        return team.abbreviation
    if team.name:
        return team.name[:3]
    return "UNK"


class NameMatcher(ABC):
    """One team-matching strategy."""

    name: str = "matcher"

    @abstractmethod
    def matches(self, query: TeamRef, candidate: TeamRef) -> bool:
        """Check whether candidate refers to the queried team."""


class ExactNameMatcher(NameMatcher):
    name = "exact"

    def matches(self, query: TeamRef, candidate: TeamRef) -> bool:
        return (
            string_matches(candidate.name, query.name)
            or string_matches(candidate.medium_name, query.name)
        )


class ContainsNameMatcher(NameMatcher):
    name = "contains"

    def matches(self, query: TeamRef, candidate: TeamRef) -> bool:
        return (
            contains_team_name(candidate.name, query.name)
            or contains_team_name(candidate.medium_name, query.name)
        )


class AbbreviationMatcher(NameMatcher):
    name = "abbreviation"

    def matches(self, query: TeamRef, candidate: TeamRef) -> bool:
        derived = extract_abbreviation(query.name)
        if not derived:
            return False
        if candidate.abbreviation:
            return string_matches(candidate.abbreviation, derived)
        return string_matches(extract_abbreviation(candidate.name), derived)


class IdMatcher(NameMatcher):
    name = "id"

    def matches(self, query: TeamRef, candidate: TeamRef) -> bool:
        return bool(query.id) and bool(candidate.id) and str(query.id) == str(candidate.id)


class NormalizedNameMatcher(NameMatcher):
    name = "normalized"

    def matches(self, query: TeamRef, candidate: TeamRef) -> bool:
        target = normalize_team_name(query.name)
        if not target:
            return False
        return (
            normalize_team_name(candidate.name) == target
            or normalize_team_name(candidate.medium_name) == target
        )


DEFAULT_MATCHERS: Sequence[NameMatcher] = (
    ExactNameMatcher(),
    ContainsNameMatcher(),
    AbbreviationMatcher(),
    IdMatcher(),
    NormalizedNameMatcher(),
)


def _as_ref(query: Union[str, TeamRef]) -> TeamRef:
    if isinstance(query, TeamRef):
        return query
    return TeamRef(name=query or "")


class TeamNameResolver:
    """
    Resolves team references against rosters, table rows and match sides.

    Each strategy is tried against the whole roster before the next one,
    so a weaker strategy never shadows a stronger hit further down the list.
    """

    def __init__(self, matchers: Optional[Sequence[NameMatcher]] = None):
        self.matchers = tuple(matchers) if matchers is not None else tuple(DEFAULT_MATCHERS)

    def resolve(
        self,
        query: Union[str, TeamRef],
        candidates: Sequence[T],
        key: Optional[Callable[[T], TeamRef]] = None,
    ) -> Optional[T]:
        """
        Find the best-matching candidate.

        Args:
            query: Team name or reference to look for
            candidates: Roster to search (TeamRefs, or anything key maps to one)
            key: Extracts the TeamRef from a candidate

        Returns:
            The matching candidate, or None when no strategy hits
        """
        ref = _as_ref(query)
        if not ref.name and not ref.id:
            return None

        key = key or (lambda c: c)
        for matcher in self.matchers:
            for candidate in candidates:
                team = key(candidate)
                if team is not None and matcher.matches(ref, team):
                    return candidate

        logger.debug(f"No roster match for team '{ref.name}' among {len(candidates)} candidates")
        return None

    def is_same_team(
        self,
        query: Union[str, TeamRef],
        candidate: Optional[TeamRef],
        matchers: Optional[Sequence[NameMatcher]] = None,
    ) -> bool:
        """Check a single candidate with any of the given (or configured) strategies."""
        if candidate is None:
            return False
        ref = _as_ref(query)
        return any(m.matches(ref, candidate) for m in (matchers or self.matchers))

    def plays_home(self, team: TeamRef, home_side: Optional[TeamRef]) -> bool:
        """
        Decide whether team is the home side of a historical match.

        Abbreviations are not consulted here: two clubs sharing initials
        would otherwise both claim the home side.
        """
        return self.is_same_team(team, home_side, SIDE_MATCHERS)


SIDE_MATCHERS: Sequence[NameMatcher] = (
    IdMatcher(),
    ExactNameMatcher(),
    ContainsNameMatcher(),
    NormalizedNameMatcher(),
)
