"""
Form Analyzer Service Module

Turns a team's recent results into a W/D/L form string and the
form-derived metrics (strength, consistency, momentum) used downstream.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from match_insights.domain.constants import (
    FORM_BASE_SCORE,
    FORM_DECAY,
    FORM_JITTER,
    FORM_LENGTH,
    FORM_NUMERIC_DECAY,
    FORM_NUMERIC_POINTS,
    FORM_RESULT_ADJUSTMENT,
    FORM_SCALE,
)
from match_insights.domain.entities.entities import HistoricalMatch, MatchOutcome, TeamRef
from match_insights.domain.services.team_name_resolver import TeamNameResolver
from match_insights.utils.seeding import seeded_uniform

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _timestamp(match: HistoricalMatch) -> float:
    return match.played_at.timestamp() if match.played_at else float("-inf")


def sort_recent_first(history: Sequence[HistoricalMatch]) -> List[HistoricalMatch]:
    """Order matches newest first; undated matches sink to the end in input order."""
    return sorted(history, key=_timestamp, reverse=True)


def result_letter(outcome: MatchOutcome, is_home: bool) -> str:
    if outcome == MatchOutcome.DRAW:
        return "D"
    won = (outcome == MatchOutcome.HOME_WIN) == is_home
    return "W" if won else "L"


class FormAnalyzer:
    """
    Form metrics for one team.

    Form strength carries a small jitter seeded by the form string itself,
    so two teams with the same short form get the same score on every run
    while different forms that land on the same weighted sum are separated.
    The jitter is tie-breaking noise, not a measurement.
    """

    def __init__(self, resolver: Optional[TeamNameResolver] = None):
        self.resolver = resolver or TeamNameResolver()

    def extract_form(self, team: TeamRef, history: Sequence[HistoricalMatch]) -> str:
        """
        Build the form string (most recent first, at most five results).

        Args:
            team: Team whose perspective is used
            history: Its recent matches, in any order

        Returns:
            A string over W/D/L, empty when no match has a result
        """
        decided = [m for m in sort_recent_first(history) if m.outcome is not None]
        letters = []
        for match in decided[:FORM_LENGTH]:
            is_home = self.resolver.plays_home(team, match.home_team)
            letters.append(result_letter(match.outcome, is_home))
        return "".join(letters)

    @staticmethod
    def jitter(form: str) -> float:
        """Deterministic tie-breaking noise in [-2, 2] seeded by the form string."""
        return seeded_uniform(form, -FORM_JITTER, FORM_JITTER)

    @staticmethod
    def calculate_form_strength(form: str) -> float:
        """
        Score recent form on a 0-100 scale.

        Each result adds +10 (W), 0 (D) or -10 (L) weighted by 0.7 per step
        back in time; the mean adjustment is scaled by 0.8 around a base of 50.
        An empty form scores 0.
        """
        form = (form or "")[:FORM_LENGTH]
        if not form:
            return 0.0

        adjustments = np.array([FORM_RESULT_ADJUSTMENT.get(c, 0.0) for c in form])
        weights = FORM_DECAY ** np.arange(len(form))

        weighted_sum = FORM_BASE_SCORE + float(np.dot(adjustments, weights))
        total_weight = float(weights.sum())

        score = FORM_BASE_SCORE + (weighted_sum - FORM_BASE_SCORE) / total_weight * FORM_SCALE
        score += FormAnalyzer.jitter(form)
        return round(_clamp(score, 0.0, 100.0), 4)

    @staticmethod
    def calculate_form_consistency(form: str) -> float:
        """
        How steady the results are (0-1).

        70% dominant-result share plus 30% inverse transition rate.
        Fewer than three results are treated as neutral (0.5).
        """
        if not form or len(form) < 3:
            return 0.5
        if len(set(form)) == 1:
            return 1.0

        dominant = max(form.count(c) for c in "WDL")
        transitions = sum(1 for a, b in zip(form, form[1:]) if a != b)

        consistency = dominant / len(form) * 0.7 + (1 - transitions / (len(form) - 1)) * 0.3
        return round(consistency, 4)

    @staticmethod
    def calculate_form_numeric(form: str) -> float:
        """Decay-weighted points share in [0, 1] (W=1, D=0.5, L=0)."""
        if not form:
            return 0.0
        points = np.array([FORM_NUMERIC_POINTS.get(c, 0.0) for c in form])
        weights = FORM_NUMERIC_DECAY ** np.arange(len(form))
        return float(np.dot(points, weights) / weights.sum())

    @staticmethod
    def calculate_momentum(form_strength: float, win_percentage: float, performance_rating: float) -> float:
        """
        Current form against season-long level, in [-100, 100].

        Positive means recent form outpaces the season average.
        """
        season_level = (win_percentage / 100 + performance_rating / 100) / 2
        momentum = (form_strength / 100 - season_level) * 100
        return round(_clamp(momentum, -100.0, 100.0), 2)

    @staticmethod
    def leading_streak(form: str) -> Tuple[str, int]:
        """The result at the head of the form string and how many times it repeats."""
        if not form:
            return "", 0
        head = form[0]
        count = 0
        for c in form:
            if c != head:
                break
            count += 1
        return head, count
