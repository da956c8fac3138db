"""
Domain Constants

This module contains constant definitions valid across the domain layer.
Changing any value here changes the output contract of the engine.
"""

# ============================================================
# Team-name resolution
# ============================================================

ABBREVIATION_STOP_WORDS = frozenset({"fc", "sc", "ac", "the"})

# ============================================================
# League table
# ============================================================

# Upper percentile bound (inclusive) of each tier, checked in order
POSITION_TIER_CUTOFFS = (
    (0.2, "top"),
    (0.4, "upper-mid"),
    (0.6, "mid-table"),
    (0.8, "lower-mid"),
)
POSITION_TIER_FALLBACK = "relegation-zone"
DEFAULT_POSITION_TIER = "mid-table"
DEFAULT_RELATIVE_STRENGTH = 0.5

# Rows counted as top/bottom opposition when splitting points by opponent strength
OPPONENT_BAND_SIZE = 3
MIN_TABLE_SIZE_FOR_BANDS = 6

# ============================================================
# Form
# ============================================================

FORM_LENGTH = 5
FORM_BASE_SCORE = 50.0
FORM_RESULT_ADJUSTMENT = {"W": 10.0, "D": 0.0, "L": -10.0}
FORM_DECAY = 0.7
FORM_SCALE = 0.8
FORM_JITTER = 2.0
FORM_NUMERIC_DECAY = 0.8
FORM_NUMERIC_POINTS = {"W": 1.0, "D": 0.5, "L": 0.0}
RECENT_MATCHES_LIMIT = 10

# ============================================================
# Efficiency
# ============================================================

LEAGUE_AVERAGE_GOALS_BASELINE = 1.4
EFFICIENCY_MIN = 0.2
EFFICIENCY_MAX = 2.0
NEUTRAL_EFFICIENCY = 1.0
MIN_CONCEDED_FOR_DEFENSIVE_RATIO = 0.5

# ============================================================
# Head-to-head
# ============================================================

H2H_RECENT_WINDOW = 3
H2H_TREND_THRESHOLD = 0.5
H2H_SEASONALITY_THRESHOLD = 0.2
H2H_HIGH_INTENSITY_GOALS = 3.5
H2H_LOW_INTENSITY_GOALS = 2.0
H2H_PATTERN_SHARE = 0.65
H2H_PATTERN_BALANCE = 0.2
H2H_RECENT_RESULTS_LIMIT = 5
PREDICTABILITY_MIN = 0.1
PREDICTABILITY_MAX = 0.9
NEUTRAL_PREDICTABILITY = 0.5

# ============================================================
# Odds
# ============================================================

BOOKMAKER_MARGIN = 1.1
ASSUMED_HOME_PROBABILITY = 0.33
ASSUMED_DRAW_PROBABILITY = 0.25
ASSUMED_AWAY_PROBABILITY = 0.33
DEFAULT_OVER_15_PRICE = 1.4
DEFAULT_UNDER_15_PRICE = 2.8
DEFAULT_OVER_25_PRICE = 2.0
DEFAULT_UNDER_25_PRICE = 1.8
DEFAULT_BTTS_YES_PRICE = 1.9
DEFAULT_BTTS_NO_PRICE = 1.9

# ============================================================
# Composite scoring
# ============================================================

CONFIDENCE_BASE = 20.0
CONFIDENCE_MIN = 5
CONFIDENCE_MAX = 95
CONFIDENCE_ON_ERROR = 30
CONFIDENCE_JITTER = 2
CONFIDENCE_REROLL_MIN = 20
CONFIDENCE_REROLL_MAX = 40

EXPECTED_GOALS_MIN = 0.5
EXPECTED_GOALS_MAX = 6.0
H2H_FACTOR_MIN = 0.7
H2H_FACTOR_MAX = 1.3
H2H_FACTOR_MIN_MEETINGS = 3
MODEL_WEIGHT = 0.7
LEAGUE_WEIGHT = 0.3
LEAGUE_MATCHES_SAMPLE = 25
DEFAULT_LEAGUE_AVERAGE_GOALS = 2.5

DEFENSIVE_STRENGTH_MIN = 0.0
DEFENSIVE_STRENGTH_MAX = 1.5
NEUTRAL_DEFENSIVE_STRENGTH = 1.0
DEFENSIVE_HOME_WEIGHT = 0.6
DEFENSIVE_AWAY_WEIGHT = 0.4

# ============================================================
# Explanations
# ============================================================

MAX_REASONS = 8
EFFICIENCY_EDGE_THRESHOLD = 0.3
FALLBACK_REASON = "Match prediction based on team statistics"

# ============================================================
# Record defaults
# ============================================================

DEFAULT_VENUE = "Unknown"
UNKNOWN_LEAGUE = "Unknown League"
DEFAULT_TIME = "00:00"
DEFAULT_HOME_CORNERS = 8.11
DEFAULT_AWAY_CORNERS = 7.61
DEFAULT_FIRST_GOAL_RATE = 50.0
DEFAULT_LATE_GOAL_RATE = 30.0
