"""
Domain exceptions for the prediction engine.
"""

class PredictionException(Exception):
    """Base exception for prediction-related errors."""
    pass

class InsufficientDataException(PredictionException):
    """Exception raised when an aggregate lacks the identity data needed to build a record."""
    pass

class MatchTransformException(PredictionException):
    """Exception raised when a single match fails unexpectedly during the transform."""

    def __init__(self, match_id: str, cause: Exception):
        super().__init__(f"Failed to transform match {match_id}: {cause}")
        self.match_id = match_id
        self.cause = cause

class EnvelopeBuildException(PredictionException):
    """Exception raised when the output envelope itself cannot be built. Aborts the batch."""
    pass
