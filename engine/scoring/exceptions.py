# engine/scoring/exceptions.py

class ScoringError(Exception):
    """Base class for scoring configuration errors"""


class InvalidWeightsError(ScoringError):
    """Raised when a weight record is negative or does not sum to 1.0."""


class UnknownStrategyError(ScoringError):
    pass
