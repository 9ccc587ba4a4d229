"""
Exceptions raised by the matching engine.

Only structural problems raise: a malformed scaler configuration or a feature
vector whose shape does not match it. Missing optional input fields are never
errors; they resolve to documented defaults.
"""


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    pass


class ScalerConfigError(MatchingError, ValueError):
    """Raised when a scaler configuration violates the feature contract."""
    pass


class FeatureShapeError(MatchingError, ValueError):
    """Raised when a feature vector does not have the expected dimensionality."""
    pass
