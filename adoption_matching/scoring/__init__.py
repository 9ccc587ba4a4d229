"""Adoption application scoring."""

from .application_scorer import (
    ApplicationScorer,
    score_application,
    classify_age,
    is_puppy,
    normalize_answer,
    WEIGHTS,
    RULES,
    MISSING_VALUE,
    DEFAULT_ELIGIBILITY_THRESHOLD,
)

__all__ = [
    "ApplicationScorer",
    "score_application",
    "classify_age",
    "is_puppy",
    "normalize_answer",
    "WEIGHTS",
    "RULES",
    "MISSING_VALUE",
    "DEFAULT_ELIGIBILITY_THRESHOLD",
]
