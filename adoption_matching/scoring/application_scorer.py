"""
Rubric scoring of adoption applications.

Each application answer is mapped to a multiplier in [0, 1] through a fixed
lookup table and weighted:

    percentage = round(100 * sum(weight * multiplier) / sum(weight))

Key rules:
- Sterilization acceptance only applies to puppies (12 months or younger);
  for adult animals the criterion is removed from both sums.
- Answers to the lowercase-keyed criteria are trimmed and lowercased when
  that yields a known answer; anything else is kept as submitted.
- A missing or unrecognized answer contributes 0 but keeps its weight in
  the denominator, so unanswered questions lower the score.
- An application is eligible when the percentage reaches the threshold
  (70 by default).
"""

import logging
from typing import Dict, Any, Optional, Union

from ..inference.schema import (
    AgeClass,
    AnimalProfile,
    ApplicationForm,
    ApplicationScore,
    CriterionDetail,
)
from ..utils import round_half_up

logger = logging.getLogger(__name__)

WEIGHTS = {
    "family_decision": 0.15,
    "monthly_budget": 0.15,
    "allow_visits": 0.10,
    "accept_sterilization": 0.10,
    "housing": 0.10,
    "relation_animals": 0.10,
    "travel_plans": 0.10,
    "behavior_response": 0.10,
    "care_commitment": 0.10,
}

RULES = {
    "family_decision": {"agree": 1.0, "accept": 0.7, "indifferent": 0.4, "disagree": 0.0},
    "monthly_budget": {"high": 1.0, "medium": 0.7, "low": 0.4},
    "allow_visits": {"yes": 1.0, "no": 0.0},
    "accept_sterilization": {"yes": 1.0, "no": 0.0},
    "housing": {
        "Casa urbana": 1.0,
        "Casa de campo": 1.0,
        "Departamento": 0.7,
        "Quinta": 1.0,
        "Hacienda": 1.0,
        "Otro": 0.5,
    },
    "relation_animals": {"positive": 1.0, "neutral": 0.6, "negative": 0.0},
    "travel_plans": {
        "withOwner": 1.0,
        "withFamily": 0.9,
        "withFriend": 0.8,
        "paidCaretaker": 0.7,
        "hotel": 0.6,
        "other": 0.5,
    },
    "behavior_response": {"trainOrAccept": 1.0, "seekHelp": 0.9, "punish": 0.2, "abandon": 0.0},
    "care_commitment": {"fullCare": 1.0, "mediumCare": 0.7, "lowCare": 0.4},
}

# Criteria whose answers are matched case-insensitively
NORMALIZED_CRITERIA = (
    "family_decision",
    "monthly_budget",
    "allow_visits",
    "accept_sterilization",
    "relation_animals",
)
PUPPY_ONLY_CRITERIA = ("accept_sterilization",)
PUPPY_MAX_MONTHS = 12
PUPPY_MAX_YEARS = 1
DEFAULT_ELIGIBILITY_THRESHOLD = 70
MISSING_VALUE = "no especificado"

FormInput = Union[ApplicationForm, Dict[str, Any]]
AnimalOrAgeClass = Union[AnimalProfile, AgeClass, Dict[str, Any]]


def normalize_answer(criterion: str, value: Any) -> Any:
    """Trimmed, lowercased answer when it is a known one; otherwise the raw value."""
    if criterion not in NORMALIZED_CRITERIA or not isinstance(value, str):
        return value
    normalized = value.strip().lower()
    return normalized if normalized in RULES[criterion] else value


def is_puppy(animal: AnimalProfile) -> bool:
    """
    Whether the animal counts as a puppy.

    Months take precedence when known; otherwise the age in years is used,
    with a missing age treated as 0 (a puppy).
    """
    if animal.age_months is not None:
        return animal.age_months <= PUPPY_MAX_MONTHS
    return (animal.age or 0) <= PUPPY_MAX_YEARS


def classify_age(animal: AnimalProfile) -> AgeClass:
    return AgeClass.PUPPY if is_puppy(animal) else AgeClass.ADULT


class ApplicationScorer:
    """
    Weighted rubric evaluator for adoption applications.

    Attributes:
        eligibility_threshold: Minimum percentage for eligibility
    """

    def __init__(self, eligibility_threshold: float = DEFAULT_ELIGIBILITY_THRESHOLD):
        if not 0 <= eligibility_threshold <= 100:
            raise ValueError(f"eligibility_threshold must be in [0, 100], got {eligibility_threshold}")
        self.eligibility_threshold = eligibility_threshold

    def score(self, form: FormInput, animal: AnimalOrAgeClass) -> ApplicationScore:
        """
        Score an application against the target animal.

        Args:
            form: Application answers (ApplicationForm or form payload)
            animal: Target animal, its catalog document, or its AgeClass

        Returns:
            ApplicationScore with the percentage, eligibility and a
            per-criterion breakdown
        """
        if not isinstance(form, ApplicationForm):
            form = ApplicationForm.from_dict(form or {})
        age_class = self._resolve_age_class(animal)

        total = 0.0
        max_total = 0.0
        detail = {}

        for criterion, weight in WEIGHTS.items():
            if criterion in PUPPY_ONLY_CRITERIA and age_class != AgeClass.PUPPY:
                continue

            max_total += weight
            value = normalize_answer(criterion, form.get(criterion))
            multiplier = RULES[criterion].get(value, 0.0) if value is not None else 0.0

            if value is not None and value not in RULES[criterion]:
                logger.debug(f"Unrecognized value {value!r} for {criterion}, scoring 0")

            total += weight * multiplier
            detail[criterion] = CriterionDetail(
                value=value if value is not None else MISSING_VALUE,
                contribution=int(round_half_up(multiplier * 100))
            )

        percentage = int(round_half_up(total / max_total * 100)) if max_total > 0 else 0
        eligible = percentage >= self.eligibility_threshold

        logger.debug(
            f"Application scored {percentage}% ({age_class.value}), eligible={eligible}"
        )

        return ApplicationScore(percentage=percentage, eligible=eligible, detail=detail)

    @staticmethod
    def _resolve_age_class(animal: AnimalOrAgeClass) -> AgeClass:
        if isinstance(animal, AgeClass):
            return animal
        if isinstance(animal, dict):
            animal = AnimalProfile.from_dict(animal)
        return classify_age(animal)


def score_application(
    form: FormInput,
    animal: AnimalOrAgeClass,
    eligibility_threshold: Optional[float] = None
) -> ApplicationScore:
    """Score an application with a one-off ApplicationScorer."""
    threshold = DEFAULT_ELIGIBILITY_THRESHOLD if eligibility_threshold is None else eligibility_threshold
    return ApplicationScorer(threshold).score(form, animal)
