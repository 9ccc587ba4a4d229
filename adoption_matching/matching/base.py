"""
Common interface of the matching strategies.

Two strategies rank animals for an adopter and they are NOT interchangeable:

- DistanceRanker ("knn"): standardized 9-feature distance; results ordered
  by ascending distance.
- CompatibilityScorer ("compatibility"): weighted rule dimensions; results
  ordered by descending score.

Both return their results best-first from evaluate(), but the scores are on
different scales and must not be compared across strategies.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Union, Dict

from ..inference.schema import AnimalProfile, AdopterPreferences

AnimalInput = Union[AnimalProfile, Dict[str, Any]]
PreferencesInput = Union[AdopterPreferences, Dict[str, Any]]


class MatchingStrategy(ABC):
    """
    Compatibility scoring capability.

    Attributes:
        name: Strategy identifier
        higher_is_better: Whether the strategy's primary value (score for
            compatibility, distance for knn) improves upwards
    """
    name: str = ""
    higher_is_better: bool = True

    @abstractmethod
    def evaluate(self, preferences: PreferencesInput, animals: Iterable[AnimalInput]) -> List[Any]:
        """Score every candidate and return results best-first."""

    @abstractmethod
    def evaluate_one(self, preferences: PreferencesInput, animal: AnimalInput) -> Any:
        """Score a single candidate."""


def as_preferences(preferences: PreferencesInput) -> AdopterPreferences:
    """Accept an AdopterPreferences or its dictionary form."""
    if isinstance(preferences, AdopterPreferences):
        return preferences
    return AdopterPreferences.from_dict(preferences)


def as_animal(animal: AnimalInput) -> AnimalProfile:
    """Accept an AnimalProfile or its dictionary form."""
    if isinstance(animal, AnimalProfile):
        return animal
    return AnimalProfile.from_dict(animal)


def as_animals(animals: Iterable[AnimalInput]) -> List[AnimalProfile]:
    return [as_animal(a) for a in animals]


def display_name(animal: AnimalProfile) -> str:
    return animal.name or "Sin nombre"
