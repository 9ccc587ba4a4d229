"""
Rule-weighted compatibility scoring between an adopter and animals.

Unlike the nearest-neighbor ranker, this scorer does not use the scaler
configuration. It compares five hand-weighted dimensions, each normalized to
[0, 1] (0 = perfect fit) before weighting:

- size:         preferred vs. actual size
- energy:       preferred vs. actual energy
- coexistence:  children, other pets and apartment constraints
- personality:  experience vs. trainability, activity vs. energy,
                sociability when there are children
- lifestyle:    space, time and grooming commitment

Distance is the Euclidean norm of the weighted dimensions; the personality
dimension is omitted entirely for animals without a personality
assessment. Coexistence carries the highest weight so that one unmet hard
constraint outweighs good alignment elsewhere.

Score transform (higher = better):
    score = 100 * exp(-decay * min(d, max_distance) / max_distance)
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any, Iterable, List, Optional

import numpy as np

from ..inference.schema import (
    AnimalProfile,
    AdopterPreferences,
    CompatibilityFactors,
    CompatibilityFlags,
    CompatibilityResult,
    EnergyLevel,
    ExperienceLevel,
    OtherPets,
    SizeClass,
)
from .base import (
    AnimalInput,
    MatchingStrategy,
    PreferencesInput,
    as_animal,
    as_animals,
    as_preferences,
    display_name,
)
from .distance import distance_to_score

logger = logging.getLogger(__name__)

SIZE_INDEX = {SizeClass.SMALL: 0, SizeClass.MEDIUM: 1, SizeClass.LARGE: 2}
ENERGY_INDEX = {EnergyLevel.LOW: 0, EnergyLevel.MEDIUM: 1, EnergyLevel.HIGH: 2}
# No experience weighs like a beginner when compared with training need
EXPERIENCE_INDEX = {
    ExperienceLevel.NONE: 1,
    ExperienceLevel.BEGINNER: 1,
    ExperienceLevel.INTERMEDIATE: 2,
    ExperienceLevel.EXPERT: 3,
}
# Adopter activity / time and animal energy need on the personality 1-5 scale
LEVEL_SCALE = {EnergyLevel.LOW: 1, EnergyLevel.MEDIUM: 3, EnergyLevel.HIGH: 5}
GROOMING_INDEX = {EnergyLevel.LOW: 1, EnergyLevel.MEDIUM: 2, EnergyLevel.HIGH: 3}

# Unspecified size/energy (animal or preference) are treated as medium
DEFAULT_SIZE = SizeClass.MEDIUM
DEFAULT_ENERGY = EnergyLevel.MEDIUM

APARTMENT_PENALTY = 0.5
LOW_SOCIABILITY_PENALTY = 0.4
LOW_SOCIABILITY_THRESHOLD = 3
SPACE_PENALTY_PER_STEP = 0.5
GROOMING_PENALTY = 0.6

HIGH_MAINTENANCE_BREEDS = (
    "Poodle",
    "Husky",
    "Golden Retriever",
    "Shih Tzu",
    "Yorkshire",
)

# Factor thresholds below which a dimension produces a reason
SIZE_REASON_THRESHOLD = 0.3
ENERGY_REASON_THRESHOLD = 0.3
COEXISTENCE_REASON_THRESHOLD = 0.3
PERSONALITY_REASON_THRESHOLD = 0.4
LIFESTYLE_REASON_THRESHOLD = 0.4
HIGH_TRAIT_SCORE = 4

ENERGY_LABELS = {EnergyLevel.LOW: "tranquilo", EnergyLevel.MEDIUM: "moderado", EnergyLevel.HIGH: "activo"}
GENERIC_REASON = "Buena compatibilidad general con tu perfil"


@dataclass
class CompatibilityWeights:
    """
    Weights and score transform of the compatibility scorer.

    Attributes:
        size: Weight of the size dimension
        energy: Weight of the energy dimension
        coexistence: Weight of the coexistence dimension
        personality: Weight of the personality dimension
        lifestyle: Weight of the lifestyle dimension
        max_distance: Distance at which the score stops decreasing
        decay: Exponential decay rate of the score transform
    """
    size: float = 3.5
    energy: float = 4.0
    coexistence: float = 5.0
    personality: float = 2.5
    lifestyle: float = 3.0
    max_distance: float = 15.0
    decay: float = 2.2

    def validate(self) -> None:
        """Validate configuration values."""
        for dim in ["size", "energy", "coexistence", "personality", "lifestyle"]:
            if getattr(self, dim) < 0:
                raise ValueError(f"Weight for {dim} must be >= 0, got {getattr(self, dim)}")
        if self.max_distance <= 0:
            raise ValueError(f"max_distance must be > 0, got {self.max_distance}")
        if self.decay <= 0:
            raise ValueError(f"decay must be > 0, got {self.decay}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CompatibilityWeights":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CompatibilityWeights":
        """Create from main config dictionary."""
        compatibility = config.get("compatibility", {}) or {}
        weights = compatibility.get("weights", {}) or {}
        defaults = cls()

        return cls(
            size=weights.get("size", defaults.size),
            energy=weights.get("energy", defaults.energy),
            coexistence=weights.get("coexistence", defaults.coexistence),
            personality=weights.get("personality", defaults.personality),
            lifestyle=weights.get("lifestyle", defaults.lifestyle),
            max_distance=compatibility.get("max_distance", defaults.max_distance),
            decay=compatibility.get("decay", defaults.decay)
        )


class CompatibilityScorer(MatchingStrategy):
    """
    Weighted-dimension compatibility scorer.

    Results are ordered by descending score (higher = better), the opposite
    of the nearest-neighbor ranker's ascending distance.

    Attributes:
        weights: CompatibilityWeights in use
        default_top_k: Number of results returned by top_matches()
    """

    name = "compatibility"
    higher_is_better = True

    def __init__(self, weights: Optional[CompatibilityWeights] = None, default_top_k: int = 10):
        """
        Initialize the scorer.

        Args:
            weights: Dimension weights; defaults to CompatibilityWeights()
            default_top_k: Default length of top_matches()
        """
        self.weights = weights or CompatibilityWeights()
        self.weights.validate()
        if default_top_k < 1:
            raise ValueError(f"default_top_k must be at least 1, got {default_top_k}")
        self.default_top_k = default_top_k
        logger.info(f"Initialized CompatibilityScorer with weights={self.weights.to_dict()}")

    def score(self, preferences: PreferencesInput, animals: Iterable[AnimalInput]) -> List[CompatibilityResult]:
        """
        Score every animal for an adopter.

        Args:
            preferences: Adopter preferences
            animals: Candidate animals

        Returns:
            CompatibilityResult list sorted by descending score; equal
            scores keep input order
        """
        prefs = as_preferences(preferences)
        results = [self.score_one(prefs, animal) for animal in as_animals(animals)]
        return sorted(results, key=lambda r: r.match_score, reverse=True)

    def top_matches(
        self,
        preferences: PreferencesInput,
        animals: Iterable[AnimalInput],
        top_k: Optional[int] = None
    ) -> List[CompatibilityResult]:
        """Best top_k results (default_top_k when not given)."""
        return self.score(preferences, animals)[:top_k or self.default_top_k]

    def score_one(self, preferences: PreferencesInput, animal: AnimalInput) -> CompatibilityResult:
        """Score a single animal."""
        prefs = as_preferences(preferences)
        animal = as_animal(animal)

        factors = self.compute_factors(prefs, animal)
        distance = self.compute_distance(animal, factors)
        match_score = distance_to_score(distance, self.weights.max_distance, self.weights.decay)

        return CompatibilityResult(
            animal_id=animal.id,
            animal_name=display_name(animal),
            match_score=match_score,
            distance=distance,
            match_reasons=generate_match_reasons(prefs, animal, factors),
            compatibility_factors=factors
        )

    def compute_factors(self, prefs: AdopterPreferences, animal: AnimalProfile) -> CompatibilityFactors:
        """Per-dimension mismatch, each in [0, 1]."""
        return CompatibilityFactors(
            size=compare_sizes(prefs.preferred_size, animal.size),
            energy=compare_energy(prefs.preferred_energy, animal.energy),
            coexistence=coexistence_penalty(prefs, animal),
            personality=personality_mismatch(prefs, animal),
            lifestyle=lifestyle_mismatch(prefs, animal)
        )

    def compute_distance(self, animal: AnimalProfile, factors: CompatibilityFactors) -> float:
        """Euclidean norm of the weighted factors."""
        w = self.weights
        weighted = [
            factors.size * w.size,
            factors.energy * w.energy,
            factors.coexistence * w.coexistence,
        ]
        if animal.personality is not None:
            weighted.append(factors.personality * w.personality)
        weighted.append(factors.lifestyle * w.lifestyle)

        return float(np.linalg.norm(weighted))

    def evaluate(self, preferences: PreferencesInput, animals: Iterable[AnimalInput]) -> List[CompatibilityResult]:
        return self.score(preferences, animals)

    def evaluate_one(self, preferences: PreferencesInput, animal: AnimalInput) -> CompatibilityResult:
        return self.score_one(preferences, animal)


def compare_sizes(preferred: Optional[SizeClass], actual: Optional[SizeClass]) -> float:
    """0 when sizes match, 0.5 one step apart, 1 two steps apart."""
    diff = abs(SIZE_INDEX[preferred or DEFAULT_SIZE] - SIZE_INDEX[actual or DEFAULT_SIZE])
    return diff / 2


def compare_energy(preferred: Optional[EnergyLevel], actual: Optional[EnergyLevel]) -> float:
    """0 when energy levels match, 0.5 one step apart, 1 two steps apart."""
    diff = abs(ENERGY_INDEX[preferred or DEFAULT_ENERGY] - ENERGY_INDEX[actual or DEFAULT_ENERGY])
    return diff / 2


def coexistence_penalty(prefs: AdopterPreferences, animal: AnimalProfile) -> float:
    """
    Fraction of the applicable coexistence checks the animal fails.

    Checks apply only when relevant to the adopter: children in the home,
    other pets, living in an apartment. An apartment mismatch counts as half
    a failure.
    """
    coexist = animal.coexistence
    flags = animal.compatibility or CompatibilityFlags()
    penalties = 0.0
    total_checks = 0

    if prefs.has_children:
        total_checks += 1
        if not (coexist.children or flags.kids is True):
            penalties += 1

    if prefs.other_pets != OtherPets.NONE:
        total_checks += 1
        needs_cats = prefs.other_pets in (OtherPets.CAT, OtherPets.BOTH)
        needs_dogs = prefs.other_pets in (OtherPets.DOG, OtherPets.BOTH)

        compatible = True
        if needs_cats and not coexist.cats and flags.cats is not True:
            compatible = False
        if needs_dogs and not coexist.dogs and flags.dogs is not True:
            compatible = False
        if not compatible:
            penalties += 1

    if prefs.lives_in_apartment:
        total_checks += 1
        apartment_friendly = (
            animal.size != SizeClass.LARGE
            or animal.energy != EnergyLevel.HIGH
            or flags.apartment is True
        )
        if not apartment_friendly:
            penalties += APARTMENT_PENALTY

    return penalties / total_checks if total_checks > 0 else 0.0


def personality_mismatch(prefs: AdopterPreferences, animal: AnimalProfile) -> float:
    """
    Average of the applicable temperament gaps; 0 without a personality.

    Sub-factors:
    - experience vs. training need: |experience - (5 - training) / 1.5| / 3,
      with NONE and BEGINNER both counting as 1
    - activity vs. energy: |activity - energy| / 5 on the 1-5 scale
    - children with a low-sociability animal: fixed penalty
    """
    personality = animal.personality
    if personality is None:
        return 0.0

    score = 0.0
    factors = 0

    if prefs.experience_level is not None and personality.training is not None:
        factors += 1
        user_exp = EXPERIENCE_INDEX[prefs.experience_level]
        training_need = 5 - personality.training
        score += abs(user_exp - training_need / 1.5) / 3

    if prefs.activity_level is not None and personality.energy is not None:
        factors += 1
        score += abs(LEVEL_SCALE[prefs.activity_level] - personality.energy) / 5

    if prefs.has_children and personality.sociability is not None:
        factors += 1
        if personality.sociability < LOW_SOCIABILITY_THRESHOLD:
            score += LOW_SOCIABILITY_PENALTY

    return score / factors if factors > 0 else 0.0


def lifestyle_mismatch(prefs: AdopterPreferences, animal: AnimalProfile) -> float:
    """
    Average of the applicable lifestyle penalties.

    Only shortfalls are penalized: more space or time than needed is free.
    """
    score = 0.0
    factors = 0

    if prefs.space_size is not None:
        factors += 1
        space_diff = SIZE_INDEX[prefs.space_size] - SIZE_INDEX[animal.size or DEFAULT_SIZE]
        if space_diff < 0:
            score += abs(space_diff) * SPACE_PENALTY_PER_STEP

    if prefs.time_available is not None:
        factors += 1
        user_time = LEVEL_SCALE[prefs.time_available]
        animal_need = LEVEL_SCALE[animal.energy or DEFAULT_ENERGY]
        if user_time < animal_need:
            score += (animal_need - user_time) / 5

    if prefs.grooming_commitment is not None:
        factors += 1
        if needs_grooming(animal.breed) and GROOMING_INDEX[prefs.grooming_commitment] < 2:
            score += GROOMING_PENALTY

    return score / factors if factors > 0 else 0.0


def needs_grooming(breed: Optional[str]) -> bool:
    """Whether the breed label names a high-maintenance coat."""
    if not breed:
        return False
    breed_lower = breed.lower()
    return any(b.lower() in breed_lower for b in HIGH_MAINTENANCE_BREEDS)


def generate_match_reasons(
    prefs: AdopterPreferences,
    animal: AnimalProfile,
    factors: CompatibilityFactors
) -> List[str]:
    """
    Human-readable reasons for a match.

    Each well-aligned dimension contributes its reasons; when none apply a
    single generic reason is returned, so the list is never empty.
    """
    reasons = []

    if factors.size < SIZE_REASON_THRESHOLD:
        size_label = (animal.size or DEFAULT_SIZE).value.lower()
        reasons.append(f"Tamaño {size_label} ideal para tus preferencias")

    if factors.energy < ENERGY_REASON_THRESHOLD:
        reasons.append(
            f"Nivel de energía {ENERGY_LABELS[animal.energy or DEFAULT_ENERGY]} "
            f"compatible con tu estilo de vida"
        )

    if factors.coexistence < COEXISTENCE_REASON_THRESHOLD:
        if prefs.has_children and animal.coexistence.children:
            reasons.append("Excelente con niños")
        if prefs.other_pets != OtherPets.NONE and (animal.coexistence.cats or animal.coexistence.dogs):
            reasons.append("Compatible con otras mascotas")

    personality = animal.personality
    if personality is not None and factors.personality < PERSONALITY_REASON_THRESHOLD:
        if personality.sociability is not None and personality.sociability >= HIGH_TRAIT_SCORE:
            reasons.append("Muy sociable y cariñoso")
        if personality.training is not None and personality.training >= HIGH_TRAIT_SCORE:
            reasons.append("Fácil de entrenar")
        if personality.adaptability is not None and personality.adaptability >= HIGH_TRAIT_SCORE:
            reasons.append("Se adapta fácilmente a nuevos entornos")

    if factors.lifestyle < LIFESTYLE_REASON_THRESHOLD:
        if prefs.lives_in_apartment and animal.compatibility and animal.compatibility.apartment:
            reasons.append("Ideal para apartamento")

    if not reasons:
        reasons.append(GENERIC_REASON)

    return reasons
