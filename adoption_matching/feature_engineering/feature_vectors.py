"""
Feature vector encoding for nearest-neighbor matching.

Animals and adopters are encoded into the SAME 9-dimension space, the one
the scaler was fitted on (PetFinder attributes), so their vectors can be
compared directly:

    0. Age           age in months
    1. MaturitySize  1=Small, 2=Medium, 3=Large, 0=Not Specified
    2. FurLength     1=Short, 2=Medium, 3=Long, 0=Not Specified
    3. Health        1=Healthy, 2=Minor Injury, 3=Serious Injury
    4. Vaccinated    1=Yes, 2=No, 3=Not Sure
    5. Dewormed      1=Yes, 2=No, 3=Not Sure
    6. Sterilized    1=Yes, 2=No, 3=Not Sure
    7. Fee           adoption fee
    8. PhotoAmt      number of photos

An adopter vector is the profile of the animal the adopter would ideally
adopt. Both encoders are total: every input field is optional and falls
back to the defaults documented on the lookup tables below.
"""

import logging
from typing import Dict, Optional, Sequence

import numpy as np

from ..configs.scaler_config import DEFAULT_FEATURE_NAMES
from ..exceptions import FeatureShapeError
from ..inference.schema import (
    AnimalProfile,
    AdopterPreferences,
    EnergyLevel,
    ExperienceLevel,
    SizeClass,
)

logger = logging.getLogger(__name__)

N_FEATURES = len(DEFAULT_FEATURE_NAMES)

# Size class -> MaturitySize code; anything unmapped is 0 (Not Specified)
MATURITY_SIZE_CODES = {
    SizeClass.SMALL: 1,
    SizeClass.MEDIUM: 2,
    SizeClass.LARGE: 3,
}
MATURITY_SIZE_NOT_SPECIFIED = 0

FUR_SHORT = 1
FUR_MEDIUM = 2
FUR_LONG = 3

# Breed substrings (lowercase) -> coat length. Breeds matching neither list,
# or both, are treated as medium coat.
SHORT_COAT_BREEDS = (
    "beagle",
    "boxer",
    "pit bull",
    "chihuahua",
    "doberman",
    "rottweiler",
)
LONG_COAT_BREEDS = (
    "golden",
    "shih tzu",
    "yorkshire",
    "poodle",
    "husky",
    "collie",
    "pastor",
    "maltese",
)

HEALTHY = 1
MINOR_INJURY = 2

YES = 1
NO = 2
NOT_SURE = 3

ADOPTION_FEE = 0

# Adopter age target in months, before the activity adjustment
DEFAULT_PREFERRED_AGE = 36
PREFERRED_AGE_BY_EXPERIENCE = {
    ExperienceLevel.NONE: 48,
    ExperienceLevel.BEGINNER: 48,
    ExperienceLevel.EXPERT: 18,
}
MIN_PREFERRED_AGE = 12
MAX_PREFERRED_AGE = 84
HIGH_ACTIVITY_AGE_SHIFT = -12
LOW_ACTIVITY_AGE_SHIFT = 24

PREFERRED_PHOTO_AMOUNT = 5


def size_to_maturity_code(size: Optional[SizeClass]) -> int:
    """Map a size class to its MaturitySize code (0 when unspecified)."""
    return MATURITY_SIZE_CODES.get(size, MATURITY_SIZE_NOT_SPECIFIED)


def estimate_fur_length(breed: Optional[str]) -> int:
    """
    Estimate coat length from a free-text breed label.

    This is a substring heuristic, not a breed registry: "Golden Retriever"
    and "Mestizo de Golden" are both long-coated.

    Args:
        breed: Breed label (any case)

    Returns:
        FurLength code; FUR_MEDIUM when unknown or ambiguous
    """
    if not breed:
        return FUR_MEDIUM

    breed_lower = breed.lower()
    is_short = any(b in breed_lower for b in SHORT_COAT_BREEDS)
    is_long = any(b in breed_lower for b in LONG_COAT_BREEDS)

    if is_short and not is_long:
        return FUR_SHORT
    if is_long and not is_short:
        return FUR_LONG
    return FUR_MEDIUM


def animal_age_months(animal: AnimalProfile) -> float:
    """Age in months, from age_months, else age in years, else 0."""
    if animal.age_months is not None:
        return float(animal.age_months)
    if animal.age is not None:
        return float(animal.age) * 12
    return 0.0


def encode_animal(animal: AnimalProfile) -> np.ndarray:
    """
    Encode an animal profile as a 9-dimension feature vector.

    Args:
        animal: Animal profile

    Returns:
        Read-only float array of length 9
    """
    clinical = animal.clinical_history

    health = MINOR_INJURY if clinical and clinical.conditions else HEALTHY

    # Deworming is not tracked separately; it follows the vaccination record
    vaccinated = YES if clinical and clinical.last_vaccination else NOT_SURE
    dewormed = vaccinated

    if clinical is None or clinical.sterilized is None:
        sterilized = NOT_SURE
    else:
        sterilized = YES if clinical.sterilized else NO

    vector = [
        animal_age_months(animal),
        size_to_maturity_code(animal.size),
        estimate_fur_length(animal.breed),
        health,
        vaccinated,
        dewormed,
        sterilized,
        ADOPTION_FEE,
        max(animal.photo_count, 1),
    ]
    return _freeze(vector)


def encode_adopter(prefs: AdopterPreferences) -> np.ndarray:
    """
    Project adopter preferences into the animal feature space.

    The result describes the adopter's ideal animal: beginners get an older,
    calmer target age and experts a younger one; activity shifts the target
    further; adopters always prefer healthy, vaccinated, dewormed animals
    with well-documented listings.

    Args:
        prefs: Adopter preferences

    Returns:
        Read-only float array of length 9
    """
    preferred_age = PREFERRED_AGE_BY_EXPERIENCE.get(prefs.experience_level, DEFAULT_PREFERRED_AGE)

    if prefs.activity_level == EnergyLevel.HIGH:
        preferred_age += HIGH_ACTIVITY_AGE_SHIFT
    elif prefs.activity_level == EnergyLevel.LOW:
        preferred_age += LOW_ACTIVITY_AGE_SHIFT
    preferred_age = min(max(preferred_age, MIN_PREFERRED_AGE), MAX_PREFERRED_AGE)

    # Little time means little grooming: prefer short coats
    fur_length = FUR_SHORT if prefs.time_available == EnergyLevel.LOW else FUR_MEDIUM

    sterilized = NO if prefs.experience_level == ExperienceLevel.EXPERT else YES

    vector = [
        preferred_age,
        size_to_maturity_code(prefs.preferred_size),
        fur_length,
        HEALTHY,
        YES,
        YES,
        sterilized,
        ADOPTION_FEE,
        PREFERRED_PHOTO_AMOUNT,
    ]
    return _freeze(vector)


def get_feature_names(feature_names: Optional[Sequence[str]] = None) -> list:
    """Feature names in vector order (from a scaler config, or the defaults)."""
    return list(feature_names if feature_names is not None else DEFAULT_FEATURE_NAMES)


def explain_feature_vector(
    vector: Sequence[float],
    feature_names: Optional[Sequence[str]] = None
) -> Dict[str, float]:
    """
    Map each feature name to its value.

    Args:
        vector: Feature vector
        feature_names: Names in vector order (defaults to the standard names)

    Returns:
        Ordered dictionary of feature name -> value

    Raises:
        FeatureShapeError: If vector and names differ in length
    """
    names = get_feature_names(feature_names)
    values = np.asarray(vector, dtype=float).ravel()
    if len(values) != len(names):
        raise FeatureShapeError(
            f"Expected {len(names)} features to explain, got {len(values)}"
        )
    return {name: float(value) for name, value in zip(names, values)}


def _freeze(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    arr.setflags(write=False)
    return arr
