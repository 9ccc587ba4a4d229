"""Input and result records exchanged with the calling service."""

from .schema import (
    SizeClass,
    EnergyLevel,
    ExperienceLevel,
    OtherPets,
    Gender,
    AgeClass,
    Coexistence,
    Personality,
    CompatibilityFlags,
    ClinicalHistory,
    AnimalProfile,
    AdopterPreferences,
    ApplicationForm,
    MatchResult,
    RankingResult,
    MatchExplanation,
    CompatibilityFactors,
    CompatibilityResult,
    CriterionDetail,
    ApplicationScore,
)

__all__ = [
    "SizeClass",
    "EnergyLevel",
    "ExperienceLevel",
    "OtherPets",
    "Gender",
    "AgeClass",
    "Coexistence",
    "Personality",
    "CompatibilityFlags",
    "ClinicalHistory",
    "AnimalProfile",
    "AdopterPreferences",
    "ApplicationForm",
    "MatchResult",
    "RankingResult",
    "MatchExplanation",
    "CompatibilityFactors",
    "CompatibilityResult",
    "CriterionDetail",
    "ApplicationScore",
]
