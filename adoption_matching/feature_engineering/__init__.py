"""Feature engineering module for animal and adopter feature vectors."""

from .feature_vectors import (
    encode_animal,
    encode_adopter,
    estimate_fur_length,
    size_to_maturity_code,
    animal_age_months,
    get_feature_names,
    explain_feature_vector,
    N_FEATURES,
)

__all__ = [
    "encode_animal",
    "encode_adopter",
    "estimate_fur_length",
    "size_to_maturity_code",
    "animal_age_months",
    "get_feature_names",
    "explain_feature_vector",
    "N_FEATURES",
]
