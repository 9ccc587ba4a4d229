"""Shared test fixtures for the adoption matching test suite."""

from __future__ import annotations

import pytest

from adoption_matching.configs.scaler_config import DEFAULT_FEATURE_NAMES, ScalerConfig
from adoption_matching.inference.schema import (
    AdopterPreferences,
    AnimalProfile,
    ApplicationForm,
    ClinicalHistory,
    Coexistence,
    CompatibilityFlags,
    Personality,
)


@pytest.fixture
def identity_config() -> ScalerConfig:
    """Scaler config that leaves vectors unchanged (mean 0, scale 1, k=2)."""
    return ScalerConfig(
        feature_names=DEFAULT_FEATURE_NAMES,
        scaler_mean=[0.0] * 9,
        scaler_scale=[1.0] * 9,
        n_neighbors=2,
        metric="manhattan",
    )


@pytest.fixture
def scaler_config_dict() -> dict:
    """Raw scaler artifact as stored on disk."""
    return {
        "feature_names": list(DEFAULT_FEATURE_NAMES),
        "scaler_mean": [10.0, 2.0, 1.5, 1.0, 1.7, 1.6, 1.9, 21.0, 3.9],
        "scaler_scale": [18.0, 0.5, 0.6, 0.2, 0.7, 0.7, 0.6, 78.0, 3.5],
        "n_neighbors": 15,
        "metric": "manhattan",
        "weights": "distance",
        "version": "test",
    }


@pytest.fixture
def matching_adopter() -> AdopterPreferences:
    """Adopter whose encoded vector is [36, 2, 2, 1, 1, 1, 1, 0, 5]."""
    return AdopterPreferences(
        preferred_size="MEDIUM",
        experience_level="INTERMEDIATE",
        completed=True,
    )


@pytest.fixture
def matching_animal() -> AnimalProfile:
    """Animal encoding to the same vector as matching_adopter."""
    return AnimalProfile(
        id="animal-1",
        name="Luna",
        age_months=36,
        size="MEDIUM",
        breed="Mestizo",
        clinical_history=ClinicalHistory(sterilized=True, last_vaccination="2024-03-01"),
        photos=["1.jpg", "2.jpg", "3.jpg", "4.jpg", "5.jpg"],
    )


@pytest.fixture
def distant_animal() -> AnimalProfile:
    """Animal encoding to [96, 1, 1, 2, 3, 3, 2, 0, 1]."""
    return AnimalProfile(
        id="animal-2",
        name="Rocky",
        age_months=96,
        size="SMALL",
        breed="Beagle",
        clinical_history=ClinicalHistory(sterilized=False, conditions="Displasia"),
        photos=[],
    )


@pytest.fixture
def family_adopter() -> AdopterPreferences:
    """Adopter with children and a cat, living in an apartment."""
    return AdopterPreferences(
        preferred_size="MEDIUM",
        preferred_energy="MEDIUM",
        has_children=True,
        other_pets="cat",
        dwelling="apartment",
        experience_level="INTERMEDIATE",
        activity_level="MEDIUM",
        space_size="MEDIUM",
        time_available="MEDIUM",
        grooming_commitment="LOW",
        completed=True,
    )


@pytest.fixture
def family_friendly_animal() -> AnimalProfile:
    """Medium, calm-ish animal that gets along with children and cats."""
    return AnimalProfile(
        id="friendly",
        name="Canela",
        age_months=30,
        size="MEDIUM",
        breed="Mestizo",
        energy="MEDIUM",
        coexistence=Coexistence(children=True, cats=True, dogs=True),
        personality=Personality(sociability=5, energy=3, training=4, adaptability=4),
        compatibility=CompatibilityFlags(kids=True, cats=True, apartment=True),
    )


@pytest.fixture
def demanding_animal() -> AnimalProfile:
    """Large, high-energy, long-coated animal with no coexistence record."""
    return AnimalProfile(
        id="demanding",
        name="Thor",
        age_months=48,
        size="LARGE",
        breed="Siberian Husky",
        energy="HIGH",
        coexistence=Coexistence(children=False, cats=False, dogs=True),
        personality=Personality(sociability=2, energy=5, training=2, adaptability=3),
    )


@pytest.fixture
def complete_form() -> ApplicationForm:
    """Application with the best answer to every question."""
    return ApplicationForm(
        family_decision="agree",
        monthly_budget="high",
        allow_visits="yes",
        accept_sterilization="yes",
        housing="Casa urbana",
        relation_animals="positive",
        travel_plans="withOwner",
        behavior_response="trainOrAccept",
        care_commitment="fullCare",
    )
