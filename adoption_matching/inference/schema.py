"""
Input and output records for the matching engine.

Input records mirror what the surrounding service stores:
- AnimalProfile: an adoptable animal as published by a foundation
- AdopterPreferences: the adopter's onboarding questionnaire
- ApplicationForm: a submitted adoption application

Every input field is optional. Enumerated fields accept the enum member or
its string value (case-insensitive); unknown strings resolve to None
("not specified"). from_dict() accepts both snake_case keys and the
camelCase keys used by the service documents.

Output records are computed per call and returned; each exposes to_dict().
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Type


class SizeClass(Enum):
    """Animal size, also used for adopter space size."""
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class EnergyLevel(Enum):
    """Three-step level used for energy, activity, time and grooming."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ExperienceLevel(Enum):
    """Adopter experience with dogs."""
    NONE = "NONE"
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    EXPERT = "EXPERT"


class OtherPets(Enum):
    """Pets already living in the adopter's home."""
    NONE = "none"
    DOG = "dog"
    CAT = "cat"
    BOTH = "both"


class Gender(Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class AgeClass(Enum):
    """Age class used by the application rubric."""
    PUPPY = "puppy"
    ADULT = "adult"


def coerce_enum(enum_cls: Type[Enum], value: Any) -> Optional[Enum]:
    """
    Convert a raw value into a member of enum_cls.

    Args:
        enum_cls: Target enum class
        value: Enum member, string value/name, or None

    Returns:
        Matching member, or None when the value is missing or unknown
    """
    if value is None or isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for member in enum_cls:
        if text.lower() in (member.value.lower(), member.name.lower()):
            return member
    return None


def _pick(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in d."""
    for key in keys:
        if key in d and d[key] is not None:
            return d[key]
    return default


def _optional_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return bool(value)


# =============================================================================
# Animal profile
# =============================================================================

@dataclass
class Coexistence:
    """Whether the animal is known to live well with children, cats and dogs."""
    children: bool = False
    cats: bool = False
    dogs: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Coexistence":
        return cls(
            children=bool(data.get("children", False)),
            cats=bool(data.get("cats", False)),
            dogs=bool(data.get("dogs", False)),
        )


@dataclass
class Personality:
    """
    Foundation-assessed temperament.

    All scores are on a 1-5 scale:
        sociability: 1 = reserved, 5 = very social
        energy: 1 = calm, 5 = very energetic
        training: 1 = hard to train, 5 = easy to train
        adaptability: 1 = needs routine, 5 = adapts easily
    """
    sociability: Optional[float] = None
    energy: Optional[float] = None
    training: Optional[float] = None
    adaptability: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Personality":
        return cls(
            sociability=data.get("sociability"),
            energy=data.get("energy"),
            training=_pick(data, "training", "trainability"),
            adaptability=data.get("adaptability"),
        )


@dataclass
class CompatibilityFlags:
    """Explicit compatibility flags; None means the foundation did not say."""
    kids: Optional[bool] = None
    cats: Optional[bool] = None
    dogs: Optional[bool] = None
    apartment: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompatibilityFlags":
        return cls(
            kids=_optional_bool(data.get("kids")),
            cats=_optional_bool(data.get("cats")),
            dogs=_optional_bool(data.get("dogs")),
            apartment=_optional_bool(data.get("apartment")),
        )


@dataclass
class ClinicalHistory:
    """
    Clinical summary of the animal.

    Attributes:
        sterilized: True/False when known, None when unknown
        last_vaccination: Date (or date string) of the last vaccination
        conditions: Free-text description of known conditions
    """
    sterilized: Optional[bool] = None
    last_vaccination: Optional[Any] = None
    conditions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClinicalHistory":
        return cls(
            sterilized=_optional_bool(data.get("sterilized")),
            last_vaccination=_pick(data, "last_vaccination", "lastVaccination"),
            conditions=data.get("conditions"),
        )


@dataclass
class AnimalProfile:
    """
    Adoptable animal as supplied by the animal catalog.

    Attributes:
        id: Catalog identifier
        name: Display name
        age: Age in years
        age_months: Age in months; takes precedence over age when present
        size: Size class
        breed: Free-text breed label
        gender: Gender
        energy: Energy class
        coexistence: Coexistence flags
        personality: Optional temperament scores
        compatibility: Optional explicit compatibility flags
        clinical_history: Optional clinical summary
        photos: Photo URLs
    """
    id: str = ""
    name: Optional[str] = None
    age: Optional[float] = None
    age_months: Optional[float] = None
    size: Optional[SizeClass] = None
    breed: Optional[str] = None
    gender: Optional[Gender] = None
    energy: Optional[EnergyLevel] = None
    coexistence: Coexistence = field(default_factory=Coexistence)
    personality: Optional[Personality] = None
    compatibility: Optional[CompatibilityFlags] = None
    clinical_history: Optional[ClinicalHistory] = None
    photos: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Convert string inputs to enums and nested dicts to records."""
        self.size = coerce_enum(SizeClass, self.size)
        self.gender = coerce_enum(Gender, self.gender)
        self.energy = coerce_enum(EnergyLevel, self.energy)

        if isinstance(self.coexistence, dict):
            self.coexistence = Coexistence.from_dict(self.coexistence)
        elif self.coexistence is None:
            self.coexistence = Coexistence()
        if isinstance(self.personality, dict):
            self.personality = Personality.from_dict(self.personality)
        if isinstance(self.compatibility, dict):
            self.compatibility = CompatibilityFlags.from_dict(self.compatibility)
        if isinstance(self.clinical_history, dict):
            self.clinical_history = ClinicalHistory.from_dict(self.clinical_history)
        if self.photos is None:
            self.photos = []

    @property
    def photo_count(self) -> int:
        return len(self.photos)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnimalProfile":
        """
        Create from a catalog document.

        Attribute fields may be nested under "attributes" (as the catalog
        stores them) or given at the top level.
        """
        attributes = data.get("attributes") or {}

        def attr(*keys: str) -> Any:
            return _pick(attributes, *keys, default=_pick(data, *keys))

        return cls(
            id=str(_pick(data, "id", "_id", default="")),
            name=data.get("name"),
            age=attr("age"),
            age_months=_pick(data, "age_months", "ageMonths"),
            size=attr("size"),
            breed=attr("breed"),
            gender=attr("gender"),
            energy=attr("energy"),
            coexistence=attr("coexistence") or {},
            personality=data.get("personality"),
            compatibility=data.get("compatibility"),
            clinical_history=_pick(data, "clinical_history", "clinicalHistory"),
            photos=list(data.get("photos") or []),
        )


# =============================================================================
# Adopter preferences
# =============================================================================

@dataclass
class AdopterPreferences:
    """
    Adopter onboarding answers.

    Attributes:
        preferred_size: Preferred animal size
        preferred_energy: Preferred animal energy
        has_children: Children live in the home
        other_pets: Pets already in the home
        dwelling: Dwelling type ("apartment", "house", ...)
        experience_level: Experience with dogs
        activity_level: Adopter's own activity level
        space_size: Space available at home
        time_available: Daily time available for the animal
        grooming_commitment: Willingness to groom
        completed: Whether onboarding was finished
    """
    preferred_size: Optional[SizeClass] = None
    preferred_energy: Optional[EnergyLevel] = None
    has_children: bool = False
    other_pets: OtherPets = OtherPets.NONE
    dwelling: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    activity_level: Optional[EnergyLevel] = None
    space_size: Optional[SizeClass] = None
    time_available: Optional[EnergyLevel] = None
    grooming_commitment: Optional[EnergyLevel] = None
    completed: bool = False

    def __post_init__(self):
        """Convert string inputs to enums."""
        self.preferred_size = coerce_enum(SizeClass, self.preferred_size)
        self.preferred_energy = coerce_enum(EnergyLevel, self.preferred_energy)
        self.other_pets = coerce_enum(OtherPets, self.other_pets) or OtherPets.NONE
        self.experience_level = coerce_enum(ExperienceLevel, self.experience_level)
        self.activity_level = coerce_enum(EnergyLevel, self.activity_level)
        self.space_size = coerce_enum(SizeClass, self.space_size)
        self.time_available = coerce_enum(EnergyLevel, self.time_available)
        self.grooming_commitment = coerce_enum(EnergyLevel, self.grooming_commitment)
        self.has_children = bool(self.has_children)
        self.completed = bool(self.completed)

    @property
    def lives_in_apartment(self) -> bool:
        return (self.dwelling or "").strip().lower() == "apartment"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdopterPreferences":
        """Create from a user-profile preferences document."""
        return cls(
            preferred_size=_pick(data, "preferred_size", "preferredSize"),
            preferred_energy=_pick(data, "preferred_energy", "preferredEnergy"),
            has_children=_pick(data, "has_children", "hasChildren", default=False),
            other_pets=_pick(data, "other_pets", "otherPets", default=OtherPets.NONE),
            dwelling=data.get("dwelling"),
            experience_level=_pick(data, "experience_level", "experienceLevel"),
            activity_level=_pick(data, "activity_level", "activityLevel"),
            space_size=_pick(data, "space_size", "spaceSize"),
            time_available=_pick(data, "time_available", "timeAvailable"),
            grooming_commitment=_pick(data, "grooming_commitment", "groomingCommitment"),
            completed=data.get("completed", False),
        )


# =============================================================================
# Application form
# =============================================================================

# Criterion name -> camelCase key used by the application documents
APPLICATION_FIELD_ALIASES = {
    "family_decision": "familyDecision",
    "monthly_budget": "monthlyBudget",
    "allow_visits": "allowVisits",
    "accept_sterilization": "acceptSterilization",
    "housing": "housing",
    "relation_animals": "relationAnimals",
    "travel_plans": "travelPlans",
    "behavior_response": "behaviorResponse",
    "care_commitment": "careCommitment",
}


@dataclass
class ApplicationForm:
    """
    Discrete answers of an adoption application.

    Values are the raw option keys submitted by the form (e.g. "agree",
    "high", "Casa urbana"); None means the question was left unanswered.
    """
    family_decision: Optional[str] = None
    monthly_budget: Optional[str] = None
    allow_visits: Optional[str] = None
    accept_sterilization: Optional[str] = None
    housing: Optional[str] = None
    relation_animals: Optional[str] = None
    travel_plans: Optional[str] = None
    behavior_response: Optional[str] = None
    care_commitment: Optional[str] = None

    def get(self, criterion: str) -> Optional[str]:
        """Return the submitted value for a criterion."""
        return getattr(self, criterion, None)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary keyed by criterion name."""
        return {name: getattr(self, name) for name in APPLICATION_FIELD_ALIASES}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicationForm":
        """Create from a form payload with snake_case or camelCase keys."""
        return cls(**{
            name: _pick(data, name, alias)
            for name, alias in APPLICATION_FIELD_ALIASES.items()
        })


# =============================================================================
# Results
# =============================================================================

@dataclass
class MatchResult:
    """
    One candidate scored by the nearest-neighbor ranker.

    Attributes:
        animal_id: Catalog identifier
        animal_name: Display name
        distance: Distance to the adopter in scaled space (>= 0)
        score: Bounded score [0, 100]; lower distance gives a higher score
        rank: 1-based position in the full candidate ranking
        is_top_k: Whether the candidate is among the K nearest
        feature_vector: Raw animal feature vector
        scaled_vector: Standardized animal feature vector
    """
    animal_id: str
    animal_name: str
    distance: float
    score: float
    rank: int
    is_top_k: bool
    feature_vector: List[float]
    scaled_vector: List[float]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "animal_id": self.animal_id,
            "animal_name": self.animal_name,
            "distance": float(self.distance),
            "score": float(self.score),
            "rank": int(self.rank),
            "is_top_k": bool(self.is_top_k),
            "feature_vector": list(self.feature_vector),
            "scaled_vector": list(self.scaled_vector),
        }


@dataclass
class RankingResult:
    """Full output of a nearest-neighbor ranking."""
    top_matches: List[MatchResult]
    all_matches: List[MatchResult]
    adopter_vector: List[float]
    adopter_scaled_vector: List[float]
    k: int
    total_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top_matches": [m.to_dict() for m in self.top_matches],
            "all_matches": [m.to_dict() for m in self.all_matches],
            "adopter_vector": list(self.adopter_vector),
            "adopter_scaled_vector": list(self.adopter_scaled_vector),
            "k": self.k,
            "total_count": self.total_count,
        }


@dataclass
class MatchExplanation:
    """
    Diagnostic breakdown of a single nearest-neighbor match.

    Attributes:
        match: The single-candidate match
        adopter_features: Feature name -> adopter vector value
        animal_features: Feature name -> animal vector value
        feature_differences: Feature name -> unscaled absolute difference
    """
    match: MatchResult
    adopter_features: Dict[str, float]
    animal_features: Dict[str, float]
    feature_differences: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match": self.match.to_dict(),
            "adopter_features": dict(self.adopter_features),
            "animal_features": dict(self.animal_features),
            "feature_differences": dict(self.feature_differences),
        }


@dataclass
class CompatibilityFactors:
    """Per-dimension mismatch, each normalized to [0, 1]; 0 is a perfect fit."""
    size: float = 0.0
    energy: float = 0.0
    coexistence: float = 0.0
    personality: float = 0.0
    lifestyle: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "size": float(self.size),
            "energy": float(self.energy),
            "coexistence": float(self.coexistence),
            "personality": float(self.personality),
            "lifestyle": float(self.lifestyle),
        }


@dataclass
class CompatibilityResult:
    """
    One candidate scored by the weighted compatibility scorer.

    Attributes:
        animal_id: Catalog identifier
        animal_name: Display name
        match_score: Score [0, 100]; higher is better
        distance: Weighted Euclidean distance the score was derived from
        match_reasons: Human-readable reasons (never empty)
        compatibility_factors: Per-dimension mismatch
    """
    animal_id: str
    animal_name: str
    match_score: float
    distance: float
    match_reasons: List[str]
    compatibility_factors: CompatibilityFactors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "animal_id": self.animal_id,
            "animal_name": self.animal_name,
            "match_score": float(self.match_score),
            "distance": float(self.distance),
            "match_reasons": list(self.match_reasons),
            "compatibility_factors": self.compatibility_factors.to_dict(),
        }


@dataclass
class CriterionDetail:
    """
    Outcome of one application criterion.

    Attributes:
        value: Submitted value, or the literal "no especificado" when missing
        contribution: Criterion multiplier as an integer percentage (0-100)
    """
    value: Any
    contribution: int

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "contribution": int(self.contribution)}


@dataclass
class ApplicationScore:
    """
    Result of scoring an adoption application.

    Attributes:
        percentage: Weighted score [0, 100]
        eligible: Whether the percentage reaches the eligibility threshold
        detail: Criterion name -> CriterionDetail for every applicable criterion
    """
    percentage: int
    eligible: bool
    detail: Dict[str, CriterionDetail] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": int(self.percentage),
            "eligible": bool(self.eligible),
            "detail": {k: v.to_dict() for k, v in self.detail.items()},
        }
