"""
Clinical Protocol Layer: Base Types

Defines the typed input (PatientProfile) and the output contract
(TreatmentPlan) shared by every rule module. Free text never reaches
this layer: anamnesis.py converts it into the enums below first.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List

from app.utils import InvalidProfileError


class Sex(str, Enum):
    FEMALE = "female"
    MALE   = "male"


class Phototype(str, Enum):
    """Fitzpatrick skin phototype. UNKNOWN follows the lighter-skin branch."""
    I       = "I"
    II      = "II"
    III     = "III"
    IV      = "IV"
    V       = "V"
    VI      = "VI"
    UNKNOWN = "unknown"

    @property
    def is_dark(self) -> bool:
        return self in (Phototype.IV, Phototype.V, Phototype.VI)


class SkinBiotype(str, Enum):
    DRY         = "dry"
    OILY        = "oily"
    COMBINATION = "combination"
    NORMAL      = "normal"
    UNKNOWN     = "unknown"


class Sagging(str, Enum):
    """
    Degree of facial laxity.

    NONE_MILD – no structural indication (also the default for blank input)
    MODERATE  – volumising and bioestimulation indicated
    SEVERE    – extra bioestimulator session, radiofrequency
    """
    NONE_MILD = "none_mild"
    MODERATE  = "moderate"
    SEVERE    = "severe"


class SunExposure(str, Enum):
    LOW      = "low"
    MODERATE = "moderate"
    HIGH     = "high"
    UNKNOWN  = "unknown"


class Complaint(str, Enum):
    WRINKLES     = "wrinkles"
    DARK_CIRCLES = "dark_circles"
    NASOLABIAL   = "nasolabial"      # "mustache area" folds
    SAGGING      = "sagging"
    SCARS        = "scars"
    PORES        = "pores"
    SPOTS        = "spots"
    LIPS         = "lips"
    ACNE         = "acne"


class Allergen(str, Enum):
    EGG_ALBUMIN = "egg_albumin"


class FacialRegion(str, Enum):
    GLABELLA    = "glabella"
    FRONTALIS   = "frontalis"
    ORBICULARIS = "orbicularis"
    MALAR       = "malar"
    TEAR_TROUGH = "tear_trough"
    LIPS        = "lips"


class ProductClass(str, Enum):
    """Product families the engine recommends generically."""
    BOTULINUM_TOXIN         = "botulinum_toxin"
    ALBUMIN_FREE_TOXIN      = "albumin_free_toxin"
    HYALURONIC_ACID         = "hyaluronic_acid"
    CALCIUM_HYDROXYAPATITE  = "calcium_hydroxyapatite"
    POLY_L_LACTIC_ACID      = "poly_l_lactic_acid"


# ── Default texts ────────────────────────────────────────────────────────────
TO_BE_EVALUATED  = "To be evaluated"
NOT_INDICATED    = "Not indicated"
NONE             = "None"
NO_INTERVAL      = "-"
MONTHLY_CLEANING = "Monthly"
CONTRAINDICATED  = "Contraindicated"
INDICATED        = "Indicated"
BASELINE_RATIONALE = "Protocol generated automatically from the anamnesis."

GENERIC_TOXIN_PRODUCT  = "Botulinum toxin type A"
GENERIC_FILLER_PRODUCT = "Hyaluronic acid filler"


@dataclass(frozen=True)
class PatientProfile:
    """
    Normalised anamnesis handed to the rule engine.

    Built fresh per evaluation (see anamnesis.normalize_anamnesis). Every
    field is typed; the rules never scan free text.
    """
    age: int
    sex: Sex = Sex.FEMALE
    complaints: FrozenSet[Complaint] = frozenset()
    skin_phototype: Phototype = Phototype.UNKNOWN
    skin_biotype: SkinBiotype = SkinBiotype.UNKNOWN
    sagging: Sagging = Sagging.NONE_MILD
    pregnant: bool = False
    lactating: bool = False
    isotretinoin_use: bool = False
    sun_exposure: SunExposure = SunExposure.UNKNOWN
    melasma: bool = False
    keloid_history: bool = False
    allergies: FrozenSet[Allergen] = frozenset()

    # Supplementary anamnesis flags (audit flow)
    acne: bool = False
    sensitive_skin: bool = False
    immunosuppressive_medication: bool = False
    autoimmune_disease: bool = False

    def __post_init__(self):
        if isinstance(self.age, bool) or not isinstance(self.age, int):
            raise InvalidProfileError(
                f"age must be an integer, got {self.age!r}", field="age"
            )
        if self.age < 0:
            raise InvalidProfileError(
                f"age must be >= 0, got {self.age}", field="age"
            )
        # Frozen dataclass: coerce iterables through object.__setattr__
        object.__setattr__(self, "complaints", _freeze(self.complaints, Complaint, "complaints"))
        object.__setattr__(self, "allergies", _freeze(self.allergies, Allergen, "allergies"))

    def has(self, complaint: Complaint) -> bool:
        return complaint in self.complaints

    @property
    def gestational(self) -> bool:
        return self.pregnant or self.lactating


def _freeze(values: Iterable, enum_cls, field_name: str) -> FrozenSet:
    try:
        return frozenset(enum_cls(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise InvalidProfileError(
            f"{field_name} must contain {enum_cls.__name__} values",
            field=field_name,
            details={"reason": str(exc)},
        ) from exc


@dataclass
class BioestimulatorPlan:
    product: str = TO_BE_EVALUATED
    session_count: int = 0
    interval: str = NO_INTERVAL
    product_class: str = ""

    def to_dict(self) -> dict:
        return {
            "product": self.product,
            "sessionCount": self.session_count,
            "interval": self.interval,
        }


@dataclass
class SkinCarePlan:
    cleaning_cadence: str = MONTHLY_CLEANING
    peel_indication: str = NOT_INDICATED
    microneedling_indication: str = NOT_INDICATED
    mesotherapy_indication: str = NOT_INDICATED

    def to_dict(self) -> dict:
        return {
            "cleaningCadence": self.cleaning_cadence,
            "peelIndication": self.peel_indication,
            "microneedlingIndication": self.microneedling_indication,
            "mesotherapyIndication": self.mesotherapy_indication,
        }


@dataclass
class TechnologyPlan:
    laser: str = NONE
    radiofrequency: str = NONE
    other: str = NONE

    def add_other(self, suggestion: str) -> None:
        """Append a suggestion to `other`, replacing the default text."""
        self.other = suggestion if self.other == NONE else f"{self.other} / {suggestion}"

    def to_dict(self) -> dict:
        return {
            "laser": self.laser,
            "radiofrequency": self.radiofrequency,
            "other": self.other,
        }


@dataclass
class TreatmentPlan:
    """
    Result of one evaluation. Always fully shaped: every field starts at
    its default and rules only overwrite what they indicate.
    """
    # ── Injectables ───────────────────────────────────────────────────────
    toxin_units_by_region: Dict[str, int] = field(default_factory=dict)
    toxin_product: str = GENERIC_TOXIN_PRODUCT
    toxin_product_class: str = ProductClass.BOTULINUM_TOXIN.value
    filler_by_region: Dict[str, str] = field(default_factory=dict)
    filler_product: str = GENERIC_FILLER_PRODUCT
    bioestimulator: BioestimulatorPlan = field(default_factory=BioestimulatorPlan)

    # ── Skin management ───────────────────────────────────────────────────
    skin_care: SkinCarePlan = field(default_factory=SkinCarePlan)
    technologies: TechnologyPlan = field(default_factory=TechnologyPlan)

    # ── Safety ────────────────────────────────────────────────────────────
    alerts: List[str] = field(default_factory=list)
    contraindications: List[str] = field(default_factory=list)
    safety_score: int = 100
    rationale: str = BASELINE_RATIONALE

    # Treatment → expected recovery, only for indicated treatments
    downtime: Dict[str, str] = field(default_factory=dict)

    # Set only by the gestational short-circuit
    blocked: bool = False

    def to_dict(self) -> dict:
        return {
            "toxinUnitsByRegion": dict(self.toxin_units_by_region),
            "toxinProduct": self.toxin_product,
            "fillerByRegion": dict(self.filler_by_region),
            "fillerProduct": self.filler_product,
            "bioestimulator": self.bioestimulator.to_dict(),
            "skinCare": self.skin_care.to_dict(),
            "technologies": self.technologies.to_dict(),
            "alerts": list(self.alerts),
            "contraindications": list(self.contraindications),
            "rationale": self.rationale,
            "safetyScore": self.safety_score,
            "downtime": dict(self.downtime),
            "blocked": self.blocked,
        }
