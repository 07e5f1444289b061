"""
Injectable Dosing Rules

Botulinum toxin units, hyaluronic-acid filler volumes and bioestimulator
schedule. Thresholds are module-level constants so they can be reviewed
without hunting through logic.

Dose arithmetic: every regional dose is ceil(base * multiplier), computed
per region. Nothing is rounded before the multiplier is applied.
"""
from __future__ import annotations

import math

from .base import (
    BioestimulatorPlan,
    Complaint,
    FacialRegion,
    PatientProfile,
    ProductClass,
    Sagging,
    Sex,
    TreatmentPlan,
)

# ── Toxin ────────────────────────────────────────────────────────────────────
TOXIN_MIN_AGE            = 25     # indicated above this age without a complaint
MALE_MULTIPLIER          = 1.5    # stronger musculature
FEMALE_MULTIPLIER        = 1.0

GLABELLA_BASE_UNITS      = 20
GLABELLA_MATURE_UNITS    = 25
GLABELLA_MATURE_AGE      = 45

FRONTALIS_BASE_UNITS     = 10
FRONTALIS_MATURE_UNITS   = 12
FRONTALIS_MATURE_AGE     = 50

ORBICULARIS_BASE_UNITS   = 12

TOXIN_COMPLAINTS = frozenset({Complaint.WRINKLES})

# ── Filler ───────────────────────────────────────────────────────────────────
FILLER_MIN_AGE           = 35
FILLER_COMPLAINTS        = frozenset({Complaint.DARK_CIRCLES, Complaint.NASOLABIAL, Complaint.LIPS})

MALAR_VOLUME             = "1.0ml to 2.0ml (midface support)"
TEAR_TROUGH_VOLUME       = "1.0ml (low-hygroscopicity hyaluronic acid, e.g. Redensity II)"
LIPS_VOLUME              = "1.0ml (refinement/hydration)"

# ── Bioestimulator ───────────────────────────────────────────────────────────
BIOESTIMULATOR_MIN_AGE   = 30
SEVERE_SAGGING_SESSIONS  = 3
DEFAULT_SESSIONS         = 2
BIOESTIMULATOR_INTERVAL  = "45 to 60 days"

CALCIUM_HYDROXYAPATITE_PRODUCT = "Radiesse (calcium hydroxyapatite)"
POLY_L_LACTIC_ACID_PRODUCT     = "Sculptra (poly-L-lactic acid)"
DARK_PHOTOTYPE_RATIONALE = " Calcium hydroxyapatite selected for safety in higher phototypes."


def dose(base_units: int, multiplier: float) -> int:
    """Units for one region: multiply first, then round up."""
    return math.ceil(base_units * multiplier)


def rule_toxin(profile: PatientProfile, plan: TreatmentPlan) -> None:
    if not (profile.age > TOXIN_MIN_AGE or profile.complaints & TOXIN_COMPLAINTS):
        return

    multiplier = MALE_MULTIPLIER if profile.sex == Sex.MALE else FEMALE_MULTIPLIER
    glabella = GLABELLA_MATURE_UNITS if profile.age > GLABELLA_MATURE_AGE else GLABELLA_BASE_UNITS
    frontalis = FRONTALIS_MATURE_UNITS if profile.age > FRONTALIS_MATURE_AGE else FRONTALIS_BASE_UNITS

    plan.toxin_units_by_region = {
        FacialRegion.GLABELLA.value:    dose(glabella, multiplier),
        FacialRegion.FRONTALIS.value:   dose(frontalis, multiplier),
        FacialRegion.ORBICULARIS.value: dose(ORBICULARIS_BASE_UNITS, multiplier),
    }


def rule_filler(profile: PatientProfile, plan: TreatmentPlan) -> None:
    if not (profile.age > FILLER_MIN_AGE or profile.complaints & FILLER_COMPLAINTS):
        return

    # Volumising the malar region without laxity is not indicated
    if profile.sagging != Sagging.NONE_MILD:
        plan.filler_by_region[FacialRegion.MALAR.value] = MALAR_VOLUME

    if profile.has(Complaint.DARK_CIRCLES):
        plan.filler_by_region[FacialRegion.TEAR_TROUGH.value] = TEAR_TROUGH_VOLUME

    if profile.has(Complaint.LIPS):
        plan.filler_by_region[FacialRegion.LIPS.value] = LIPS_VOLUME


def rule_bioestimulator(profile: PatientProfile, plan: TreatmentPlan) -> None:
    if not (profile.age > BIOESTIMULATOR_MIN_AGE or profile.sagging != Sagging.NONE_MILD):
        return

    # Darker phototypes: less post-inflammatory hyperpigmentation with CaHA
    if profile.skin_phototype.is_dark:
        product, product_class = CALCIUM_HYDROXYAPATITE_PRODUCT, ProductClass.CALCIUM_HYDROXYAPATITE
        plan.rationale += DARK_PHOTOTYPE_RATIONALE
    else:
        product, product_class = POLY_L_LACTIC_ACID_PRODUCT, ProductClass.POLY_L_LACTIC_ACID

    plan.bioestimulator = BioestimulatorPlan(
        product=product,
        session_count=SEVERE_SAGGING_SESSIONS if profile.sagging == Sagging.SEVERE else DEFAULT_SESSIONS,
        interval=BIOESTIMULATOR_INTERVAL,
        product_class=product_class.value,
    )
