"""
Skin Care and Technology Rules

Cleaning cadence, peel/microneedling/mesotherapy indications and
energy-based technology suggestions.

Isotretinoin is a hard block on both peels and microneedling, whatever the
biotype or complaint. Keloid history blocks microneedling.
"""
from __future__ import annotations

from .base import (
    CONTRAINDICATED,
    INDICATED,
    Complaint,
    PatientProfile,
    Sagging,
    SkinBiotype,
    SunExposure,
    TreatmentPlan,
)

# ── Cleaning and peels ───────────────────────────────────────────────────────
OILY_CLEANING        = "Every 21 to 28 days (sebum control)"
OILY_PEEL            = "Superficial salicylic or mandelic acid peel"
DRY_CLEANING         = "Every 45 days (hydration focus)"
DRY_MESOTHERAPY      = "Skinboosters (non-crosslinked hyaluronic acid)"

PEEL_BLOCKED_ISOTRETINOIN          = f"{CONTRAINDICATED} (isotretinoin use)"
MICRONEEDLING_BLOCKED_ISOTRETINOIN = f"{CONTRAINDICATED} (isotretinoin use)"
MICRONEEDLING_BLOCKED_KELOID       = f"{CONTRAINDICATED} (keloid history)"
MICRONEEDLING_INDICATED            = f"{INDICATED} (drug delivery with vitamin C / growth factors)"

MICRONEEDLING_COMPLAINTS = frozenset({Complaint.SCARS, Complaint.PORES})

# ── Technologies ─────────────────────────────────────────────────────────────
PIGMENT_LASER        = "Thulium-mode laser (Lavieen) or Q-switched laser"
PIGMENT_LED          = "Red/amber LED therapy (photobiomodulation)"
SUN_REBOUND_ALERT    = (
    "High sun exposure: melasma rebound risk. Tinted sunscreen is mandatory."
)

RADIOFREQUENCY       = "Microneedling or multipolar radiofrequency"
HIFU                 = "Microfocused ultrasound (HIFU) for SMAS"
HIFU_MIN_AGE         = 45


def rule_skin_care(profile: PatientProfile, plan: TreatmentPlan) -> None:
    care = plan.skin_care

    if profile.skin_biotype == SkinBiotype.OILY or profile.acne or profile.has(Complaint.ACNE):
        care.cleaning_cadence = OILY_CLEANING
        care.peel_indication = OILY_PEEL
    elif profile.skin_biotype == SkinBiotype.DRY:
        care.cleaning_cadence = DRY_CLEANING
        care.mesotherapy_indication = DRY_MESOTHERAPY

    if profile.isotretinoin_use:
        care.peel_indication = PEEL_BLOCKED_ISOTRETINOIN
        care.microneedling_indication = MICRONEEDLING_BLOCKED_ISOTRETINOIN
    elif profile.keloid_history:
        care.microneedling_indication = MICRONEEDLING_BLOCKED_KELOID
    elif profile.complaints & MICRONEEDLING_COMPLAINTS:
        care.microneedling_indication = MICRONEEDLING_INDICATED


def rule_technologies(profile: PatientProfile, plan: TreatmentPlan) -> None:
    tech = plan.technologies

    if profile.melasma or profile.has(Complaint.SPOTS):
        tech.laser = PIGMENT_LASER
        tech.add_other(PIGMENT_LED)
        if profile.sun_exposure == SunExposure.HIGH:
            plan.alerts.append(SUN_REBOUND_ALERT)

    if profile.has(Complaint.SAGGING) or profile.sagging == Sagging.SEVERE:
        tech.radiofrequency = RADIOFREQUENCY
        if profile.age > HIFU_MIN_AGE:
            tech.add_other(HIFU)
