"""
Safety Rules

Gestational block, isotretinoin, allergy veto and the audit-flow warnings.
Each rule is pure: (PatientProfile, TreatmentPlan) -> None and touches only
the plan it is handed. All score changes go through deduct(), so the safety
score only ever decreases and never drops below zero.
"""
from __future__ import annotations

from .base import Allergen, PatientProfile, ProductClass, TreatmentPlan

# ── Score deductions ─────────────────────────────────────────────────────────
ISOTRETINOIN_PENALTY      = 40
ALBUMIN_ALLERGY_PENALTY   = 30
AUDIT_WARNING_PENALTY     = 15

# ── Messages ─────────────────────────────────────────────────────────────────
GESTATIONAL_CONTRAINDICATION = (
    "PREGNANT/LACTATING: absolute contraindication for injectables."
)
GESTATIONAL_RATIONALE = "Protocol blocked for gestational safety."

ISOTRETINOIN_ALERT = (
    "Isotretinoin use: risk of impaired healing. Peels and microneedling are prohibited."
)

ALBUMIN_CONTRAINDICATION = (
    "EGG/ALBUMIN ALLERGY: botulinum toxins containing albumin are prohibited. "
    "Use an albumin-free toxin."
)
ALBUMIN_FREE_TOXIN_PRODUCT = "Albumin-free botulinum toxin (incobotulinumtoxinA, e.g. Xeomin)"
ALBUMIN_RATIONALE = " Albumin-free toxin required by egg/albumin allergy."

IMMUNOSUPPRESSION_ALERT = (
    "Anti-inflammatory/corticosteroid use: reduced response to bioestimulators "
    "(lower efficacy expected)."
)
AUTOIMMUNE_ALERT = (
    "Active autoimmune disease: granuloma risk with fillers and bioestimulators."
)


def deduct(plan: TreatmentPlan, points: int) -> None:
    """Lower the safety score by `points`, clamped at 0."""
    plan.safety_score = max(0, plan.safety_score - points)


def rule_gestational_block(profile: PatientProfile, plan: TreatmentPlan) -> bool:
    """
    Absolute contraindication. Returns True when the protocol is blocked;
    the caller must stop evaluating further rules.
    """
    if not profile.gestational:
        return False

    plan.safety_score = 0
    plan.contraindications.append(GESTATIONAL_CONTRAINDICATION)
    plan.rationale = GESTATIONAL_RATIONALE
    plan.blocked = True
    return True


def rule_isotretinoin(profile: PatientProfile, plan: TreatmentPlan) -> None:
    """Skin fragility. Peel/microneedling blocks are applied in rules_skin."""
    if not profile.isotretinoin_use:
        return
    deduct(plan, ISOTRETINOIN_PENALTY)
    plan.alerts.append(ISOTRETINOIN_ALERT)


def rule_albumin_allergy(profile: PatientProfile, plan: TreatmentPlan) -> None:
    if Allergen.EGG_ALBUMIN not in profile.allergies:
        return
    plan.contraindications.append(ALBUMIN_CONTRAINDICATION)
    plan.toxin_product = ALBUMIN_FREE_TOXIN_PRODUCT
    plan.toxin_product_class = ProductClass.ALBUMIN_FREE_TOXIN.value
    plan.rationale += ALBUMIN_RATIONALE
    deduct(plan, ALBUMIN_ALLERGY_PENALTY)


def rule_audit_warnings(profile: PatientProfile, plan: TreatmentPlan) -> None:
    """Medication and chronic-condition warnings from the audit flow."""
    if profile.immunosuppressive_medication:
        plan.alerts.append(IMMUNOSUPPRESSION_ALERT)
        deduct(plan, AUDIT_WARNING_PENALTY)

    if profile.autoimmune_disease:
        plan.alerts.append(AUTOIMMUNE_ALERT)
        deduct(plan, AUDIT_WARNING_PENALTY)
