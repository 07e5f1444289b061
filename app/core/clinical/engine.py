"""
Clinical Protocol Engine

Runs the ordered rule family against one PatientProfile and returns a fully
shaped TreatmentPlan. No I/O, no module-level mutable state: every call
builds its own plan, so evaluations can run concurrently without locks.

Usage:
    from app.core.clinical import ClinicalProtocolEngine, normalize_anamnesis

    engine = ClinicalProtocolEngine()
    plan = engine.evaluate(normalize_anamnesis(record))
    print(plan.safety_score, plan.toxin_units_by_region)

Rule order (later rules never undo earlier short-circuits):
    gestational block -> isotretinoin -> toxin -> filler -> bioestimulator
    -> skin care -> technologies -> allergy veto -> audit warnings -> downtime
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping, Any

from app.utils import get_logger
from .anamnesis import describe_profile, normalize_anamnesis
from .base import PatientProfile, TreatmentPlan
from .downtime import estimate_downtime
from .rules_injectables import rule_bioestimulator, rule_filler, rule_toxin
from .rules_safety import (
    rule_albumin_allergy,
    rule_audit_warnings,
    rule_gestational_block,
    rule_isotretinoin,
)
from .rules_skin import rule_skin_care, rule_technologies

logger = get_logger(__name__)

Rule = Callable[[PatientProfile, TreatmentPlan], None]

# ── Ordered rule registry (runs after the gestational short-circuit) ─────────
_RULES: tuple = (
    rule_isotretinoin,
    rule_toxin,
    rule_filler,
    rule_bioestimulator,
    rule_skin_care,
    rule_technologies,
    rule_albumin_allergy,
    rule_audit_warnings,
    estimate_downtime,
)

# Below this score the evaluation is logged as a warning
LOW_SAFETY_THRESHOLD = 50

# summarise() bands
HIGH_SAFETY_BAND     = 80
MODERATE_SAFETY_BAND = 40


def evaluate(profile: PatientProfile) -> TreatmentPlan:
    """
    Derive a treatment protocol from a normalised anamnesis.

    Total and deterministic for any PatientProfile: the same profile always
    yields an equal plan.
    """
    plan = TreatmentPlan()

    if rule_gestational_block(profile, plan):
        logger.info("ClinicalProtocolEngine: protocol blocked (pregnant/lactating)")
        return plan

    for rule in _RULES:
        rule(profile, plan)

    if plan.safety_score < LOW_SAFETY_THRESHOLD:
        logger.warning(
            f"ClinicalProtocolEngine: low safety score {plan.safety_score}, "
            f"{len(plan.contraindications)} contraindication(s), {len(plan.alerts)} alert(s)"
        )
    else:
        logger.debug(
            f"ClinicalProtocolEngine: {describe_profile(profile)} -> "
            f"score {plan.safety_score}, toxin regions {len(plan.toxin_units_by_region)}, "
            f"filler regions {len(plan.filler_by_region)}"
        )
    return plan


def dosing_view(plan: TreatmentPlan) -> Dict[str, Any]:
    """Injectables-only projection used by the dosing screen."""
    full = plan.to_dict()
    keys = (
        "toxinUnitsByRegion", "toxinProduct", "fillerByRegion", "fillerProduct", "bioestimulator",
        "alerts", "contraindications", "rationale", "safetyScore", "blocked",
    )
    return {key: full[key] for key in keys}


def planning_view(plan: TreatmentPlan) -> Dict[str, Any]:
    """Planning-screen projection: everything except recovery estimates."""
    full = plan.to_dict()
    full.pop("downtime")
    return full


class ClinicalProtocolEngine:
    """
    Thin object facade over evaluate().

    Stateless, safe to share between threads / concurrent requests.
    """

    def evaluate(self, profile: PatientProfile) -> TreatmentPlan:
        return evaluate(profile)

    def evaluate_record(self, record: Mapping[str, Any]) -> TreatmentPlan:
        """Normalise a raw anamnesis record, then evaluate it."""
        return evaluate(normalize_anamnesis(record))

    def evaluate_many(self, profiles: Iterable[PatientProfile]) -> List[TreatmentPlan]:
        return [evaluate(p) for p in profiles]

    @staticmethod
    def registered_rules() -> List[str]:
        """Rule names in evaluation order, starting with the gestational short-circuit."""
        return [rule_gestational_block.__name__] + [rule.__name__ for rule in _RULES]

    @staticmethod
    def summarise(plan: TreatmentPlan) -> Dict[str, Any]:
        """
        Compact summary for list views and audit logs.

        Example output:
        {
            "safety_score": 60,
            "safety_level": "moderate",
            "blocked": False,
            "alert_count": 1,
            "contraindication_count": 0,
            "indicated_treatments": ["toxin", "bioestimulator"]
        }
        """
        if plan.safety_score > HIGH_SAFETY_BAND:
            level = "high"
        elif plan.safety_score > MODERATE_SAFETY_BAND:
            level = "moderate"
        else:
            level = "critical"

        indicated = []
        if plan.toxin_units_by_region:
            indicated.append("toxin")
        if plan.filler_by_region:
            indicated.append("filler")
        if plan.bioestimulator.session_count > 0:
            indicated.append("bioestimulator")
        indicated.extend(t for t in ("peel", "microneedling") if t in plan.downtime)

        return {
            "safety_score":           plan.safety_score,
            "safety_level":           level,
            "blocked":                plan.blocked,
            "alert_count":            len(plan.alerts),
            "contraindication_count": len(plan.contraindications),
            "indicated_treatments":   indicated,
        }
