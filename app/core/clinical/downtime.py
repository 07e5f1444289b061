"""
Downtime Estimates

Expected recovery time for each treatment the plan actually indicates.
Darker phototypes need longer recovery after bioestimulators and
resurfacing (post-inflammatory hyperpigmentation), sensitive skin keeps
filler oedema longer.
"""
from __future__ import annotations

from .base import CONTRAINDICATED, NOT_INDICATED, INDICATED, PatientProfile, TreatmentPlan

TOXIN_DOWNTIME                  = "4h (no lying down or exercise)"
FILLER_DOWNTIME                 = "24 to 48h"
FILLER_DOWNTIME_SENSITIVE       = "72h (persistent oedema)"
BIOESTIMULATOR_DOWNTIME         = "48h (5-5-5 massage recommended)"
BIOESTIMULATOR_DOWNTIME_DARK    = "72h (monitor for hyperpigmentation)"
RESURFACING_DOWNTIME            = "4 to 6 days"
RESURFACING_DOWNTIME_DARK       = "7 to 10 days (prior skin priming required)"


def _recommended(indication: str) -> bool:
    return indication != NOT_INDICATED and not indication.startswith(CONTRAINDICATED)


def estimate_downtime(profile: PatientProfile, plan: TreatmentPlan) -> None:
    dark = profile.skin_phototype.is_dark
    resurfacing = RESURFACING_DOWNTIME_DARK if dark else RESURFACING_DOWNTIME

    if plan.toxin_units_by_region:
        plan.downtime["toxin"] = TOXIN_DOWNTIME

    if plan.filler_by_region:
        plan.downtime["filler"] = FILLER_DOWNTIME_SENSITIVE if profile.sensitive_skin else FILLER_DOWNTIME

    if plan.bioestimulator.session_count > 0:
        plan.downtime["bioestimulator"] = BIOESTIMULATOR_DOWNTIME_DARK if dark else BIOESTIMULATOR_DOWNTIME

    if _recommended(plan.skin_care.peel_indication):
        plan.downtime["peel"] = resurfacing

    if plan.skin_care.microneedling_indication.startswith(INDICATED):
        plan.downtime["microneedling"] = resurfacing
