"""
Clinical Protocol Layer

Turns a patient's anamnesis into a dosing / safety protocol.

Usage:
    from app.core.clinical import ClinicalProtocolEngine, normalize_anamnesis

    engine = ClinicalProtocolEngine()
    plan = engine.evaluate(normalize_anamnesis(record))   # TreatmentPlan
"""
from .base import (
    Allergen,
    Complaint,
    FacialRegion,
    PatientProfile,
    Phototype,
    ProductClass,
    Sagging,
    Sex,
    SkinBiotype,
    SunExposure,
    TreatmentPlan,
)
from .anamnesis import normalize_anamnesis
from .engine import ClinicalProtocolEngine, evaluate, dosing_view, planning_view
from .inventory import InventoryItem, apply_inventory

__all__ = [
    "Allergen",
    "Complaint",
    "FacialRegion",
    "PatientProfile",
    "Phototype",
    "ProductClass",
    "Sagging",
    "Sex",
    "SkinBiotype",
    "SunExposure",
    "TreatmentPlan",
    "normalize_anamnesis",
    "ClinicalProtocolEngine",
    "evaluate",
    "dosing_view",
    "planning_view",
    "InventoryItem",
    "apply_inventory",
]
