"""
Aesthetic Protocol Engine

Deterministic dosing and safety recommendations for aesthetic clinics.
"""
__version__ = "1.0.0"
