"""
Pytest Configuration and Fixtures

Shared fixtures for protocol engine tests.
"""
import pytest
from pathlib import Path
import sys

# Add app to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.clinical import (
    ClinicalProtocolEngine,
    Complaint,
    PatientProfile,
    Phototype,
    Sagging,
    Sex,
)


@pytest.fixture
def engine() -> ClinicalProtocolEngine:
    return ClinicalProtocolEngine()


@pytest.fixture
def minimal_profile() -> PatientProfile:
    """Age 0, no complaints, no flags."""
    return PatientProfile(age=0)


@pytest.fixture
def mature_male_profile() -> PatientProfile:
    """50-year-old man complaining of wrinkles, no risk flags."""
    return PatientProfile(age=50, sex=Sex.MALE, complaints={Complaint.WRINKLES})


@pytest.fixture
def dark_severe_profile() -> PatientProfile:
    """40-year-old, phototype V with severe sagging."""
    return PatientProfile(age=40, skin_phototype=Phototype.V, sagging=Sagging.SEVERE)


@pytest.fixture
def anamnesis_payload() -> dict:
    """API payload in the shape of AnamnesisRequest."""
    return {
        "age": 50,
        "sex": "male",
        "complaints": ["wrinkles"],
        "skin_phototype": "III",
        "skin_biotype": "normal",
        "sagging": "mild",
    }
