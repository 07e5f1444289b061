"""
API Request / Response Models for protocol evaluation.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AnamnesisRequest(BaseModel):
    """Anamnesis as captured by the clinic. Free text is normalised server-side."""
    age: int = Field(..., ge=0, le=120)
    sex: str = "female"
    complaints: List[str] = Field(default_factory=list)
    skin_phototype: Optional[str] = None
    skin_biotype: Optional[str] = None
    sagging: Optional[str] = None
    pregnant: bool = False
    lactating: bool = False
    isotretinoin_use: bool = False
    sun_exposure: Optional[str] = None
    melasma: bool = False
    keloid_history: bool = False
    allergies: List[str] = Field(default_factory=list)
    acne: bool = False
    sensitive_skin: bool = False
    medications: List[str] = Field(default_factory=list)
    chronic_conditions: List[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {"example": {
            "age": 50, "sex": "male", "complaints": ["wrinkles", "dark circles"],
            "skin_phototype": "V", "skin_biotype": "oily", "sagging": "moderate",
            "sun_exposure": "high", "melasma": True, "allergies": ["egg"],
        }}
    }


class InventoryItemInput(BaseModel):
    name: str = Field(..., min_length=1)
    product_class: str      # checked by InventoryItem.from_dict
    brand: str = ""
    quantity: int = Field(0, ge=0)


class InventoryEvaluationRequest(BaseModel):
    anamnesis: AnamnesisRequest
    inventory: List[InventoryItemInput] = Field(default_factory=list)


class BioestimulatorResponse(BaseModel):
    product: str
    sessionCount: int
    interval: str


class SkinCareResponse(BaseModel):
    cleaningCadence: str
    peelIndication: str
    microneedlingIndication: str
    mesotherapyIndication: str


class TechnologiesResponse(BaseModel):
    laser: str
    radiofrequency: str
    other: str


class TreatmentPlanResponse(BaseModel):
    toxinUnitsByRegion: Dict[str, int]
    toxinProduct: str
    fillerByRegion: Dict[str, str]
    fillerProduct: str
    bioestimulator: BioestimulatorResponse
    skinCare: SkinCareResponse
    technologies: TechnologiesResponse
    alerts: List[str]
    contraindications: List[str]
    rationale: str
    safetyScore: int = Field(..., ge=0, le=100)
    downtime: Dict[str, str]
    blocked: bool


class DosingPlanResponse(BaseModel):
    toxinUnitsByRegion: Dict[str, int]
    toxinProduct: str
    fillerByRegion: Dict[str, str]
    fillerProduct: str
    bioestimulator: BioestimulatorResponse
    alerts: List[str]
    contraindications: List[str]
    rationale: str
    safetyScore: int = Field(..., ge=0, le=100)
    blocked: bool


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    rules: List[str] = Field(default_factory=list)
