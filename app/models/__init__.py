"""Pydantic request / response models for the HTTP API."""
from .protocol import (
    AnamnesisRequest,
    InventoryItemInput,
    InventoryEvaluationRequest,
    TreatmentPlanResponse,
    DosingPlanResponse,
    HealthResponse,
)

__all__ = [
    "AnamnesisRequest",
    "InventoryItemInput",
    "InventoryEvaluationRequest",
    "TreatmentPlanResponse",
    "DosingPlanResponse",
    "HealthResponse",
]
