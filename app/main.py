"""
Aesthetic Protocol Engine - FastAPI Application

API endpoints for:
- Protocol evaluation from an anamnesis (full plan and dosing view)
- Inventory-aware product substitution
- Health checks
"""
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.core.clinical import (
    ClinicalProtocolEngine,
    InventoryItem,
    apply_inventory,
    dosing_view,
    normalize_anamnesis,
)
from app.models import (
    AnamnesisRequest,
    DosingPlanResponse,
    HealthResponse,
    InventoryEvaluationRequest,
    TreatmentPlanResponse,
)
from app.utils import ProtocolEngineError, get_logger

logger = get_logger(__name__)

START_TIME = datetime.now()

_engine = ClinicalProtocolEngine()


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Deterministic dosing and safety recommendations from patient anamnesis",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ProtocolEngineError)
async def protocol_engine_error_handler(request: Request, exc: ProtocolEngineError):
    logger.warning(f"{request.url.path}: {exc.code} - {exc.message}")
    return JSONResponse(status_code=422, content=exc.to_dict())


def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        rules=_engine.registered_rules(),
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.post("/api/v1/protocols/evaluate", response_model=TreatmentPlanResponse, tags=["Protocols"])
async def evaluate_protocol(request: AnamnesisRequest):
    """
    Evaluate the full treatment protocol for one anamnesis.
    """
    plan = _engine.evaluate(normalize_anamnesis(request.model_dump()))
    logger.info(f"Protocol evaluated: {_engine.summarise(plan)}")
    return plan.to_dict()


@app.post("/api/v1/protocols/evaluate/dosing", response_model=DosingPlanResponse, tags=["Protocols"])
async def evaluate_dosing(request: AnamnesisRequest):
    """
    Injectables-only view (toxin, filler, bioestimulator and safety fields).
    """
    plan = _engine.evaluate(normalize_anamnesis(request.model_dump()))
    return dosing_view(plan)


@app.post("/api/v1/protocols/evaluate/inventory", response_model=TreatmentPlanResponse, tags=["Protocols"])
async def evaluate_with_inventory(request: InventoryEvaluationRequest):
    """
    Evaluate the protocol, then substitute generic product names with
    products in the clinic's stock.
    """
    plan = _engine.evaluate(normalize_anamnesis(request.anamnesis.model_dump()))
    items = [InventoryItem.from_dict(item.model_dump()) for item in request.inventory]
    return apply_inventory(plan, items).to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
