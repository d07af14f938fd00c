from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crane_pricing import __version__
from crane_pricing.engine import PricingEngine
from crane_pricing.services.calculation_service import CalculationService
from crane_pricing.api.calculations_api import router as calculations_router
from crane_pricing.api.state import get_engine, get_calculation_service

app = FastAPI(
    title="Crane Pricing API",
    description="Trip cost and rent calculation backend for the crane rental CRM",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculations_router)


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the same {field, reason} shape as engine errors."""
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=422, content={"detail": {"field": "body", "reason": "is invalid"}})
    first = errors[0]
    loc = first.get("loc") or ("body",)
    return JSONResponse(
        status_code=422,
        content={"detail": {"field": str(loc[-1]), "reason": first.get("msg", "is invalid")}},
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Crane Pricing API Active"}


@app.get("/machines")
async def get_machines(engine: PricingEngine = Depends(get_engine)):
    """Machine types offered on the rent form, with base rates."""
    return jsonable_encoder({
        "machines": engine.machine_rates(),
        "default_rate": engine.rate_table.default_rate,
    })


@app.get("/system/status")
async def get_status(
    engine: PricingEngine = Depends(get_engine),
    service: CalculationService = Depends(get_calculation_service),
):
    return {
        "engine_active": True,
        "machine_rates": len(engine.rate_table),
        "trip_costs": len(service.list_trip_costs()),
        "rent_calculations": len(service.list_rent_calculations()),
    }
