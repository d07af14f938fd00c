"""
Calculations API - FastAPI router for trip cost and rent calculations.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from ..engine import PricingEngine, ValidationError, TripCostInput, RentCalculationInput
from ..services.calculation_service import CalculationService, CalculationNotFound
from .state import get_engine, get_calculation_service

router = APIRouter(prefix="/api/calculations", tags=["calculations"])


# Pydantic models for API
# Range checks are left to the engine. Type errors caught here are reshaped
# to the engine's {field, reason} body by the handler in api.main.

class TripCostCreate(BaseModel):
    """Request model for a trip cost."""
    inquiry_id: Optional[str] = None
    distance_km: Optional[Decimal] = None
    toll_charges: Optional[Decimal] = None
    fuel_cost: Optional[Decimal] = None
    operator_cost: Optional[Decimal] = None
    maintenance_cost: Optional[Decimal] = None
    additional_costs: Optional[Decimal] = None


class TripCostUpdate(BaseModel):
    """Request model for editing a stored trip cost."""
    inquiry_id: Optional[str] = None
    distance_km: Optional[Decimal] = None
    toll_charges: Optional[Decimal] = None
    fuel_cost: Optional[Decimal] = None
    operator_cost: Optional[Decimal] = None
    maintenance_cost: Optional[Decimal] = None
    additional_costs: Optional[Decimal] = None


class RentCreate(BaseModel):
    """Request model for a rent calculation. Defaults match the blank form."""
    order_type: Optional[str] = None
    machine_type: Optional[str] = None
    hours_per_day: Decimal = Decimal('0')
    day_night: str = 'day'
    shift: str = 'single'
    sunday_working: str = 'no'
    food_resource_count: Decimal = Decimal('0')
    food_cost_per_resource: Decimal = Decimal('0')
    accommodation_resource_count: Decimal = Decimal('0')
    accommodation_cost_per_resource: Decimal = Decimal('0')
    usage_profile: str = 'light'
    site_distance_km: Decimal = Decimal('0')
    trailer_cost: Decimal = Decimal('0')
    mob_demob_relaxation: Decimal = Decimal('0')
    deal_type: str = 'no_advance'
    deal_extra_charge: Decimal = Decimal('0')
    gst_billing: str = 'no_gst'
    risk_factor: str = 'low'
    incidental_charges: Decimal = Decimal('0')
    other_factor_type: str = 'none'
    other_factor_charges: Decimal = Decimal('0')
    contract_days: int = 1


class RentUpdate(BaseModel):
    """Request model for editing a stored rent calculation."""
    order_type: Optional[str] = None
    machine_type: Optional[str] = None
    hours_per_day: Optional[Decimal] = None
    day_night: Optional[str] = None
    shift: Optional[str] = None
    sunday_working: Optional[str] = None
    food_resource_count: Optional[Decimal] = None
    food_cost_per_resource: Optional[Decimal] = None
    accommodation_resource_count: Optional[Decimal] = None
    accommodation_cost_per_resource: Optional[Decimal] = None
    usage_profile: Optional[str] = None
    site_distance_km: Optional[Decimal] = None
    trailer_cost: Optional[Decimal] = None
    mob_demob_relaxation: Optional[Decimal] = None
    deal_type: Optional[str] = None
    deal_extra_charge: Optional[Decimal] = None
    gst_billing: Optional[str] = None
    risk_factor: Optional[str] = None
    incidental_charges: Optional[Decimal] = None
    other_factor_type: Optional[str] = None
    other_factor_charges: Optional[Decimal] = None
    contract_days: Optional[int] = None


def _invalid(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": e.field, "reason": e.reason})


def _not_found(e: CalculationNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


# Quotes (compute only, nothing stored)

@router.post("/trip-costs/quote")
async def quote_trip_cost(data: TripCostCreate, engine: PricingEngine = Depends(get_engine)):
    """Compute a trip cost without saving it."""
    try:
        result = engine.calculate_trip_cost(TripCostInput.from_record(data.model_dump()))
    except ValidationError as e:
        raise _invalid(e)
    return jsonable_encoder(result)


@router.post("/rent/quote")
async def quote_rent(data: RentCreate, engine: PricingEngine = Depends(get_engine)):
    """Compute a rent breakdown without saving it."""
    try:
        result = engine.calculate_rent(RentCalculationInput.from_record(data.model_dump()))
    except ValidationError as e:
        raise _invalid(e)
    return jsonable_encoder(result)


# Trip costs

@router.get("/trip-costs")
async def list_trip_costs(service: CalculationService = Depends(get_calculation_service)):
    """List all stored trip costs."""
    return jsonable_encoder(service.list_trip_costs())


@router.post("/trip-costs", status_code=201)
async def create_trip_cost(data: TripCostCreate, service: CalculationService = Depends(get_calculation_service)):
    """Compute and store a trip cost."""
    try:
        record = service.create_trip_cost(
            TripCostInput.from_record(data.model_dump()),
            inquiry_id=data.inquiry_id,
        )
    except ValidationError as e:
        raise _invalid(e)
    return jsonable_encoder(record)


@router.get("/trip-costs/{calculation_id}")
async def get_trip_cost(calculation_id: str, service: CalculationService = Depends(get_calculation_service)):
    try:
        return jsonable_encoder(service.get_trip_cost(calculation_id))
    except CalculationNotFound as e:
        raise _not_found(e)


@router.put("/trip-costs/{calculation_id}")
async def update_trip_cost(
    calculation_id: str,
    updates: TripCostUpdate,
    service: CalculationService = Depends(get_calculation_service),
):
    """Edit a stored trip cost; the total is recomputed from the edited input."""
    try:
        record = service.update_trip_cost(calculation_id, updates.model_dump(exclude_unset=True))
    except CalculationNotFound as e:
        raise _not_found(e)
    except ValidationError as e:
        raise _invalid(e)
    return jsonable_encoder(record)


@router.delete("/trip-costs/{calculation_id}")
async def delete_trip_cost(calculation_id: str, service: CalculationService = Depends(get_calculation_service)):
    try:
        service.delete_trip_cost(calculation_id)
    except CalculationNotFound as e:
        raise _not_found(e)
    return {"success": True, "message": f"Trip cost '{calculation_id}' deleted"}


# Rent calculations

@router.get("/rent")
async def list_rent_calculations(service: CalculationService = Depends(get_calculation_service)):
    """List all stored rent calculations."""
    return jsonable_encoder(service.list_rent_calculations())


@router.post("/rent", status_code=201)
async def create_rent_calculation(data: RentCreate, service: CalculationService = Depends(get_calculation_service)):
    """Compute and store a rent calculation."""
    try:
        record = service.create_rent_calculation(RentCalculationInput.from_record(data.model_dump()))
    except ValidationError as e:
        raise _invalid(e)
    return jsonable_encoder(record)


@router.get("/rent/{calculation_id}")
async def get_rent_calculation(calculation_id: str, service: CalculationService = Depends(get_calculation_service)):
    try:
        return jsonable_encoder(service.get_rent_calculation(calculation_id))
    except CalculationNotFound as e:
        raise _not_found(e)


@router.put("/rent/{calculation_id}")
async def update_rent_calculation(
    calculation_id: str,
    updates: RentUpdate,
    service: CalculationService = Depends(get_calculation_service),
):
    """Edit a stored rent calculation; every H-term is recomputed."""
    try:
        record = service.update_rent_calculation(calculation_id, updates.model_dump(exclude_unset=True))
    except CalculationNotFound as e:
        raise _not_found(e)
    except ValidationError as e:
        raise _invalid(e)
    return jsonable_encoder(record)


@router.delete("/rent/{calculation_id}")
async def delete_rent_calculation(calculation_id: str, service: CalculationService = Depends(get_calculation_service)):
    try:
        service.delete_rent_calculation(calculation_id)
    except CalculationNotFound as e:
        raise _not_found(e)
    return {"success": True, "message": f"Rent calculation '{calculation_id}' deleted"}


@router.get("/stats")
async def get_stats(service: CalculationService = Depends(get_calculation_service)):
    """Get calculation statistics."""
    return jsonable_encoder(service.get_stats())
