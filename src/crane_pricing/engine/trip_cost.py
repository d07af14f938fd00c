"""
Trip Cost Calculator - round-trip cost of moving a machine to site.
"""
import logging

from .models import TripCostInput, TripCostResult, TRIP_COST_FIELDS
from .tariffs import ROUND_TRIP_FACTOR
from .validation import require_amount

logger = logging.getLogger(__name__)


def validate_trip_cost_input(trip: TripCostInput) -> TripCostInput:
    """
    Validate every field and return a copy with amounts coerced to Decimal.

    Raises:
        ValidationError: naming the first missing, negative or non-finite field.
    """
    return TripCostInput(**{name: require_amount(name, getattr(trip, name)) for name in TRIP_COST_FIELDS})


def compute_trip_cost(trip: TripCostInput) -> TripCostResult:
    """
    Compute the total trip cost.

    total = 2 × distance_km + tolls + fuel + operator + maintenance + additional
    """
    trip = validate_trip_cost_input(trip)

    distance_charge = ROUND_TRIP_FACTOR * trip.distance_km
    total = (
        distance_charge
        + trip.toll_charges
        + trip.fuel_cost
        + trip.operator_cost
        + trip.maintenance_cost
        + trip.additional_costs
    )

    result = TripCostResult(total_cost=total)
    result.add_trace("Distance", f"{trip.distance_km} km × {ROUND_TRIP_FACTOR} (round trip)", str(distance_charge))
    for name in TRIP_COST_FIELDS[1:]:
        result.add_trace("Cost", name.replace('_', ' ').capitalize(), str(getattr(trip, name)))
    result.add_trace("Total", "Trip cost", str(total))

    logger.debug("Trip cost computed: %s", total)
    return result
