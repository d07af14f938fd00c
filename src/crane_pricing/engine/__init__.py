"""Engine subpackage - trip cost and rent calculation."""
from .errors import ValidationError
from .models import (
    TripCostInput, TripCostResult,
    RentCalculationInput, RentCalculationResult, RentComponents,
)
from .pricing_engine import PricingEngine
from .rate_table import MachineRateTable
from .rent_calculator import compute_rent
from .trip_cost import compute_trip_cost

__all__ = [
    'PricingEngine', 'MachineRateTable', 'ValidationError',
    'TripCostInput', 'TripCostResult', 'compute_trip_cost',
    'RentCalculationInput', 'RentCalculationResult', 'RentComponents', 'compute_rent',
]
