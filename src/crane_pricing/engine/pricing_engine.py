"""
Pricing Engine - entry point binding settings and the machine rate table
to the trip cost and rent calculators.

The calculators themselves are pure functions; this class only owns the
rate table so callers do not reload it on every request.
"""
import logging
from decimal import Decimal
from typing import Optional

from ..config.settings import get_settings, Settings
from .models import TripCostInput, TripCostResult, RentCalculationInput, RentCalculationResult
from .rate_table import MachineRateTable
from .rent_calculator import compute_rent
from .trip_cost import compute_trip_cost

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Core pricing engine.

    Resolution order for a rent request:
    1. Validate every input field
    2. Resolve H2 from the rate table, falling back to 'default'
    3. Compute H3..H11 and the pre-tax total
    4. Apply GST when the request is GST-billed
    """

    def __init__(self, settings: Optional[Settings] = None, rate_table: Optional[MachineRateTable] = None):
        """Initialize engine with settings and the machine rate table."""
        self.settings = settings or get_settings()
        if rate_table is None:
            rate_table = MachineRateTable.from_csv(self.settings.machine_rates_csv)
        self.rate_table = rate_table
        logger.info("Loaded %d machine rates", len(self.rate_table))

    def reload_data(self):
        """Reload the machine rate table from disk."""
        self.rate_table = MachineRateTable.from_csv(self.settings.machine_rates_csv)
        logger.info("Reloaded %d machine rates", len(self.rate_table))

    def machine_rates(self) -> dict[str, Decimal]:
        """Selectable machine types and their base rates."""
        return self.rate_table.machine_types()

    def calculate_trip_cost(self, trip: TripCostInput) -> TripCostResult:
        return compute_trip_cost(trip)

    def calculate_rent(self, rent: RentCalculationInput) -> RentCalculationResult:
        """Calculate rent with full traceability against the loaded rate table."""
        return compute_rent(rent, self.rate_table)
