"""
Stored calculation records.

One immutable record per calculation: the input fields, the computed
totals and breakdown, an id and timestamps. Each entity maps to and from
a flat CSV row field by field.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..engine.models import (
    TripCostInput, TripCostResult, TRIP_COST_FIELDS,
    RentCalculationInput, RentCalculationResult, RentComponents,
)
from ..engine.rent_calculator import validate_rent_input
from ..engine.trip_cost import validate_trip_cost_input


RENT_INPUT_FIELDS = tuple(RentCalculationInput.__dataclass_fields__)

RENT_COMPONENT_COLUMNS = (
    'h2_value', 'h3_value', 'h4_value', 'h5_value', 'working_cost', 'elongation',
    'h7_value', 'h8_value', 'h9_value', 'h10_value', 'h11_value',
)


@dataclass(frozen=True)
class StoredTripCost:
    """A persisted trip cost calculation."""
    id: str
    created_at: str
    updated_at: str
    input: TripCostInput
    result: TripCostResult
    inquiry_id: Optional[str] = None

    CSV_COLUMNS = ('id', 'inquiry_id', *TRIP_COST_FIELDS, 'total_cost', 'created_at', 'updated_at')

    @property
    def total(self) -> Decimal:
        return self.result.total_cost

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        return {
            'id': self.id,
            'inquiry_id': self.inquiry_id or '',
            **self.input.to_record(),
            'total_cost': str(self.result.total_cost),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'StoredTripCost':
        """Create StoredTripCost from CSV row."""
        return cls(
            id=row['id'],
            inquiry_id=row.get('inquiry_id') or None,
            input=validate_trip_cost_input(TripCostInput.from_record(row)),
            result=TripCostResult(total_cost=Decimal(row['total_cost'])),
            created_at=row.get('created_at', ''),
            updated_at=row.get('updated_at', ''),
        )


@dataclass(frozen=True)
class StoredRentCalculation:
    """A persisted rent calculation with its H-component breakdown."""
    id: str
    created_at: str
    updated_at: str
    input: RentCalculationInput
    result: RentCalculationResult

    CSV_COLUMNS = (
        'id', *RENT_INPUT_FIELDS, 'total_rent', 'pre_tax_total', 'gst_amount',
        'rate_fallback', *RENT_COMPONENT_COLUMNS, 'created_at', 'updated_at',
    )

    @property
    def total(self) -> Decimal:
        return self.result.total_rent

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        return {
            'id': self.id,
            **self.input.to_record(),
            'total_rent': str(self.result.total_rent),
            'pre_tax_total': str(self.result.pre_tax_total),
            'gst_amount': str(self.result.gst_amount),
            'rate_fallback': 'true' if self.result.rate_fallback else 'false',
            **self.result.components.to_record(),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_csv_row(cls, row: dict) -> 'StoredRentCalculation':
        """Create StoredRentCalculation from CSV row."""
        return cls(
            id=row['id'],
            input=validate_rent_input(RentCalculationInput.from_record(row)),
            result=RentCalculationResult(
                total_rent=Decimal(row['total_rent']),
                components=RentComponents.from_record(row),
                pre_tax_total=Decimal(row['pre_tax_total']),
                gst_amount=Decimal(row.get('gst_amount') or '0'),
                rate_fallback=row.get('rate_fallback', 'false').lower() == 'true',
            ),
            created_at=row.get('created_at', ''),
            updated_at=row.get('updated_at', ''),
        )
