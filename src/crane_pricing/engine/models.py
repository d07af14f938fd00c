"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Inputs are frozen: an edit produces a new input via dataclasses.replace.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


ZERO = Decimal('0')


@dataclass(frozen=True)
class TraceStep:
    """A single step in the calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


class _Traceable:
    """Mixin for results that carry a trace and warnings."""

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning, skipping duplicates."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Trip cost
# ---------------------------------------------------------------------------

TRIP_COST_FIELDS = (
    'distance_km', 'toll_charges', 'fuel_cost',
    'operator_cost', 'maintenance_cost', 'additional_costs',
)


@dataclass(frozen=True)
class TripCostInput:
    """Costs of getting a machine to site and back."""
    distance_km: Decimal
    toll_charges: Decimal
    fuel_cost: Decimal
    operator_cost: Decimal
    maintenance_cost: Decimal
    additional_costs: Decimal

    def to_record(self) -> dict:
        return {
            'distance_km': str(self.distance_km),
            'toll_charges': str(self.toll_charges),
            'fuel_cost': str(self.fuel_cost),
            'operator_cost': str(self.operator_cost),
            'maintenance_cost': str(self.maintenance_cost),
            'additional_costs': str(self.additional_costs),
        }

    @classmethod
    def from_record(cls, record: dict) -> 'TripCostInput':
        """Build from a stored row or request payload. Values are validated later."""
        return cls(
            distance_km=record.get('distance_km'),
            toll_charges=record.get('toll_charges'),
            fuel_cost=record.get('fuel_cost'),
            operator_cost=record.get('operator_cost'),
            maintenance_cost=record.get('maintenance_cost'),
            additional_costs=record.get('additional_costs'),
        )


@dataclass
class TripCostResult(_Traceable):
    """Result of a trip cost calculation."""
    total_cost: Decimal
    trace: list[TraceStep] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Rent
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RentCalculationInput:
    """
    Parameters of a rental request.

    Fields grouped by the tariff heading they feed:
      H1  order_type, contract_days
      H2  machine_type
      H3  hours_per_day, shift (day_night and sunday_working are recorded only)
      H4  food / accommodation resources
      H5  usage_profile
      H6  site_distance_km, trailer_cost, mob_demob_relaxation (recorded only)
      H8  deal_type (recorded only), deal_extra_charge
      H9  risk_factor
      H10 incidental_charges
      H11 other_factor_type (recorded only), other_factor_charges
    """
    order_type: str
    machine_type: str
    hours_per_day: Decimal = ZERO
    day_night: str = 'day'
    shift: str = 'single'
    sunday_working: str = 'no'
    food_resource_count: Decimal = ZERO
    food_cost_per_resource: Decimal = ZERO
    accommodation_resource_count: Decimal = ZERO
    accommodation_cost_per_resource: Decimal = ZERO
    usage_profile: str = 'light'
    site_distance_km: Decimal = ZERO
    trailer_cost: Decimal = ZERO
    mob_demob_relaxation: Decimal = ZERO
    deal_type: str = 'no_advance'
    deal_extra_charge: Decimal = ZERO
    gst_billing: str = 'no_gst'
    risk_factor: str = 'low'
    incidental_charges: Decimal = ZERO
    other_factor_type: str = 'none'
    other_factor_charges: Decimal = ZERO
    contract_days: int = 1

    def to_record(self) -> dict:
        return {
            'order_type': self.order_type,
            'machine_type': self.machine_type,
            'hours_per_day': str(self.hours_per_day),
            'day_night': self.day_night,
            'shift': self.shift,
            'sunday_working': self.sunday_working,
            'food_resource_count': str(self.food_resource_count),
            'food_cost_per_resource': str(self.food_cost_per_resource),
            'accommodation_resource_count': str(self.accommodation_resource_count),
            'accommodation_cost_per_resource': str(self.accommodation_cost_per_resource),
            'usage_profile': self.usage_profile,
            'site_distance_km': str(self.site_distance_km),
            'trailer_cost': str(self.trailer_cost),
            'mob_demob_relaxation': str(self.mob_demob_relaxation),
            'deal_type': self.deal_type,
            'deal_extra_charge': str(self.deal_extra_charge),
            'gst_billing': self.gst_billing,
            'risk_factor': self.risk_factor,
            'incidental_charges': str(self.incidental_charges),
            'other_factor_type': self.other_factor_type,
            'other_factor_charges': str(self.other_factor_charges),
            'contract_days': str(self.contract_days),
        }

    @classmethod
    def from_record(cls, record: dict) -> 'RentCalculationInput':
        """
        Build from a stored row or request payload.

        Keys missing from the record take the form defaults; keys present
        with an empty value are kept so validation can report them.
        """
        return cls(
            order_type=record.get('order_type'),
            machine_type=record.get('machine_type'),
            hours_per_day=record.get('hours_per_day', ZERO),
            day_night=record.get('day_night', 'day'),
            shift=record.get('shift', 'single'),
            sunday_working=record.get('sunday_working', 'no'),
            food_resource_count=record.get('food_resource_count', ZERO),
            food_cost_per_resource=record.get('food_cost_per_resource', ZERO),
            accommodation_resource_count=record.get('accommodation_resource_count', ZERO),
            accommodation_cost_per_resource=record.get('accommodation_cost_per_resource', ZERO),
            usage_profile=record.get('usage_profile', 'light'),
            site_distance_km=record.get('site_distance_km', ZERO),
            trailer_cost=record.get('trailer_cost', ZERO),
            mob_demob_relaxation=record.get('mob_demob_relaxation', ZERO),
            deal_type=record.get('deal_type', 'no_advance'),
            deal_extra_charge=record.get('deal_extra_charge', ZERO),
            gst_billing=record.get('gst_billing', 'no_gst'),
            risk_factor=record.get('risk_factor', 'low'),
            incidental_charges=record.get('incidental_charges', ZERO),
            other_factor_type=record.get('other_factor_type', 'none'),
            other_factor_charges=record.get('other_factor_charges', ZERO),
            contract_days=record.get('contract_days', 1),
        )


@dataclass(frozen=True)
class RentComponents:
    """The named sub-components of the rent formula."""
    h2: Decimal
    h3: Decimal
    h4: Decimal
    h5: Decimal
    working_cost: Decimal
    elongation: Decimal
    h7: Decimal
    h8: Decimal
    h9: Decimal
    h10: Decimal
    h11: Decimal

    def to_record(self) -> dict:
        return {
            'h2_value': str(self.h2),
            'h3_value': str(self.h3),
            'h4_value': str(self.h4),
            'h5_value': str(self.h5),
            'working_cost': str(self.working_cost),
            'elongation': str(self.elongation),
            'h7_value': str(self.h7),
            'h8_value': str(self.h8),
            'h9_value': str(self.h9),
            'h10_value': str(self.h10),
            'h11_value': str(self.h11),
        }

    @classmethod
    def from_record(cls, record: dict) -> 'RentComponents':
        return cls(
            h2=Decimal(record['h2_value']),
            h3=Decimal(record['h3_value']),
            h4=Decimal(record['h4_value']),
            h5=Decimal(record['h5_value']),
            working_cost=Decimal(record['working_cost']),
            elongation=Decimal(record['elongation']),
            h7=Decimal(record['h7_value']),
            h8=Decimal(record['h8_value']),
            h9=Decimal(record['h9_value']),
            h10=Decimal(record['h10_value']),
            h11=Decimal(record['h11_value']),
        )


@dataclass
class RentCalculationResult(_Traceable):
    """Complete result of a rent calculation."""
    total_rent: Decimal
    components: RentComponents
    pre_tax_total: Decimal
    gst_amount: Decimal = ZERO
    rate_fallback: bool = False
    trace: list[TraceStep] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_legacy_dict(self) -> dict:
        """Flat dict in the shape the CRM screens display."""
        return {
            'Total Rent': float(self.total_rent),
            'H2': float(self.components.h2),
            'H3': float(self.components.h3),
            'H4': float(self.components.h4),
            'H5': float(self.components.h5),
            'P15 Working Cost': float(self.components.working_cost),
            'P16 Elongation': float(self.components.elongation),
            'H7': float(self.components.h7),
            'H8': float(self.components.h8),
            'H9': float(self.components.h9),
            'H10': float(self.components.h10),
            'H11': float(self.components.h11),
        }
