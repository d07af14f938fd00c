"""
Trip cost formula: distance is billed both ways, every other cost once.
"""
import sys
import os
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from crane_pricing.engine import TripCostInput, ValidationError, compute_trip_cost


def make_trip(**overrides):
    values = dict(
        distance_km=120,
        toll_charges=450,
        fuel_cost=3200,
        operator_cost=1500,
        maintenance_cost=800,
        additional_costs=250,
    )
    values.update(overrides)
    return TripCostInput(**values)


def test_total_doubles_distance():
    result = compute_trip_cost(make_trip())
    assert result.total_cost == Decimal(2 * 120 + 450 + 3200 + 1500 + 800 + 250)


def test_all_zero_trip_costs_nothing():
    result = compute_trip_cost(make_trip(
        distance_km=0, toll_charges=0, fuel_cost=0,
        operator_cost=0, maintenance_cost=0, additional_costs=0,
    ))
    assert result.total_cost == 0


def test_decimal_inputs_are_exact():
    """0.1 + 0.2 style sums must not drift."""
    result = compute_trip_cost(make_trip(
        distance_km=0.1, toll_charges=0.2, fuel_cost=0,
        operator_cost=0, maintenance_cost=0, additional_costs=0,
    ))
    assert result.total_cost == Decimal('0.4')


def test_string_amounts_are_accepted():
    result = compute_trip_cost(make_trip(distance_km='10', toll_charges='5.50'))
    assert result.total_cost == Decimal('20') + Decimal('5.50') + 3200 + 1500 + 800 + 250


@pytest.mark.parametrize("field", [
    'distance_km', 'toll_charges', 'fuel_cost',
    'operator_cost', 'maintenance_cost', 'additional_costs',
])
def test_negative_field_is_named(field):
    with pytest.raises(ValidationError) as exc:
        compute_trip_cost(make_trip(**{field: -1}))
    assert exc.value.field == field
    assert "non-negative" in exc.value.reason


def test_missing_field_is_named():
    with pytest.raises(ValidationError) as exc:
        compute_trip_cost(make_trip(fuel_cost=None))
    assert exc.value.field == 'fuel_cost'
    assert exc.value.reason == "is required"


@pytest.mark.parametrize("bad", [float('nan'), float('inf'), 'abc', True])
def test_non_numeric_values_rejected(bad):
    with pytest.raises(ValidationError) as exc:
        compute_trip_cost(make_trip(toll_charges=bad))
    assert exc.value.field == 'toll_charges'


def test_trace_ends_with_total():
    result = compute_trip_cost(make_trip())
    assert result.trace[0].step == "Distance"
    assert result.trace[-1].value == str(result.total_cost)
    assert "round trip" in result.get_trace_text()
