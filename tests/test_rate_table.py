"""
Machine rate table loading and the PricingEngine that owns it.
"""
import sys
import os
from decimal import Decimal
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from crane_pricing.config.settings import Settings
from crane_pricing.engine import MachineRateTable, PricingEngine, RentCalculationInput, TripCostInput


def write_rates(path: Path, body: str) -> Path:
    path.write_text(body, encoding='utf-8')
    return path


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.delenv('CRANE_PRICING_RATES_CSV', raising=False)
    monkeypatch.setenv('CRANE_PRICING_DATA_DIR', str(tmp_path / 'store'))
    return Settings.load(project_root=tmp_path)


def test_packaged_rates_load(settings):
    table = MachineRateTable.from_csv(settings.machine_rates_csv)
    assert table['crane_model_a'] == 5000
    assert table['crane_model_c'] == 10000
    assert table['bulldozer_model_a'] == 8000
    assert table.default_rate == 6000


def test_lookup_reports_fallback():
    table = MachineRateTable({'crane_model_a': 5000, 'default': 6000})
    assert table.lookup('crane_model_a') == (Decimal('5000'), False)
    assert table.lookup('mystery') == (Decimal('6000'), True)
    assert table.lookup('default') == (Decimal('6000'), True)


def test_listed_zero_rate_does_not_fall_back():
    table = MachineRateTable({'yard_trolley': 0, 'default': 6000})
    assert table.lookup('yard_trolley') == (Decimal('0'), False)


def test_machine_types_hide_default():
    table = MachineRateTable({'crane_model_a': 5000, 'default': 6000})
    assert table.machine_types() == {'crane_model_a': Decimal('5000')}
    assert 'default' in table
    assert len(table) == 2


def test_missing_default_is_a_configuration_error():
    with pytest.raises(ValueError, match="default"):
        MachineRateTable({'crane_model_a': 5000})


@pytest.mark.parametrize("rate", ['-1', 'abc', 'nan'])
def test_bad_rates_rejected(rate):
    with pytest.raises(ValueError, match="crane_model_a"):
        MachineRateTable({'crane_model_a': rate, 'default': 6000})


def test_csv_with_blank_rows_and_spaces(tmp_path):
    path = write_rates(
        tmp_path / 'rates.csv',
        "machine_type , base_rate\n crane_x , 1234.5\n,\ndefault,6000\n",
    )
    table = MachineRateTable.from_csv(path)
    assert table['crane_x'] == Decimal('1234.5')
    assert len(table) == 2


def test_csv_missing_column(tmp_path):
    path = write_rates(tmp_path / 'rates.csv', "machine,rate\ndefault,6000\n")
    with pytest.raises(ValueError, match="base_rate"):
        MachineRateTable.from_csv(path)


def test_csv_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        MachineRateTable.from_csv(tmp_path / 'missing.csv')


def test_settings_from_environment(tmp_path, monkeypatch):
    rates = write_rates(tmp_path / 'rates.csv', "machine_type,base_rate\ndefault,100\n")
    monkeypatch.setenv('CRANE_PRICING_DATA_DIR', str(tmp_path / 'store'))
    monkeypatch.setenv('CRANE_PRICING_RATES_CSV', str(rates))
    monkeypatch.setenv('CRANE_PRICING_LOG_LEVEL', 'debug')

    settings = Settings.load(project_root=tmp_path)
    assert settings.trip_costs_csv == tmp_path / 'store' / 'trip_costs.csv'
    assert settings.rent_calculations_csv == tmp_path / 'store' / 'rent_calculations.csv'
    assert settings.machine_rates_csv == rates
    assert settings.log_level == 'DEBUG'


def test_engine_reload_picks_up_new_rates(tmp_path, settings):
    rates = write_rates(tmp_path / 'rates.csv', "machine_type,base_rate\ncrane_x,100\ndefault,50\n")
    settings.machine_rates_csv = rates
    engine = PricingEngine(settings)
    assert engine.machine_rates() == {'crane_x': Decimal('100')}

    write_rates(rates, "machine_type,base_rate\ncrane_x,200\ndefault,50\n")
    engine.reload_data()
    assert engine.machine_rates() == {'crane_x': Decimal('200')}


def test_engine_calculates_with_loaded_table(settings):
    engine = PricingEngine(settings)
    rent = engine.calculate_rent(RentCalculationInput(
        order_type='large', machine_type='crane_model_a', contract_days=60,
    ))
    assert rent.total_rent == 533500

    trip = engine.calculate_trip_cost(TripCostInput(
        distance_km=10, toll_charges=0, fuel_cost=0,
        operator_cost=0, maintenance_cost=0, additional_costs=0,
    ))
    assert trip.total_cost == 20
