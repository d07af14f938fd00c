"""
HTTP API tests against a service writing to a temporary directory.
"""
import sys
import os

import pytest
from fastapi.testclient import TestClient

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from crane_pricing.api.main import app
from crane_pricing.api.state import get_engine, get_calculation_service
from crane_pricing.config.settings import Settings
from crane_pricing.engine import PricingEngine
from crane_pricing.services.calculation_service import CalculationService


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.delenv('CRANE_PRICING_RATES_CSV', raising=False)
    monkeypatch.setenv('CRANE_PRICING_DATA_DIR', str(tmp_path))
    engine = PricingEngine(Settings.load(project_root=tmp_path))
    service = CalculationService.from_settings(engine)

    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_calculation_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


TRIP = {
    "inquiry_id": "INQ-1",
    "distance_km": 120,
    "toll_charges": 450,
    "fuel_cost": 3200,
    "operator_cost": 1500,
    "maintenance_cost": 800,
    "additional_costs": 250,
}

RENT = {
    "order_type": "large",
    "machine_type": "crane_model_a",
    "hours_per_day": 0,
    "shift": "single",
    "contract_days": 60,
    "usage_profile": "light",
    "risk_factor": "low",
    "gst_billing": "no_gst",
}


def test_root(client):
    assert client.get("/").json()["status"] == "online"


def test_machines_listing_hides_default(client):
    data = client.get("/machines").json()
    assert data["machines"]["crane_model_a"] == 5000
    assert "default" not in data["machines"]
    assert data["default_rate"] == 6000


def test_rent_quote(client):
    response = client.post("/api/calculations/rent/quote", json=RENT)
    assert response.status_code == 200
    data = response.json()
    assert data["total_rent"] == 533500
    assert data["components"]["h3"] == 52
    assert data["components"]["h7"] == 273000
    assert data["rate_fallback"] is False
    assert client.get("/api/calculations/rent").json() == []


def test_rent_quote_validation_error_names_field(client):
    response = client.post("/api/calculations/rent/quote", json={**RENT, "risk_factor": "extreme"})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "risk_factor"


def test_rent_quote_requires_machine_type(client):
    payload = {k: v for k, v in RENT.items() if k != "machine_type"}
    response = client.post("/api/calculations/rent/quote", json=payload)
    assert response.status_code == 422
    assert response.json()["detail"] == {"field": "machine_type", "reason": "is required"}


@pytest.mark.parametrize("field,value", [
    ("contract_days", 1.5),
    ("hours_per_day", "abc"),
    ("risk_factor", 5),
])
def test_rent_quote_type_error_names_field(client, field, value):
    response = client.post("/api/calculations/rent/quote", json={**RENT, field: value})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["field"] == field
    assert detail["reason"]


def test_trip_cost_type_error_names_field(client):
    response = client.post("/api/calculations/trip-costs/quote", json={**TRIP, "distance_km": "x"})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "distance_km"


def test_trip_cost_quote(client):
    response = client.post("/api/calculations/trip-costs/quote", json=TRIP)
    assert response.status_code == 200
    assert response.json()["total_cost"] == 2 * 120 + 450 + 3200 + 1500 + 800 + 250


def test_trip_cost_negative_field(client):
    response = client.post("/api/calculations/trip-costs/quote", json={**TRIP, "fuel_cost": -1})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "fuel_cost"


def test_trip_cost_lifecycle(client):
    created = client.post("/api/calculations/trip-costs", json=TRIP)
    assert created.status_code == 201
    record = created.json()
    calc_id = record["id"]
    assert record["inquiry_id"] == "INQ-1"
    assert record["result"]["total_cost"] == 6440

    updated = client.put(f"/api/calculations/trip-costs/{calc_id}", json={"toll_charges": 0})
    assert updated.status_code == 200
    assert updated.json()["result"]["total_cost"] == 5990
    assert updated.json()["inquiry_id"] == "INQ-1"

    fetched = client.get(f"/api/calculations/trip-costs/{calc_id}").json()
    assert fetched["result"]["total_cost"] == 5990

    assert client.delete(f"/api/calculations/trip-costs/{calc_id}").json()["success"] is True
    assert client.get(f"/api/calculations/trip-costs/{calc_id}").status_code == 404


def test_rent_lifecycle_and_stats(client):
    created = client.post("/api/calculations/rent", json=RENT)
    assert created.status_code == 201
    calc_id = created.json()["id"]

    updated = client.put(f"/api/calculations/rent/{calc_id}", json={"gst_billing": "gst"})
    assert updated.status_code == 200
    assert updated.json()["result"]["total_rent"] == pytest.approx(629530)

    bad = client.put(f"/api/calculations/rent/{calc_id}", json={"contract_days": 0})
    assert bad.status_code == 422
    assert bad.json()["detail"]["field"] == "contract_days"

    listing = client.get("/api/calculations/rent").json()
    assert [r["id"] for r in listing] == [calc_id]

    stats = client.get("/api/calculations/stats").json()
    assert stats["rent_calculations"] == 1
    assert stats["gst_billed"] == 1

    status = client.get("/system/status").json()
    assert status["rent_calculations"] == 1
    assert status["machine_rates"] == 7


def test_unknown_ids_return_404(client):
    assert client.put("/api/calculations/rent/missing", json={"shift": "double"}).status_code == 404
    assert client.delete("/api/calculations/rent/missing").status_code == 404
    assert client.get("/api/calculations/trip-costs/missing").status_code == 404
