"""
Calculation Service - stores and recomputes trip cost and rent calculations.

The engine never touches storage; this service calls the engine and hands
each result to a repository. Updates rebuild the record from an edited input
instead of patching stored totals.
"""
import csv
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Optional

from ..engine.errors import ValidationError
from ..engine.models import TripCostInput, RentCalculationInput
from ..engine.pricing_engine import PricingEngine
from ..engine.rent_calculator import validate_rent_input
from ..engine.trip_cost import validate_trip_cost_input
from .records import StoredTripCost, StoredRentCalculation

logger = logging.getLogger(__name__)


class CalculationNotFound(LookupError):
    """No stored calculation with the given id."""

    def __init__(self, kind: str, calculation_id: str):
        self.kind = kind
        self.calculation_id = calculation_id
        super().__init__(f"{kind} '{calculation_id}' not found")


class CalculationRepository(ABC):
    """Storage for one kind of calculation record."""

    @abstractmethod
    def list(self) -> list:
        ...

    @abstractmethod
    def get(self, calculation_id: str):
        """Return the record or None."""

    @abstractmethod
    def save(self, record) -> None:
        """Insert the record, or replace the one with the same id."""

    @abstractmethod
    def delete(self, calculation_id: str) -> bool:
        """Remove the record. Returns False if it did not exist."""


class CsvCalculationRepository(CalculationRepository):
    """
    Repository backed by one CSV file, rewritten on every change.

    Rows that no longer parse or validate are logged and left out of
    listings, but are written back untouched so a bad edit is never lost.
    """

    def __init__(self, csv_path: Path, record_cls):
        self.csv_path = csv_path
        self.record_cls = record_cls

    def list(self) -> list:
        """List all readable records from CSV."""
        return [record for _, record in self._read() if record is not None]

    def get(self, calculation_id: str):
        for record in self.list():
            if record.id == calculation_id:
                return record
        return None

    def save(self, record) -> None:
        rows = [row for row, _ in self._read()]
        for i, row in enumerate(rows):
            if row['id'] == record.id:
                rows[i] = record.to_csv_row()
                break
        else:
            rows.append(record.to_csv_row())
        self._write(rows)

    def delete(self, calculation_id: str) -> bool:
        rows = [row for row, _ in self._read()]
        remaining = [row for row in rows if row['id'] != calculation_id]
        if len(remaining) == len(rows):
            return False
        self._write(remaining)
        return True

    def _read(self) -> list:
        """Raw rows paired with their parsed record, or None when unreadable."""
        pairs = []
        if not self.csv_path.exists():
            return pairs

        with open(self.csv_path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not row.get('id'):
                    continue
                try:
                    record = self.record_cls.from_csv_row(row)
                except (ValueError, ArithmeticError, TypeError, KeyError) as e:
                    logger.warning("Skipping unreadable row %s in %s: %s", row['id'], self.csv_path, e)
                    record = None
                pairs.append((row, record))

        return pairs

    def _write(self, rows: list):
        """Write rows back to CSV."""
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.csv_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.record_cls.CSV_COLUMNS, extrasaction='ignore')
            writer.writeheader()
            for row in rows:
                writer.writerow(row)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


def _new_id() -> str:
    return uuid.uuid4().hex


def _apply_changes(current, changes: dict):
    """Return a copy of a frozen input with the given fields replaced."""
    for key in changes:
        if key not in current.__dataclass_fields__:
            raise ValidationError(key, "is not an input field")
    return replace(current, **changes)


class CalculationService:
    """Service for computing and storing calculations."""

    def __init__(
        self,
        engine: PricingEngine,
        trip_repository: CalculationRepository,
        rent_repository: CalculationRepository,
    ):
        self.engine = engine
        self.trip_repository = trip_repository
        self.rent_repository = rent_repository

    @classmethod
    def from_settings(cls, engine: PricingEngine) -> 'CalculationService':
        """Build a service storing CSVs where the engine's settings point."""
        settings = engine.settings
        return cls(
            engine=engine,
            trip_repository=CsvCalculationRepository(settings.trip_costs_csv, StoredTripCost),
            rent_repository=CsvCalculationRepository(settings.rent_calculations_csv, StoredRentCalculation),
        )

    # -- Trip costs ---------------------------------------------------------

    def list_trip_costs(self) -> list[StoredTripCost]:
        return self.trip_repository.list()

    def get_trip_cost(self, calculation_id: str) -> StoredTripCost:
        record = self.trip_repository.get(calculation_id)
        if record is None:
            raise CalculationNotFound("Trip cost", calculation_id)
        return record

    def create_trip_cost(self, trip: TripCostInput, inquiry_id: Optional[str] = None) -> StoredTripCost:
        """Compute and store a new trip cost."""
        record = self._build_trip_cost(trip, _new_id(), _now(), inquiry_id)
        self.trip_repository.save(record)
        logger.info("Created trip cost %s: %s", record.id, record.total)
        return record

    def update_trip_cost(self, calculation_id: str, changes: dict) -> StoredTripCost:
        """
        Apply changes to the stored input and recompute.

        'inquiry_id' may be among the changes; every other key must be an
        input field.
        """
        existing = self.get_trip_cost(calculation_id)
        changes = dict(changes)
        inquiry_id = changes.pop('inquiry_id', existing.inquiry_id)

        record = self._build_trip_cost(
            _apply_changes(existing.input, changes), existing.id, existing.created_at, inquiry_id
        )
        self.trip_repository.save(record)
        logger.info("Recomputed trip cost %s: %s", record.id, record.total)
        return record

    def delete_trip_cost(self, calculation_id: str) -> bool:
        if not self.trip_repository.delete(calculation_id):
            raise CalculationNotFound("Trip cost", calculation_id)
        logger.info("Deleted trip cost %s", calculation_id)
        return True

    def _build_trip_cost(self, trip, calculation_id, created_at, inquiry_id) -> StoredTripCost:
        result = self.engine.calculate_trip_cost(trip)
        return StoredTripCost(
            id=calculation_id,
            inquiry_id=inquiry_id,
            input=validate_trip_cost_input(trip),
            result=result,
            created_at=created_at,
            updated_at=_now(),
        )

    # -- Rent ---------------------------------------------------------------

    def list_rent_calculations(self) -> list[StoredRentCalculation]:
        return self.rent_repository.list()

    def get_rent_calculation(self, calculation_id: str) -> StoredRentCalculation:
        record = self.rent_repository.get(calculation_id)
        if record is None:
            raise CalculationNotFound("Rent calculation", calculation_id)
        return record

    def create_rent_calculation(self, rent: RentCalculationInput) -> StoredRentCalculation:
        """Compute and store a new rent calculation."""
        record = self._build_rent(rent, _new_id(), _now())
        self.rent_repository.save(record)
        logger.info("Created rent calculation %s: %s", record.id, record.total)
        return record

    def update_rent_calculation(self, calculation_id: str, changes: dict) -> StoredRentCalculation:
        """Apply changes to the stored input and recompute from scratch."""
        existing = self.get_rent_calculation(calculation_id)
        record = self._build_rent(_apply_changes(existing.input, changes), existing.id, existing.created_at)
        self.rent_repository.save(record)
        logger.info("Recomputed rent calculation %s: %s", record.id, record.total)
        return record

    def delete_rent_calculation(self, calculation_id: str) -> bool:
        if not self.rent_repository.delete(calculation_id):
            raise CalculationNotFound("Rent calculation", calculation_id)
        logger.info("Deleted rent calculation %s", calculation_id)
        return True

    def _build_rent(self, rent, calculation_id, created_at) -> StoredRentCalculation:
        result = self.engine.calculate_rent(rent)
        return StoredRentCalculation(
            id=calculation_id,
            input=validate_rent_input(rent),
            result=result,
            created_at=created_at,
            updated_at=_now(),
        )

    # -- Reporting ----------------------------------------------------------

    def get_stats(self) -> dict:
        """Get statistics about stored calculations."""
        trips = self.list_trip_costs()
        rents = self.list_rent_calculations()

        by_machine = {}
        for r in rents:
            by_machine[r.input.machine_type] = by_machine.get(r.input.machine_type, 0) + 1

        return {
            'trip_costs': len(trips),
            'trip_cost_total': sum((t.total for t in trips), Decimal('0')),
            'rent_calculations': len(rents),
            'rent_total': sum((r.total for r in rents), Decimal('0')),
            'gst_billed': sum(1 for r in rents if r.input.gst_billing == 'gst'),
            'default_rate_used': sum(1 for r in rents if r.result.rate_fallback),
            'by_machine': by_machine,
        }
