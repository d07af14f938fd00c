"""
Machine Rate Table - base daily/hourly rates per machine type (H2).

Loaded once from machine_rates.csv and read-only afterwards.
Unknown machine types resolve to the 'default' row instead of failing.
"""
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Union

import pandas as pd

from .tariffs import DEFAULT_MACHINE_KEY


class MachineRateTable:
    """Read-only mapping of machine type → base rate with a 'default' fallback."""

    def __init__(self, rates: Mapping[str, Union[Decimal, float, int, str]]):
        parsed = {}
        for machine_type, rate in rates.items():
            key = str(machine_type).strip()
            try:
                value = Decimal(str(rate).strip())
            except (InvalidOperation, ValueError):
                raise ValueError(f"Rate for machine type '{key}' is not a number: {rate!r}")
            if not value.is_finite() or value < 0:
                raise ValueError(f"Rate for machine type '{key}' must be a non-negative number, got {rate!r}")
            parsed[key] = value

        if DEFAULT_MACHINE_KEY not in parsed:
            raise ValueError(
                f"Machine rate table has no '{DEFAULT_MACHINE_KEY}' entry; "
                "unknown machine types could not be priced."
            )

        self._rates = MappingProxyType(parsed)

    @classmethod
    def from_csv(cls, path: Path) -> 'MachineRateTable':
        """Load rates from a CSV with machine_type and base_rate columns."""
        if not path.exists():
            raise FileNotFoundError(f"Machine rate table not found at {path}.")

        df = pd.read_csv(path, dtype=str).fillna('')
        df.columns = [c.strip() for c in df.columns]
        missing = {'machine_type', 'base_rate'} - set(df.columns)
        if missing:
            raise ValueError(f"Machine rate table {path} is missing columns: {', '.join(sorted(missing))}")

        df = df[df['machine_type'].str.strip() != '']
        return cls(dict(zip(df['machine_type'].str.strip(), df['base_rate'].str.strip())))

    def lookup(self, machine_type: str) -> tuple[Decimal, bool]:
        """
        Resolve the base rate for a machine type.

        Returns (rate, used_default). Only absent keys fall back; a
        machine listed with a zero rate is priced at zero.
        """
        key = str(machine_type).strip()
        if key in self._rates and key != DEFAULT_MACHINE_KEY:
            return self._rates[key], False
        return self._rates[DEFAULT_MACHINE_KEY], True

    def __len__(self) -> int:
        return len(self._rates)

    @property
    def default_rate(self) -> Decimal:
        return self._rates[DEFAULT_MACHINE_KEY]

    def machine_types(self) -> dict[str, Decimal]:
        """Selectable machine types and rates, without the fallback row."""
        return {k: v for k, v in self._rates.items() if k != DEFAULT_MACHINE_KEY}
