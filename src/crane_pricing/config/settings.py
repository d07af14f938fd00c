"""
Centralized settings and path configuration for the crane pricing tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


PACKAGE_DIR = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Installed without a checkout: keep data next to the working directory
    return Path.cwd()


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Reference data
    machine_rates_csv: Path

    # Calculation store
    trip_costs_csv: Path
    rent_calculations_csv: Path

    log_level: str = 'INFO'

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        data_dir = Path(os.environ.get('CRANE_PRICING_DATA_DIR', root / 'data'))
        rates_csv = Path(os.environ.get(
            'CRANE_PRICING_RATES_CSV',
            PACKAGE_DIR / 'data' / 'machine_rates.csv',
        ))

        return cls(
            project_root=root,
            data_dir=data_dir,
            machine_rates_csv=rates_csv,
            trip_costs_csv=data_dir / 'trip_costs.csv',
            rent_calculations_csv=data_dir / 'rent_calculations.csv',
            log_level=os.environ.get('CRANE_PRICING_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
