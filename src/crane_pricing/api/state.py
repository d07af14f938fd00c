"""
Shared engine and service instances for the API.

Built lazily on first use so importing the app does not touch the disk.
Tests swap them out through app.dependency_overrides.
"""
from functools import lru_cache

from ..config.logging import setup_logging
from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.calculation_service import CalculationService


@lru_cache(maxsize=None)
def get_engine() -> PricingEngine:
    settings = get_settings()
    setup_logging(settings.log_level)
    return PricingEngine(settings)


@lru_cache(maxsize=None)
def get_calculation_service() -> CalculationService:
    return CalculationService.from_settings(get_engine())
