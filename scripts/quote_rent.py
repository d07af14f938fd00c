#!/usr/bin/env python
"""
Print the H2..H11 breakdown for a sample rent request.

Usage:
    python scripts/quote_rent.py [machine_type] [contract_days] [order_type]
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from crane_pricing.config.logging import setup_logging
from crane_pricing.engine import PricingEngine, RentCalculationInput, ValidationError


def main():
    setup_logging("DEBUG")
    args = sys.argv[1:]

    rent = RentCalculationInput(
        order_type=args[2] if len(args) > 2 else 'large',
        machine_type=args[0] if args else 'crane_model_a',
        contract_days=args[1] if len(args) > 1 else 60,
        usage_profile='light',
        risk_factor='low',
    )

    engine = PricingEngine()
    try:
        result = engine.calculate_rent(rent)
    except ValidationError as e:
        print(f"Invalid input - {e}")
        sys.exit(1)

    print(result.get_trace_text())
    print()
    for label, value in result.to_legacy_dict().items():
        print(f"  {label:<20} {value:>14,.2f}")
    for warning in result.warnings:
        print(f"  WARNING: {warning}")


if __name__ == "__main__":
    main()
