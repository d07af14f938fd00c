"""
Field validation helpers shared by both calculators.

Each helper returns the coerced value or raises ValidationError naming the field.
"""
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import ValidationError


def require_amount(field: str, value: Any) -> Decimal:
    """Coerce a money/quantity field to a finite, non-negative Decimal."""
    if value is None or value == '':
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number, not a boolean")

    try:
        # str() keeps float inputs like 0.1 at their printed value
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(field, f"must be a number, got {value!r}")

    if not amount.is_finite():
        raise ValidationError(field, "must be finite")
    if amount < 0:
        raise ValidationError(field, f"must be non-negative, got {amount}")
    return amount


def require_choice(field: str, value: Any, choices: tuple) -> str:
    """Check that an enum field is one of its declared members."""
    if value is None or value == '':
        raise ValidationError(field, "is required")
    if value not in choices:
        raise ValidationError(
            field, f"must be one of {', '.join(choices)}; got {value!r}"
        )
    return value


def require_positive_int(field: str, value: Any) -> int:
    """Coerce a whole-number field (e.g. contract days) to a positive int."""
    if value is None or value == '':
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be an integer, not a boolean")

    if isinstance(value, int):
        number = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(field, f"must be an integer, got {value!r}")
        if not parsed.is_finite() or parsed != parsed.to_integral_value():
            raise ValidationError(field, f"must be a whole number, got {value!r}")
        number = int(parsed)

    if number < 1:
        raise ValidationError(field, f"must be at least 1, got {number}")
    return number


def require_text(field: str, value: Any) -> str:
    """Check that a free-text key field is present."""
    if value is None or not str(value).strip():
        raise ValidationError(field, "is required")
    return str(value).strip()
