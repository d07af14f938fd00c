"""Errors raised by the pricing engine."""


class ValidationError(ValueError):
    """An input field is missing, negative, non-finite or out of range."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
