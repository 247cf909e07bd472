"""
Custom exceptions for unit conversion.
"""


class ConversionError(Exception):
    """Base exception for conversion-related errors."""
    pass


class NoConversionPathError(ConversionError):
    """Raised when no chain of rules links two units."""

    def __init__(self, from_unit, to_unit, ingredient_id=None, message=None):
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.ingredient_id = ingredient_id
        if message is None:
            message = f"No conversion path found from {from_unit} to {to_unit}."
        super().__init__(message)


class InvalidConversionRuleError(ConversionError):
    """Raised when a conversion rule fails validation."""

    def __init__(self, message="Invalid conversion rule."):
        super().__init__(message)
