# domain/errors.py


class UnitConversionError(ValueError):
    """Raised when a quantity cannot be converted between two units."""


class EmptySaleError(ValueError):
    """Raised when a sale is built from a working list with no line items."""
