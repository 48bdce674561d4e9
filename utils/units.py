# utils/units.py

from domain.errors import UnitConversionError

UNITS = ("yards", "meters", "kg")

# Fixed factors; they are not exact reciprocals, so a round trip is slightly lossy.
METERS_TO_YARDS = 1.09361
YARDS_TO_METERS = 0.9144

_FACTORS = {
    ("meters", "yards"): METERS_TO_YARDS,
    ("yards", "meters"): YARDS_TO_METERS,
}


def convert_quantity(quantity: float, from_unit: str, to_unit: str) -> float:
    """
    Convert `quantity` from `from_unit` to `to_unit`.
    Example: convert_quantity(1, "meters", "yards") -> 1.09361
    """
    for unit in (from_unit, to_unit):
        if unit not in UNITS:
            raise UnitConversionError(f"Unknown unit: {unit}")

    if from_unit == to_unit:
        return quantity

    factor = _FACTORS.get((from_unit, to_unit))
    if factor is None:
        raise UnitConversionError(f"Cannot convert {from_unit} to {to_unit}")

    return quantity * factor
