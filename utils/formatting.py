# utils/formatting.py

from typing import Optional


def format_currency(amount: Optional[float], symbol: str = "৳", decimals: int = 2) -> str:
    """
    Format an amount with thousands separators and a currency symbol.
    Example: 1234567.5 -> "৳1,234,567.50"
    """
    if amount is None:
        return "-"
    return f"{symbol}{amount:,.{decimals}f}"


def format_percentage(value: float) -> str:
    return f"{value:.0f}%"


def format_quantity(quantity: float, unit: str) -> str:
    return f"{quantity:.2f} {unit}"
