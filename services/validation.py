# services/validation.py
import re
from typing import Any, Dict, List, Optional, Sequence

from utils.units import UNITS

NAME_PATTERN = re.compile(r"^[\w\s'&./()-]{2,80}$")


def _number(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_product(values: Dict[str, Any], category_ids: Sequence[str] = ()) -> List[str]:
    """
    Returns a list of error messages; an empty list means the product can be written.
    """
    errors = []

    name = (values.get("name") or "").strip()
    if len(name) < 2:
        errors.append("Product name must be at least 2 characters.")
    elif not NAME_PATTERN.match(name):
        errors.append("Product name may only contain letters, numbers, spaces and basic punctuation.")

    sku = (values.get("sku") or "").strip()
    if len(sku) < 3:
        errors.append("SKU must be at least 3 characters.")

    category_id = values.get("category_id")
    if not category_id:
        errors.append("Please select a category.")
    elif category_ids and category_id not in category_ids:
        errors.append("Selected category does not exist.")

    price = _number(values.get("price"))
    if price is None or price < 0:
        errors.append("Price cannot be negative.")

    cost_price = values.get("cost_price")
    if cost_price is not None and (_number(cost_price) is None or _number(cost_price) < 0):
        errors.append("Cost price cannot be negative.")

    stock = _number(values.get("stock"))
    if stock is None or stock < 0:
        errors.append("Stock must be a non-negative number.")

    if values.get("unit") not in UNITS:
        errors.append(f"Unit must be one of: {', '.join(UNITS)}.")

    return errors


def validate_category(values: Dict[str, Any], existing_names: Sequence[str] = ()) -> List[str]:
    name = (values.get("name") or "").strip()
    if not name:
        return ["Category name cannot be empty"]
    if name.lower() in {n.strip().lower() for n in existing_names}:
        return [f"Category '{name}' already exists"]
    return []


def validate_subcategory(values: Dict[str, Any], category_ids: Sequence[str] = ()) -> List[str]:
    errors = []
    parent = values.get("category_id")
    if not parent or not (values.get("name") or "").strip():
        errors.append("Parent category and subcategory name are required")
    elif category_ids and parent not in category_ids:
        errors.append("Selected parent category does not exist.")
    return errors


def validate_customer(customer_name: str, customer_phone: str) -> List[str]:
    errors = []
    if not (customer_name or "").strip():
        errors.append("Customer name is required.")
    if not (customer_phone or "").strip():
        errors.append("Customer phone is required.")
    elif not re.match(r"^\+?[\d\s-]{5,20}$", customer_phone.strip()):
        errors.append("Customer phone may only contain digits, spaces, dashes and a leading +.")
    return errors
