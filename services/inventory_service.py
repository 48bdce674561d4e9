# services/inventory_service.py
from typing import Dict, List, Sequence, Tuple

from domain.models import Category, InventoryOverview, Product, Subcategory

DEFAULT_LOW_STOCK_THRESHOLD = 30

IN_STOCK = "In Stock"
LOW_STOCK = "Low Stock"
OUT_OF_STOCK = "Out of Stock"


def group_subcategories(
        categories: Sequence[Category],
        subcategories: Sequence[Subcategory],
) -> List[Tuple[Category, List[Subcategory]]]:
    """
    Pair each category (in the given order) with its subcategories, matched
    on the subcategory's stored category_id.
    """
    by_parent: Dict[str, List[Subcategory]] = {}
    for sub in subcategories:
        if sub.category_id is not None:
            by_parent.setdefault(sub.category_id, []).append(sub)

    return [(category, by_parent.get(category.id, [])) for category in categories]


def orphan_subcategories(
        categories: Sequence[Category],
        subcategories: Sequence[Subcategory],
) -> List[Subcategory]:
    """Subcategories whose parent is missing; the storage does not prevent these."""
    known = {category.id for category in categories}
    return [sub for sub in subcategories if sub.category_id not in known]


def filter_products(products: Sequence[Product], term: str) -> List[Product]:
    term = (term or "").strip().lower()
    if not term:
        return list(products)
    return [p for p in products if term in p.name.lower() or term in (p.sku or "").lower()]


def stock_status(product: Product, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> str:
    if product.stock > threshold:
        return IN_STOCK
    if product.stock > 0:
        return LOW_STOCK
    return OUT_OF_STOCK


def inventory_overview(
        products: Sequence[Product],
        threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> InventoryOverview:
    return InventoryOverview(
        total_products=len(products),
        low_stock=sum(1 for p in products if p.stock < threshold),
        out_of_stock=sum(1 for p in products if p.stock == 0),
    )


def category_names(categories: Sequence[Category]) -> Dict[str, str]:
    """{category_id: name}, for labelling product rows."""
    return {category.id: category.name for category in categories}
