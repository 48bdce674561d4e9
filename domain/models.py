# domain/models.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_SALE_STATUS = "Completed"


def _first(record: Dict[str, Any], *keys: str, default=None):
    """Return the first non-None value among `keys` (records come in several shapes)."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _optional_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _optional_str(value) -> Optional[str]:
    return str(value) if value is not None else None


def _flag(value) -> bool:
    # older records stored flags as "true" / "false" strings
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass
class Product:
    id: str
    name: str
    sku: str = ""
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    price: float = 0.0
    stock: float = 0.0  # fractional for length-based units
    unit: str = "yards"  # one of utils.units.UNITS
    description: str = ""
    cost_price: Optional[float] = None

    @classmethod
    def from_record(cls, record_id: str, record: Dict[str, Any]) -> "Product":
        return cls(
            id=str(record_id),
            name=_first(record, "name", default=""),
            sku=_first(record, "sku", default=""),
            category_id=_optional_str(_first(record, "category_id", "categoryId", "category")),
            subcategory_id=_optional_str(_first(record, "subcategory_id", "subcategoryId")),
            price=float(_first(record, "price", default=0)),
            stock=float(_first(record, "stock", default=0)),
            unit=_first(record, "unit", default="yards"),
            description=_first(record, "description", default=""),
            cost_price=_optional_float(_first(record, "cost_price", "costPrice")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sku": self.sku,
            "category_id": self.category_id,
            "subcategory_id": self.subcategory_id,
            "price": self.price,
            "stock": self.stock,
            "unit": self.unit,
            "description": self.description,
            "cost_price": self.cost_price,
        }


@dataclass
class Category:
    id: str
    name: str
    description: str = ""

    @classmethod
    def from_record(cls, record_id: str, record: Dict[str, Any]) -> "Category":
        return cls(
            id=str(record_id),
            name=_first(record, "name", default=""),
            description=_first(record, "description", default=""),
        )


@dataclass
class Subcategory:
    id: str
    name: str
    category_id: Optional[str] = None  # parent Category.id
    description: str = ""

    @classmethod
    def from_record(cls, record_id: str, record: Dict[str, Any]) -> "Subcategory":
        parent = _first(record, "category_id", "categoryId", "parent_id")
        return cls(
            id=str(record_id),
            name=_first(record, "name", default=""),
            category_id=_optional_str(parent),
            description=_first(record, "description", default=""),
        )


@dataclass
class SaleLineItem:
    """
    A snapshot of a product at the time of sale. Later edits to the product
    never change it.
    """
    product_id: Optional[str]
    name: str
    price: float
    quantity: float
    unit: str = "yards"
    sku: str = ""
    custom_price: Optional[float] = None
    cost_price: Optional[float] = None

    @property
    def effective_price(self) -> float:
        return self.custom_price if self.custom_price is not None else self.price

    @property
    def line_total(self) -> float:
        return self.effective_price * self.quantity

    @classmethod
    def from_product(
            cls,
            product: Product,
            quantity: float,
            custom_price: Optional[float] = None,
    ) -> "SaleLineItem":
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            unit=product.unit,
            sku=product.sku,
            custom_price=custom_price,
            cost_price=product.cost_price,
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SaleLineItem":
        # Older sales stored the quantity as "meters" and the override as "editablePrice".
        unit = _first(record, "unit", default="meters" if "meters" in record else "yards")
        product_id = _first(record, "product_id", "productId", "id")
        return cls(
            product_id=str(product_id) if product_id is not None else None,
            name=_first(record, "name", default=""),
            price=float(_first(record, "price", default=0)),
            quantity=float(_first(record, "quantity", "meters", default=0)),
            unit=unit,
            sku=_first(record, "sku", default=""),
            custom_price=_optional_float(
                _first(record, "custom_price", "customPrice", "editablePrice")
            ),
            cost_price=_optional_float(_first(record, "cost_price", "costPrice")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "sku": self.sku,
            "price": self.price,
            "quantity": self.quantity,
            "unit": self.unit,
            "custom_price": self.custom_price,
            "cost_price": self.cost_price,
        }


@dataclass
class Sale:
    id: str
    items: List[SaleLineItem]
    total_price: float  # persisted at submission time, not recomputed
    date: str  # ISO-8601
    customer_name: str = ""
    customer_phone: str = ""
    notes: str = ""
    is_recurring: bool = False
    is_online: bool = False
    status: str = DEFAULT_SALE_STATUS
    total_discrepancy: float = 0.0  # persisted total minus line-item sum

    @property
    def computed_total(self) -> float:
        return sum(item.line_total for item in self.items)

    @classmethod
    def from_record(cls, record_id: str, record: Dict[str, Any]) -> "Sale":
        raw_items = _first(record, "items", "products", default=[]) or []
        items = [SaleLineItem.from_record(item) for item in raw_items]
        computed = sum(item.line_total for item in items)

        persisted = _first(record, "total_price", "totalPrice", "total")
        total_price = float(persisted) if persisted is not None else computed

        discrepancy = 0.0
        if persisted is not None and items:
            discrepancy = round(total_price - computed, 2)
            if discrepancy:
                logger.warning(
                    "Sale %s: stored total %.2f differs from line items by %.2f",
                    record_id,
                    total_price,
                    discrepancy,
                )

        return cls(
            id=str(record_id),
            items=items,
            total_price=total_price,
            date=_first(record, "date", "timestamp", default=""),
            customer_name=_first(record, "customer_name", "customerName", default=""),
            customer_phone=_first(
                record, "customer_phone", "customerPhone", "mobileNumber", default=""
            ),
            notes=_first(record, "notes", default=""),
            is_recurring=_flag(_first(record, "is_recurring", "isRecurring", default=False)),
            is_online=_flag(_first(record, "is_online", "isOnline", default=False)),
            status=record.get("status") or DEFAULT_SALE_STATUS,
            total_discrepancy=discrepancy,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "items": [item.to_record() for item in self.items],
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "notes": self.notes,
            "is_recurring": self.is_recurring,
            "is_online": self.is_online,
            "total_price": self.total_price,
            "date": self.date,
            "status": self.status,
        }


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------

@dataclass
class MonthlyPoint:
    label: str  # e.g. "Sep" or "Sep 2024"
    total: float = 0.0
    online: float = 0.0
    in_store: float = 0.0


@dataclass
class TopProduct:
    rank: int  # 1-based
    name: str
    quantity: float
    revenue: float


@dataclass
class RecentSale:
    id: str
    product: str
    customer: str
    date: str  # YYYY-MM-DD
    amount: float
    status: str


@dataclass
class OnlineSplit:
    online_count: int
    in_store_count: int
    online_pct: float
    in_store_pct: float


@dataclass
class SalesSummary:
    """Everything the sales dashboard shows, computed from one snapshot."""
    total_revenue: float
    average_sale: float
    split: OnlineSplit
    monthly: List[MonthlyPoint] = field(default_factory=list)
    top_products: List[TopProduct] = field(default_factory=list)
    recent: List[RecentSale] = field(default_factory=list)


@dataclass
class PeriodPoint:
    label: str
    revenue: float = 0.0
    profit: float = 0.0


@dataclass
class CustomerSummary:
    name: str
    phone: str
    orders: int
    total_spent: float
    last_purchase: str  # YYYY-MM-DD, "" when unknown


@dataclass
class InventoryOverview:
    total_products: int
    low_stock: int
    out_of_stock: int
