# services/sale_service.py
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import data_integrator
from domain.errors import EmptySaleError
from domain.models import DEFAULT_SALE_STATUS, Product, Sale, SaleLineItem
from utils.dates import utc_now_iso
from utils.units import convert_quantity

logger = logging.getLogger(__name__)

SALES_TABLE = "sales"
EMPTY_SALE_MESSAGE = "Please add at least one item to the sale."

Writer = Callable[[str, Dict[str, Any]], Tuple[bool, str, Optional[Dict[str, Any]]]]


@dataclass
class SaleDraft:
    """
    The working list of a sale that has not been written yet.
    Lives in st.session_state between reruns.
    """
    items: List[SaleLineItem] = field(default_factory=list)

    def add_item(
            self,
            products: Sequence[Product],
            product_id: str,
            quantity: float,
            unit: str,
            custom_price: Optional[float] = None,
    ) -> SaleLineItem:
        """
        Add `quantity` of a product, converting from `unit` to the product's
        own unit. A product already on the list has its quantity increased;
        the line keeps the unit and custom price it was first added with.
        """
        product = next((p for p in products if p.id == product_id), None)
        if product is None:
            raise KeyError(f"Unknown product: {product_id}")
        if quantity is None or quantity <= 0:
            raise ValueError("Quantity must be greater than zero")
        if custom_price is not None and custom_price < 0:
            raise ValueError("Custom price cannot be negative")

        if unit != product.unit:
            quantity = convert_quantity(quantity, unit, product.unit)

        # merged by product id only, whatever unit the existing line has
        existing = next((item for item in self.items if item.product_id == product.id), None)
        if existing is not None:
            existing.quantity += quantity
            return existing

        item = SaleLineItem.from_product(product, quantity, custom_price)
        self.items.append(item)
        return item

    def remove_item(self, index: int) -> SaleLineItem:
        if not 0 <= index < len(self.items):
            raise IndexError(f"No sale item at position {index}")
        return self.items.pop(index)

    def total(self) -> float:
        return sum(item.line_total for item in self.items)

    def clear(self) -> None:
        self.items.clear()

    def is_empty(self) -> bool:
        return not self.items


def build_sale_record(
        draft: SaleDraft,
        customer_name: str = "",
        customer_phone: str = "",
        notes: str = "",
        is_recurring: bool = False,
        is_online: bool = False,
        now: Optional[str] = None,
) -> Dict[str, Any]:
    if draft.is_empty():
        raise EmptySaleError(EMPTY_SALE_MESSAGE)

    sale = Sale(
        id="",
        items=[SaleLineItem(**vars(item)) for item in draft.items],
        total_price=draft.total(),
        date=now or utc_now_iso(),
        customer_name=customer_name.strip(),
        customer_phone=customer_phone.strip(),
        notes=notes,
        is_recurring=is_recurring,
        is_online=is_online,
        status=DEFAULT_SALE_STATUS,
    )
    return sale.to_record()


def submit_sale(
        draft: SaleDraft,
        customer_name: str = "",
        customer_phone: str = "",
        notes: str = "",
        is_recurring: bool = False,
        is_online: bool = False,
        writer: Optional[Writer] = None,
        now: Optional[str] = None,
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Write the draft as one new sale. Returns (ok, message, stored_row).
    The draft is cleared only after a successful write.
    """
    if draft.is_empty():
        return False, EMPTY_SALE_MESSAGE, None

    record = build_sale_record(
        draft,
        customer_name=customer_name,
        customer_phone=customer_phone,
        notes=notes,
        is_recurring=is_recurring,
        is_online=is_online,
        now=now,
    )

    writer = writer or data_integrator.insert_row
    ok, msg, row = writer(SALES_TABLE, record)
    if not ok:
        logger.error("Sale for %r not saved: %s", record["customer_name"], msg)
        return False, msg, None

    logger.info(
        "Sale saved: %d item(s), total %.2f",
        len(record["items"]),
        record["total_price"],
    )
    draft.clear()
    return True, "Sale completed successfully!", row or record
