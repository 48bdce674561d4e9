# services/metrics_service.py
"""
Derived sales metrics.

Every function here is pure: it takes the current snapshot of sales and
returns fresh values, so pages simply recompute on each new snapshot.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from domain.models import (
    CustomerSummary,
    MonthlyPoint,
    OnlineSplit,
    PeriodPoint,
    RecentSale,
    Sale,
    SalesSummary,
    TopProduct,
)
from utils.dates import parse_timestamp

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 4
RECENT_SALES_LIMIT = 3
NO_PRODUCT_LABEL = "—"
PERIODS = ("weekly", "monthly", "yearly")


def total_revenue(sales: Sequence[Sale]) -> float:
    return sum(sale.total_price for sale in sales)


def average_sale(sales: Sequence[Sale]) -> float:
    if not sales:
        return 0.0
    return total_revenue(sales) / len(sales)


def online_split(sales: Sequence[Sale]) -> OnlineSplit:
    """In-store percentage is 100 - online, so the two always add up to 100."""
    online = sum(1 for sale in sales if sale.is_online)
    online_pct = (online / len(sales)) * 100 if sales else 0.0
    return OnlineSplit(
        online_count=online,
        in_store_count=len(sales) - online,
        online_pct=online_pct,
        in_store_pct=100 - online_pct,
    )


def _dated(sales: Iterable[Sale]) -> List[Tuple[Sale, datetime]]:
    result = []
    for sale in sales:
        when = parse_timestamp(sale.date)
        if when is None:
            logger.warning("Skipping sale %s with unparseable date %r", sale.id, sale.date)
            continue
        result.append((sale, when))
    return result


def monthly_series(sales: Sequence[Sale], chronological: bool = True) -> List[MonthlyPoint]:
    """
    Per-month totals split into online and in-store.

    With chronological=False months are keyed by their short label only and
    listed in first-seen order, so the same month of two different years is
    merged. The default keys by (year, month) and sorts ascending.
    """
    dated = _dated(sales)
    points: Dict[object, MonthlyPoint] = {}

    if chronological:
        years = {when.year for _, when in dated}
        label_format = "%b %Y" if len(years) > 1 else "%b"
        for sale, when in sorted(dated, key=lambda pair: pair[1]):
            key = (when.year, when.month)
            if key not in points:
                points[key] = MonthlyPoint(label=when.strftime(label_format))
            _accumulate(points[key], sale)
    else:
        for sale, when in dated:
            key = when.strftime("%b")
            if key not in points:
                points[key] = MonthlyPoint(label=key)
            _accumulate(points[key], sale)

    return list(points.values())


def _accumulate(point: MonthlyPoint, sale: Sale) -> None:
    point.total += sale.total_price
    if sale.is_online:
        point.online += sale.total_price
    else:
        point.in_store += sale.total_price


def top_products(sales: Sequence[Sale], limit: int = TOP_PRODUCTS_LIMIT) -> List[TopProduct]:
    """
    Rank products by revenue over all line items. Products are grouped by
    display name, so two products sharing a name are counted together.
    """
    totals: Dict[str, List[float]] = {}
    for sale in sales:
        for item in sale.items:
            quantity_revenue = totals.setdefault(item.name, [0.0, 0.0])
            quantity_revenue[0] += item.quantity
            quantity_revenue[1] += item.line_total

    ranked = sorted(totals.items(), key=lambda entry: entry[1][1], reverse=True)[:limit]
    return [
        TopProduct(rank=index, name=name, quantity=quantity, revenue=revenue)
        for index, (name, (quantity, revenue)) in enumerate(ranked, start=1)
    ]


def recent_sales(sales: Sequence[Sale], limit: int = RECENT_SALES_LIMIT) -> List[RecentSale]:
    """Newest first; sales without a readable date come last, in input order."""
    stamped = [(sale, parse_timestamp(sale.date)) for sale in sales]
    dated = sorted(
        [pair for pair in stamped if pair[1] is not None],
        key=lambda pair: pair[1],
        reverse=True,
    )
    undated = [pair for pair in stamped if pair[1] is None]
    newest_first = (dated + undated)[:limit]
    return [
        RecentSale(
            id=sale.id,
            product=sale.items[0].name if sale.items else NO_PRODUCT_LABEL,
            customer=sale.customer_name,
            date=when.date().isoformat() if when is not None else "",
            amount=sale.total_price,
            status=sale.status or "Completed",
        )
        for sale, when in newest_first
    ]


def summarize_sales(sales: Sequence[Sale], chronological: bool = True) -> SalesSummary:
    return SalesSummary(
        total_revenue=total_revenue(sales),
        average_sale=average_sale(sales),
        split=online_split(sales),
        monthly=monthly_series(sales, chronological=chronological),
        top_products=top_products(sales),
        recent=recent_sales(sales),
    )


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def sale_profit(sale: Sale) -> float:
    """Margin over line items that carry a cost price; others contribute nothing."""
    return sum(
        (item.effective_price - item.cost_price) * item.quantity
        for item in sale.items
        if item.cost_price is not None
    )


def _period_key(when: datetime, period: str) -> Tuple[Tuple[int, ...], str]:
    if period == "weekly":
        monday = (when - timedelta(days=when.weekday())).date()
        return (monday.year, monday.month, monday.day), f"Week of {monday.isoformat()}"
    if period == "monthly":
        return (when.year, when.month), when.strftime("%b %Y")
    if period == "yearly":
        return (when.year,), str(when.year)
    raise ValueError(f"Unknown period: {period}")


def period_series(sales: Sequence[Sale], period: str = "monthly") -> List[PeriodPoint]:
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period}")

    points: Dict[Tuple[int, ...], PeriodPoint] = {}
    for sale, when in _dated(sales):
        key, label = _period_key(when, period)
        point = points.setdefault(key, PeriodPoint(label=label))
        point.revenue += sale.total_price
        point.profit += sale_profit(sale)

    return [points[key] for key in sorted(points)]


def profit_margin(revenue: float, profit: float) -> float:
    if not revenue:
        return 0.0
    return (profit / revenue) * 100


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

def customer_summaries(sales: Sequence[Sale]) -> List[CustomerSummary]:
    grouped: Dict[Tuple[str, str], CustomerSummary] = {}
    latest: Dict[Tuple[str, str], Optional[datetime]] = {}

    for sale in sales:
        key = (sale.customer_name.strip(), sale.customer_phone.strip())
        if not any(key):
            continue

        summary = grouped.setdefault(
            key,
            CustomerSummary(name=key[0], phone=key[1], orders=0, total_spent=0.0, last_purchase=""),
        )
        summary.orders += 1
        summary.total_spent += sale.total_price

        when = parse_timestamp(sale.date)
        if when is not None and (latest.get(key) is None or when > latest[key]):
            latest[key] = when
            summary.last_purchase = when.date().isoformat()

    return sorted(grouped.values(), key=lambda s: s.total_spent, reverse=True)


def filter_customers(summaries: Sequence[CustomerSummary], term: str) -> List[CustomerSummary]:
    term = (term or "").strip().lower()
    if not term:
        return list(summaries)
    return [s for s in summaries if term in s.name.lower() or term in s.phone.lower()]
