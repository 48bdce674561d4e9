# Shared fixtures for the service tests. Nothing here talks to Supabase or
# Google Drive: storage is replaced with plain callables or MagicMock clients.

import pytest

from domain.models import Product, Sale, SaleLineItem


@pytest.fixture
def make_sale():
    """Factory for sales; keyword arguments override the defaults."""

    def _make(sale_id="s1", total=0.0, date="2024-09-01T10:00:00Z", online=False, items=None, **extra):
        return Sale(
            id=sale_id,
            items=list(items or []),
            total_price=total,
            date=date,
            is_online=online,
            **extra,
        )

    return _make


@pytest.fixture
def make_item():
    def _make(name="Cotton", price=10.0, quantity=1.0, **extra):
        return SaleLineItem(product_id=extra.pop("product_id", name.lower()), name=name,
                            price=price, quantity=quantity, **extra)

    return _make


@pytest.fixture
def products():
    return [
        Product(id="p1", name="Cotton", sku="COT-001", category_id="c1", price=10.0,
                stock=50, unit="yards", cost_price=6.0),
        Product(id="p2", name="Silk", sku="SLK-001", category_id="c1", price=25.0,
                stock=12, unit="meters"),
        Product(id="p3", name="Wool", sku="WOL-001", category_id="c2", price=40.0,
                stock=0, unit="kg"),
    ]
