from unittest.mock import MagicMock

import pytest

from domain.models import Sale, Subcategory
from services.collection_service import (
    CollectionReader,
    flatten_nested,
    load_snapshot,
    normalize_records,
    parse_snapshot,
)


def fetcher_for(data):
    """A fetcher serving {collection: {id: record}}."""
    return lambda name: (True, "Fetched", data.get(name, {}))


class TestNormalize:

    def test_ids_attached_in_order(self):
        snapshot = normalize_records({"b": {"name": "B"}, "a": {"name": "A"}})
        assert snapshot == [{"name": "B", "id": "b"}, {"name": "A", "id": "a"}]

    def test_empty(self):
        assert normalize_records(None) == []
        assert normalize_records({}) == []

    def test_flatten_nested(self):
        flat = flatten_nested({"c1": {"s1": {"name": "Voile"}}, "c2": {"s2": {"name": "Lawn"}}})
        assert flat == {
            "s1": {"name": "Voile", "category_id": "c1"},
            "s2": {"name": "Lawn", "category_id": "c2"},
        }


class TestCollectionReader:

    def test_every_subscriber_gets_full_snapshot(self):
        reader = CollectionReader(fetcher_for({"products": {"p1": {"name": "Cotton"}}}))
        first, second = MagicMock(), MagicMock()
        reader.subscribe("products", first)
        reader.subscribe("products", second)

        assert reader.refresh() == {"products": True}
        first.assert_called_once_with([{"name": "Cotton", "id": "p1"}])
        second.assert_called_once_with([{"name": "Cotton", "id": "p1"}])

    def test_empty_collection_delivers_empty_list(self):
        reader = CollectionReader(fetcher_for({}))
        callback = MagicMock()
        reader.subscribe("sales", callback)
        reader.refresh()
        callback.assert_called_once_with([])

    def test_unsubscribed_callback_not_called(self):
        reader = CollectionReader(fetcher_for({"sales": {"s1": {}}}))
        callback = MagicMock()
        unsubscribe = reader.subscribe("sales", callback)
        unsubscribe()
        unsubscribe()

        reader.refresh()
        callback.assert_not_called()
        assert reader.collections == []

    def test_unsubscribe_during_delivery(self):
        reader = CollectionReader(fetcher_for({"sales": {"s1": {}}}))
        late = MagicMock()
        handles = {}
        reader.subscribe("sales", lambda snapshot: handles["late"]())
        handles["late"] = reader.subscribe("sales", late)

        reader.refresh()
        late.assert_not_called()

    def test_failed_fetch_delivers_nothing(self):
        reader = CollectionReader(lambda name: (False, "Fetch failed: boom", {}))
        callback = MagicMock()
        reader.subscribe("products", callback)

        assert reader.refresh() == {"products": False}
        callback.assert_not_called()

    def test_closed_reader(self):
        reader = CollectionReader(fetcher_for({}))
        callback = MagicMock()
        reader.subscribe("products", callback)
        reader.close()

        assert reader.refresh() == {}
        callback.assert_not_called()
        with pytest.raises(RuntimeError):
            reader.subscribe("products", callback)

    def test_load_snapshot(self):
        ok, _, snapshot = load_snapshot("products", fetcher_for({"products": {"p1": {"name": "C"}}}))
        assert ok
        assert snapshot == [{"name": "C", "id": "p1"}]

        ok, msg, snapshot = load_snapshot("products", lambda name: (False, "down", {}))
        assert not ok
        assert snapshot == []


class TestParseSnapshot:

    def test_sales(self):
        sales = parse_snapshot("sales", [{"id": "s1", "total_price": 10, "date": "2024-01-01"}])
        assert isinstance(sales[0], Sale)
        assert sales[0].id == "s1"

    def test_nested_subcategories_flattened(self):
        snapshot = [
            {"id": "s9", "name": "Chiffon", "category_id": "c3"},
            {"id": "c1", "s1": {"name": "Voile"}, "s2": {"name": "Lawn"}},
        ]
        subs = parse_snapshot("subcategories", snapshot)

        assert all(isinstance(sub, Subcategory) for sub in subs)
        assert {(sub.id, sub.category_id) for sub in subs} == {
            ("s9", "c3"), ("s1", "c1"), ("s2", "c1"),
        }

    def test_unreadable_record_skipped(self, caplog):
        snapshot = [
            {"id": "ok", "total_price": 100, "date": "2024-01-01"},
            {"id": "bad", "total_price": "", "date": "2024-01-02"},
            {"id": "worse", "total_price": "abc", "date": "2024-01-03"},
        ]
        sales = parse_snapshot("sales", snapshot)

        assert [sale.id for sale in sales] == ["ok"]
        assert "Skipping sales record bad" in caplog.text

    def test_unreadable_product_skipped(self):
        products = parse_snapshot("products", [
            {"id": "p1", "name": "Cotton", "price": 10, "stock": 5},
            {"id": "p2", "name": "Silk", "price": 25, "stock": "lots"},
        ])
        assert [p.id for p in products] == ["p1"]

    def test_unknown_collection(self):
        with pytest.raises(ValueError):
            parse_snapshot("orders", [])
