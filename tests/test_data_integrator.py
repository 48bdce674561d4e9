from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from data_integrator import fetch_collection, insert_row


@pytest.fixture(autouse=True)
def schema(monkeypatch):
    monkeypatch.setenv("SCHEMA", "pos")


def client_returning(data=None, error=None):
    client = MagicMock()
    table = client.schema.return_value.table.return_value
    response = SimpleNamespace(data=data, error=error)
    table.insert.return_value.execute.return_value = response
    table.select.return_value.execute.return_value = response
    return client


def test_insert_row():
    client = client_returning(data=[{"id": 5, "name": "Cotton"}])

    ok, msg, row = insert_row("products", {"name": "Cotton"}, client=client)

    assert ok
    assert row == {"id": 5, "name": "Cotton"}
    client.schema.assert_called_once_with("pos")
    client.schema.return_value.table.assert_called_once_with("products")


def test_insert_row_error_response():
    ok, msg, row = insert_row("products", {}, client=client_returning(error="denied"))
    assert not ok
    assert msg == "Insert failed: denied"
    assert row is None


def test_insert_row_exception():
    client = MagicMock()
    client.schema.side_effect = ConnectionError("offline")

    ok, msg, row = insert_row("sales", {}, client=client)
    assert (ok, msg, row) == (False, "offline", None)


def test_fetch_collection_keys_by_id():
    client = client_returning(data=[{"id": 1, "name": "A"}, {"id": "x2", "name": "B"}])

    ok, msg, mapping = fetch_collection("categories", client=client)

    assert ok
    assert mapping == {"1": {"name": "A"}, "x2": {"name": "B"}}


def test_fetch_collection_empty():
    assert fetch_collection("sales", client=client_returning(data=[])) == (True, "No rows found", {})


def test_fetch_collection_exception():
    client = MagicMock()
    client.schema.side_effect = ConnectionError("offline")

    ok, msg, mapping = fetch_collection("sales", client=client)
    assert not ok
    assert msg == "Unexpected error: offline"
    assert mapping == {}
