# services/collection_service.py
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import data_integrator
from domain.models import Category, Product, Sale, Subcategory

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Snapshot = List[Record]
Fetcher = Callable[[str], Tuple[bool, str, Dict[str, Record]]]


def normalize_records(mapping: Optional[Dict[str, Record]]) -> Snapshot:
    """
    Turn an {id: record} mapping into a list of records, each tagged with its
    id under "id". Order follows the mapping.
    """
    if not mapping:
        return []
    return [{**(record or {}), "id": str(record_id)} for record_id, record in mapping.items()]


def flatten_nested(
        mapping: Optional[Dict[str, Dict[str, Record]]],
        parent_key: str = "category_id",
) -> Dict[str, Record]:
    """
    Flatten {parent_id: {child_id: record}} into {child_id: record} with the
    parent id stored on each record under `parent_key`.
    """
    flat: Dict[str, Record] = {}
    for parent_id, children in (mapping or {}).items():
        for child_id, record in (children or {}).items():
            flat[str(child_id)] = {**(record or {}), parent_key: str(parent_id)}
    return flat


class CollectionReader:
    """
    Push-style view over whole remote collections.

    Each `refresh()` fetches every subscribed collection once and hands the
    full normalized snapshot to every live callback; a new snapshot replaces
    the old one. Callbacks removed by their unsubscribe function (or by
    `close()`) are never called again.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None):
        self._fetcher = fetcher or data_integrator.fetch_collection
        self._subscribers: Dict[str, Dict[int, Callable[[Snapshot], None]]] = {}
        self._next_token = 0
        self._closed = False

    def subscribe(self, name: str, callback: Callable[[Snapshot], None]) -> Callable[[], None]:
        if self._closed:
            raise RuntimeError("CollectionReader is closed")

        token = self._next_token
        self._next_token += 1
        self._subscribers.setdefault(name, {})[token] = callback
        logger.debug("Subscribed to %s (token=%d)", name, token)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(name)
            if callbacks is not None:
                callbacks.pop(token, None)
                if not callbacks:
                    del self._subscribers[name]

        return unsubscribe

    @property
    def collections(self) -> List[str]:
        return list(self._subscribers)

    def refresh(self) -> Dict[str, bool]:
        """Fetch and deliver. Returns {collection: fetched_ok}."""
        results: Dict[str, bool] = {}
        for name in list(self._subscribers):
            ok, msg, mapping = self._fetcher(name)
            results[name] = ok
            if not ok:
                logger.warning("Could not refresh %s: %s", name, msg)
                continue

            snapshot = normalize_records(mapping)
            # a callback may unsubscribe others while we deliver
            for token, callback in list(self._subscribers.get(name, {}).items()):
                if token in self._subscribers.get(name, {}):
                    callback(list(snapshot))
        return results

    def close(self) -> None:
        self._subscribers.clear()
        self._closed = True


def load_snapshot(name: str, fetcher: Optional[Fetcher] = None) -> Tuple[bool, str, Snapshot]:
    """One-shot read of a collection: subscribe, refresh once, tear down."""
    received: Dict[str, Snapshot] = {}
    reader = CollectionReader(fetcher)
    reader.subscribe(name, lambda snapshot: received.__setitem__(name, snapshot))
    results = reader.refresh()
    reader.close()

    if not results.get(name):
        return False, f"Could not load {name}", []
    return True, "Fetched", received.get(name, [])


def _expand_nested_groups(snapshot: Snapshot) -> Snapshot:
    # Older subcategories were stored as {category_id: {subcategory_id: record}}.
    nested: Dict[str, Dict[str, Record]] = {}
    flat: Snapshot = []
    for record in snapshot:
        children = {k: v for k, v in record.items() if k != "id"}
        if "name" not in record and all(isinstance(v, dict) for v in children.values()):
            nested[record["id"]] = children
        else:
            flat.append(record)
    return flat + normalize_records(flatten_nested(nested))


def parse_snapshot(name: str, snapshot: Snapshot) -> list:
    """
    Build domain objects for one collection snapshot. A record whose fields
    cannot be read (e.g. a non-numeric price) is logged and left out.
    """
    parser = _PARSERS.get(name)
    if parser is None:
        raise ValueError(f"Unknown collection: {name}")
    if name == "subcategories":
        snapshot = _expand_nested_groups(snapshot)

    parsed = []
    for record in snapshot:
        try:
            parsed.append(parser(record["id"], record))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping %s record %s: %s", name, record.get("id"), e)
    return parsed


_PARSERS = {
    "products": Product.from_record,
    "categories": Category.from_record,
    "subcategories": Subcategory.from_record,
    "sales": Sale.from_record,
}
