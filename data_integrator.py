import logging
from functools import lru_cache
from typing import Dict, Any, Tuple, Optional

from supabase import create_client, Client

from config import load_settings

logger = logging.getLogger(__name__)

COLLECTIONS = ("products", "categories", "subcategories", "sales")


@lru_cache(maxsize=1)
def get_client() -> Client:
    settings = load_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")
    return create_client(settings.supabase_url, settings.supabase_key)


def _table(client: Optional[Client], table_name: str):
    client = client or get_client()
    return client.schema(load_settings().schema).table(table_name)


def insert_row(
        table_name: str,
        row: Dict[str, Any],
        client: Optional[Client] = None,
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Append a single row; the storage assigns its id.
    Returns (ok, message, inserted_row)
    """
    try:
        resp = (
            _table(client, table_name)
            .insert(row)
            .execute()
        )

        if getattr(resp, "error", None):
            logger.error("Insert into %s failed: %s", table_name, resp.error)
            return False, f"Insert failed: {resp.error}", None

        inserted = resp.data[0] if resp.data else None
        logger.info("Inserted row into %s (id=%s)", table_name, inserted and inserted.get("id"))
        return True, "Inserted", inserted

    except Exception as e:
        logger.exception("Insert into %s raised", table_name)
        return False, str(e), None


def fetch_collection(
        table_name: str,
        client: Optional[Client] = None,
) -> Tuple[bool, str, Dict[str, Dict[str, Any]]]:
    """
    Fetch a whole table as {id: record}. The id is removed from the record
    and used as the key, as a string.
    Returns (ok, message, mapping)
    """
    try:
        resp = (
            _table(client, table_name)
            .select("*")
            .execute()
        )

        if getattr(resp, "error", None):
            logger.error("Fetch of %s failed: %s", table_name, resp.error)
            return False, f"Fetch failed: {resp.error}", {}

        if not resp.data:
            return True, "No rows found", {}

        mapping: Dict[str, Dict[str, Any]] = {}
        for row in resp.data:
            record = dict(row)
            record_id = record.pop("id")
            mapping[str(record_id)] = record

        return True, "Fetched", mapping

    except Exception as e:
        logger.exception("Fetch of %s raised", table_name)
        return False, f"Unexpected error: {e}", {}
