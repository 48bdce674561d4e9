# utils/dates.py

from datetime import datetime, timezone
from typing import Optional


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or timestamp into an aware datetime (UTC when no
    offset is given). Returns None for empty or unparseable values.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
