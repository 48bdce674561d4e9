import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_logging_configured = False


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    schema: str = "public"
    admin_email: Optional[str] = None
    low_stock_threshold: int = 30
    currency_symbol: str = "৳"
    report_folder_id: Optional[str] = None
    google_credentials_json: Optional[str] = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Read settings from the environment (and `.env` if present).
    Nothing here is validated; the storage client checks its own credentials.
    """
    load_dotenv()
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        schema=os.getenv("SCHEMA", "public"),
        admin_email=os.getenv("ADMIN_EMAIL"),
        low_stock_threshold=int(os.getenv("LOW_STOCK_THRESHOLD", "30")),
        currency_symbol=os.getenv("CURRENCY_SYMBOL", "৳"),
        report_folder_id=os.getenv("REPORT_FOLDER_ID") or None,
        google_credentials_json=os.getenv("GOOGLE_CREDENTIALS_JSON") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: Optional[str] = None) -> None:
    global _logging_configured
    if _logging_configured:
        return

    level = level or load_settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)
    _logging_configured = True
