# services/report_service.py

import io
import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

import pandas as pd
from docx import Document
from googleapiclient.discovery import Resource

from domain.models import Sale, SalesSummary
from google_client import get_drive_service
from services.drive_service import (
    find_file_in_folder_by_name,
    replace_file_content,
    upload_file_to_folder,
)
from utils.docx_helpers import add_table
from utils.formatting import format_currency, format_percentage

logger = logging.getLogger(__name__)

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SALES_COLUMNS = [
    "id",
    "date",
    "customer_name",
    "customer_phone",
    "items",
    "total_price",
    "total_discrepancy",
    "is_online",
    "is_recurring",
    "status",
    "notes",
]


def sales_frame(sales: Sequence[Sale]) -> pd.DataFrame:
    """One row per sale; `items` is a short "name x qty" summary."""
    rows = [
        {
            "id": sale.id,
            "date": sale.date,
            "customer_name": sale.customer_name,
            "customer_phone": sale.customer_phone,
            "items": ", ".join(f"{item.name} x {item.quantity:g}" for item in sale.items),
            "total_price": sale.total_price,
            "total_discrepancy": sale.total_discrepancy,
            "is_online": sale.is_online,
            "is_recurring": sale.is_recurring,
            "status": sale.status,
            "notes": sale.notes,
        }
        for sale in sales
    ]
    return pd.DataFrame(rows, columns=SALES_COLUMNS)


def sales_csv(sales: Sequence[Sale]) -> bytes:
    return sales_frame(sales).to_csv(index=False).encode("utf-8")


def report_filename(now: Optional[datetime] = None, extension: str = "docx") -> str:
    now = now or datetime.now()
    return f"Sales Report - {now.strftime('%Y%m%d-%H%M%S')}.{extension}"


def build_sales_report_docx(
        summary: SalesSummary,
        sales: Sequence[Sale],
        currency: str = "৳",
        generated_at: Optional[datetime] = None,
) -> bytes:
    generated_at = generated_at or datetime.now()
    doc = Document()

    doc.add_heading("Sales Report", level=0)
    doc.add_paragraph(f"Generated {generated_at.strftime('%d/%m/%Y %H:%M')}")

    doc.add_heading("Summary", level=1)
    split = summary.split
    doc.add_paragraph(f"Sales recorded: {len(sales)}")
    doc.add_paragraph(f"Total revenue: {format_currency(summary.total_revenue, currency)}")
    doc.add_paragraph(f"Average sale: {format_currency(summary.average_sale, currency)}")
    doc.add_paragraph(
        f"Online / in-store: {format_percentage(split.online_pct)} / "
        f"{format_percentage(split.in_store_pct)}"
    )

    doc.add_heading("Monthly Sales", level=1)
    add_table(
        doc,
        ["Month", "Online", "In-Store", "Total"],
        [
            [
                point.label,
                format_currency(point.online, currency),
                format_currency(point.in_store, currency),
                format_currency(point.total, currency),
            ]
            for point in summary.monthly
        ],
    )

    doc.add_heading("Top Products", level=1)
    add_table(
        doc,
        ["#", "Product", "Quantity", "Revenue"],
        [
            [str(p.rank), p.name, f"{p.quantity:.2f}", format_currency(p.revenue, currency)]
            for p in summary.top_products
        ],
    )

    drifted = [sale for sale in sales if sale.total_discrepancy]
    if drifted:
        doc.add_heading("Totals Not Matching Line Items", level=1)
        add_table(
            doc,
            ["Sale", "Stored Total", "Difference"],
            [
                [sale.id, format_currency(sale.total_price, currency),
                 format_currency(sale.total_discrepancy, currency)]
                for sale in drifted
            ],
        )

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def archive_report(
        content: bytes,
        filename: str,
        folder_id: Optional[str],
        drive: Optional[Resource] = None,
        mimetype: str = DOCX_MIMETYPE,
) -> Tuple[bool, str, Optional[str]]:
    """
    Upload a report to the archive folder, replacing a file with the same name.
    Returns (ok, message, web_view_link)
    """
    if not folder_id:
        return False, "REPORT_FOLDER_ID is not configured", None

    try:
        if drive is None:
            drive = get_drive_service()

        existing = find_file_in_folder_by_name(drive, folder_id, filename)
        if existing:
            result = replace_file_content(drive, existing["id"], mimetype, io.BytesIO(content))
            logger.info('Replaced report "%s" (fileId=%s)', filename, result.get("id"))
        else:
            result = upload_file_to_folder(drive, folder_id, filename, mimetype, io.BytesIO(content))
            logger.info('Uploaded report "%s" as fileId=%s', filename, result.get("id"))

        return True, "Report archived", result.get("webViewLink")

    except Exception as e:
        logger.exception('Archiving report "%s" failed', filename)
        return False, str(e), None
