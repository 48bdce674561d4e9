import io
from datetime import datetime
from unittest.mock import MagicMock, patch

from docx import Document

from services.metrics_service import summarize_sales
from services.report_service import (
    DOCX_MIMETYPE,
    SALES_COLUMNS,
    archive_report,
    build_sales_report_docx,
    report_filename,
    sales_csv,
    sales_frame,
)


def sample_sales(make_sale, make_item):
    return [
        make_sale("a", 30, "2024-08-10", online=True, items=[make_item("Cotton", 10, 3)],
                  customer_name="Rina"),
        make_sale("b", 55, "2024-09-02", items=[make_item("Silk", 25, 2)],
                  customer_name="Tanvir", total_discrepancy=5.0),
    ]


def test_sales_frame(make_sale, make_item):
    frame = sales_frame(sample_sales(make_sale, make_item))

    assert list(frame.columns) == SALES_COLUMNS
    assert frame.loc[0, "items"] == "Cotton x 3"
    assert frame["total_price"].sum() == 85


def test_sales_frame_empty():
    frame = sales_frame([])
    assert frame.empty
    assert list(frame.columns) == SALES_COLUMNS


def test_sales_csv_header(make_sale, make_item):
    lines = sales_csv(sample_sales(make_sale, make_item)).decode("utf-8").splitlines()
    assert lines[0] == ",".join(SALES_COLUMNS)
    assert len(lines) == 3


def test_report_filename():
    assert report_filename(datetime(2024, 9, 1, 8, 5, 0)) == "Sales Report - 20240901-080500.docx"
    assert report_filename(datetime(2024, 9, 1), "csv").endswith(".csv")


def test_docx_report(make_sale, make_item):
    sales = sample_sales(make_sale, make_item)
    content = build_sales_report_docx(
        summarize_sales(sales), sales, currency="$", generated_at=datetime(2024, 9, 3, 9, 30)
    )

    doc = Document(io.BytesIO(content))
    text = [p.text for p in doc.paragraphs]
    assert "Sales Report" in text
    assert "Total revenue: $85.00" in text
    assert "Generated 03/09/2024 09:30" in text

    monthly, top, drifted = doc.tables
    assert [cell.text for cell in monthly.rows[0].cells] == ["Month", "Online", "In-Store", "Total"]
    assert [row.cells[0].text for row in monthly.rows[1:]] == ["Aug", "Sep"]
    assert top.rows[1].cells[1].text == "Silk"
    assert drifted.rows[1].cells[0].text == "b"


def test_docx_report_without_drift(make_sale):
    sales = [make_sale("a", 10)]
    doc = Document(io.BytesIO(build_sales_report_docx(summarize_sales(sales), sales)))
    assert len(doc.tables) == 2


def test_archive_requires_folder():
    drive = MagicMock()
    assert archive_report(b"x", "r.docx", None, drive=drive) == (
        False, "REPORT_FOLDER_ID is not configured", None
    )
    drive.files.assert_not_called()


def test_archive_uploads_new_file():
    drive = MagicMock()
    with patch("services.report_service.find_file_in_folder_by_name", return_value=None), \
            patch("services.report_service.upload_file_to_folder",
                  return_value={"id": "f1", "webViewLink": "https://drive/f1"}) as upload:
        ok, msg, link = archive_report(b"data", "r.docx", "folder", drive=drive)

    assert (ok, link) == (True, "https://drive/f1")
    args = upload.call_args.args
    assert args[:4] == (drive, "folder", "r.docx", DOCX_MIMETYPE)
    assert args[4].getvalue() == b"data"


def test_archive_replaces_existing_file():
    drive = MagicMock()
    with patch("services.report_service.find_file_in_folder_by_name", return_value={"id": "f9"}), \
            patch("services.report_service.replace_file_content",
                  return_value={"id": "f9", "webViewLink": "https://drive/f9"}) as replace, \
            patch("services.report_service.upload_file_to_folder") as upload:
        ok, _, link = archive_report(b"data", "r.docx", "folder", drive=drive)

    assert ok
    assert link == "https://drive/f9"
    assert replace.call_args.args[1] == "f9"
    upload.assert_not_called()


def test_archive_failure_reported():
    drive = MagicMock()
    with patch("services.report_service.find_file_in_folder_by_name",
               side_effect=RuntimeError("quota exceeded")):
        ok, msg, link = archive_report(b"data", "r.docx", "folder", drive=drive)
    assert (ok, msg, link) == (False, "quota exceeded", None)
