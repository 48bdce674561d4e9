import io
from unittest.mock import MagicMock

from services.drive_service import (
    find_file_in_folder_by_name,
    replace_file_content,
    upload_file_to_folder,
)


def test_find_file_returns_first_match():
    drive = MagicMock()
    drive.files.return_value.list.return_value.execute.return_value = {
        "files": [{"id": "f1", "name": "r.docx"}]
    }

    found = find_file_in_folder_by_name(drive, "folder", "r.docx")

    assert found == {"id": "f1", "name": "r.docx"}
    query = drive.files.return_value.list.call_args.kwargs["q"]
    assert "name = 'r.docx'" in query
    assert "'folder' in parents" in query


def test_find_file_none():
    drive = MagicMock()
    drive.files.return_value.list.return_value.execute.return_value = {}
    assert find_file_in_folder_by_name(drive, "folder", "r.docx") is None


def test_upload_and_replace():
    drive = MagicMock()
    drive.files.return_value.create.return_value.execute.return_value = {"id": "new"}
    drive.files.return_value.update.return_value.execute.return_value = {"id": "old"}

    created = upload_file_to_folder(drive, "folder", "r.csv", "text/csv", io.BytesIO(b"a,b"))
    replaced = replace_file_content(drive, "old", "text/csv", io.BytesIO(b"a,b"))

    assert created == {"id": "new"}
    assert drive.files.return_value.create.call_args.kwargs["body"] == {
        "name": "r.csv", "parents": ["folder"],
    }
    assert replaced == {"id": "old"}
    assert drive.files.return_value.update.call_args.kwargs["fileId"] == "old"
