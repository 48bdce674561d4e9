# services/drive_service.py
from typing import Optional, List, Dict
from googleapiclient.discovery import Resource
from googleapiclient.http import MediaIoBaseUpload


def find_file_in_folder_by_name(
    drive: Resource,
    folder_id: str,
    filename: str,
) -> Optional[Dict]:
    query = (
        f"name = '{filename}' and "
        f"'{folder_id}' in parents and "
        f"trashed = false"
    )

    resp = drive.files().list(
        q=query,
        fields="files(id, name, mimeType, webViewLink)",
        pageSize=1,
    ).execute()

    files: List[Dict] = resp.get("files", [])
    return files[0] if files else None


def upload_file_to_folder(
    drive: Resource,
    folder_id: str,
    filename: str,
    mimetype: str,
    media_stream,
) -> Dict:
    """
    Create `filename` in `folder_id`. Returns {"id": ..., "webViewLink": ...}.
    """
    media = MediaIoBaseUpload(
        media_stream,
        mimetype=mimetype,
        resumable=False,
    )

    metadata = {
        "name": filename,
        "parents": [folder_id],
    }

    return drive.files().create(
        body=metadata,
        media_body=media,
        fields="id, webViewLink",
    ).execute()


def replace_file_content(
    drive: Resource,
    file_id: str,
    mimetype: str,
    media_stream,
) -> Dict:
    media = MediaIoBaseUpload(media_stream, mimetype=mimetype, resumable=False)
    return drive.files().update(
        fileId=file_id,
        media_body=media,
        fields="id, webViewLink",
    ).execute()
