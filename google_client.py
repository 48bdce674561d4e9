import os
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from config import load_settings

# Reports are only ever created in a folder we own.
SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
]

TOKEN_FILE = "token_drive.json"


def get_credentials(creds_json: Optional[str] = None):
    creds = None
    creds_json = creds_json or load_settings().google_credentials_json

    if os.path.exists(TOKEN_FILE):
        creds = Credentials.from_authorized_user_file(TOKEN_FILE, SCOPES)

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    else:
        if not creds_json:
            raise RuntimeError("GOOGLE_CREDENTIALS_JSON is not set in the environment")
        flow = InstalledAppFlow.from_client_secrets_file(creds_json, SCOPES)
        creds = flow.run_local_server(port=0)

    with open(TOKEN_FILE, "w") as token:
        token.write(creds.to_json())

    return creds


def get_drive_service():
    creds = get_credentials()
    return build("drive", "v3", credentials=creds)
