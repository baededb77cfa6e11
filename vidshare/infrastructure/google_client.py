import json

from google.cloud import storage
from google.oauth2 import service_account

from vidshare.config import Settings

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


def load_credentials(settings: Settings):
    """
    Returns (credentials, project_id) from the service-account key file.
    """
    key_path = settings.google_credentials_path
    if not key_path.exists():
        raise FileNotFoundError(f"Missing key file at: {key_path}")

    with open(key_path) as f:
        project_id = json.load(f)["project_id"]

    creds = service_account.Credentials.from_service_account_file(str(key_path), scopes=SCOPES)
    return creds, project_id


def create_storage_client(settings: Settings) -> storage.Client:
    creds, project_id = load_credentials(settings)
    return storage.Client(credentials=creds, project=project_id)
