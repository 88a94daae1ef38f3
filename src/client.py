"""YouTube service factory for chatreel.

The OAuth token is created once by ``chatreel auth`` and reused here; this
module never starts an interactive login, so a sync run either has working
credentials up front or fails before touching any chat source.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from core.errors import ConfigurationError

SCOPES = ["https://www.googleapis.com/auth/youtube"]


def token_path_from_env() -> str:
    load_dotenv()
    return os.getenv("YOUTUBE_TOKEN_PATH", "token.json")


def credentials_path_from_env() -> str:
    load_dotenv()
    return os.getenv("YOUTUBE_CREDENTIALS_PATH", "credentials.json")


def save_token(credentials: Credentials, token_path: str) -> None:
    with open(token_path, "w", encoding="utf-8") as handle:
        handle.write(credentials.to_json())


def load_credentials(token_path: str) -> Credentials:
    """Load the stored token, refreshing it when it has expired."""

    # Fail fast on a missing token to avoid an ambiguous API error later.
    if not os.path.exists(token_path):
        raise ConfigurationError(
            f"YouTube token not found at {token_path}. Authentication required: run `chatreel auth` first."
        )

    credentials = Credentials.from_authorized_user_file(token_path, SCOPES)
    if credentials.valid:
        return credentials

    if not (credentials.expired and credentials.refresh_token):
        raise ConfigurationError("Stored YouTube token is not usable. Run `chatreel auth` again.")
    try:
        credentials.refresh(Request())
    except RefreshError as exc:
        raise ConfigurationError(f"Could not refresh YouTube token: {exc}. Run `chatreel auth` again.") from exc
    save_token(credentials, token_path)
    return credentials


def build_client(token_path: str = ""):
    """Create a YouTube Data API v3 service from the stored token."""

    credentials = load_credentials(token_path or token_path_from_env())
    logging.getLogger(__name__).info("Initializing YouTube client")
    return build("youtube", "v3", credentials=credentials, cache_discovery=False)
