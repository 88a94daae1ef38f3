"""Interactive YouTube OAuth login.

Stores the resulting token where client.build_client expects it.
"""

from __future__ import annotations

import logging
import os
from urllib.parse import parse_qs, urlparse

import qrcode
from dotenv import load_dotenv
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from client import SCOPES, credentials_path_from_env, save_token, token_path_from_env
from core.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _create_flow(credentials_path: str) -> InstalledAppFlow:
    if not os.path.exists(credentials_path):
        raise ConfigurationError(
            f"OAuth client secrets not found at {credentials_path}. "
            "Download them from the Google Cloud console."
        )
    return InstalledAppFlow.from_client_secrets_file(credentials_path, SCOPES)


def extract_code(pasted: str) -> str:
    """Accept either the bare code or the whole redirect URL."""

    pasted = pasted.strip()
    if pasted.startswith("http"):
        codes = parse_qs(urlparse(pasted).query).get("code")
        if not codes:
            raise ValueError("The pasted URL does not contain an authorization code")
        return codes[0]
    return pasted


def _authorize_with_paste(flow: InstalledAppFlow) -> Credentials:
    flow.redirect_uri = flow.client_config["redirect_uris"][0]
    auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
    print("Open this URL in your browser (or scan the QR code):")
    print(auth_url)
    _print_qr(auth_url)
    code = extract_code(input("Paste the authorization code (or the redirect URL) here: "))
    flow.fetch_token(code=code)
    return flow.credentials


def _authorize_with_local_server(flow: InstalledAppFlow) -> Credentials:
    return flow.run_local_server(port=0, access_type="offline", prompt="consent")


def _pick_login_method() -> str:
    method = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if method in {"local", "paste"}:
        return method
    while True:
        print("")
        print("Login methods:")
        print("[1] Browser on this machine")
        print("[2] Paste code (URL + QR code)")
        print("[3] Exit")
        print("Select a login method: \n")
        choice = input("chatreel > ").strip()
        if choice == "1":
            return "local"
        elif choice == "2":
            return "paste"
        elif choice == "3":
            raise SystemExit(0)
        else:
            print("Invalid option. Please choose 1, 2, or 3.")


def authorize(credentials_path: str = "", token_path: str = "") -> Credentials:
    """Run the OAuth flow and persist the token."""

    load_dotenv()
    credentials_path = credentials_path or credentials_path_from_env()
    token_path = token_path or token_path_from_env()

    flow = _create_flow(credentials_path)
    if _pick_login_method() == "local":
        credentials = _authorize_with_local_server(flow)
    else:
        credentials = _authorize_with_paste(flow)

    save_token(credentials, token_path)
    LOGGER.info("Authentication successful, token saved to %s", token_path)
    return credentials
