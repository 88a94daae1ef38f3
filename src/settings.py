"""Static configuration for chatreel.

User-editable settings (paths, dedup policies, pacing, logging) live in a
single JSON file for quick edits without touching Python. Secrets and
account-specific ids come from the environment (.env via python-dotenv).
"""

import json
import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from core.dedup import POLICIES, POLICY_WITH_TIME, POLICY_WITHOUT_TIME
from core.errors import ConfigurationError

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Settings live in config.json; every key has a default so the file is optional.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

load_dotenv(os.path.join(PROJECT_ROOT, ".env"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {CONFIG_PATH} is not valid JSON: {exc}") from exc


def _project_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


def _policy(value: str) -> str:
    if value not in POLICIES:
        raise ConfigurationError(f"Unsupported dedup policy {value!r}; use one of {', '.join(POLICIES)}")
    return value


def _timezone(name: Optional[str]):
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as exc:
        raise ConfigurationError(f"Unknown timezone {name!r} in whatsapp.timezone") from exc


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# YouTube target playlist and OAuth files.
PLAYLIST_ID = os.getenv("YOUTUBE_PLAYLIST_ID")
CREDENTIALS_PATH = _project_path(os.getenv("YOUTUBE_CREDENTIALS_PATH", "credentials.json"))
TOKEN_PATH = _project_path(os.getenv("YOUTUBE_TOKEN_PATH", "token.json"))

# Signal Desktop profile directory, relative to $HOME.
SIGNAL_PATH = os.path.join(os.path.expanduser("~"), os.getenv("SIGNAL_PATH", ".config/Signal"))
SIGNAL_GROUP_NAME = os.getenv("SIGNAL_GROUP_NAME", "")
_signal = _CONFIG.get("signal", {})
SIGNAL_STRICT = bool(_signal.get("strict", False))

# WhatsApp export parsing.
_whatsapp = _CONFIG.get("whatsapp", {})
WHATSAPP_EXPORT_PATH = _project_path(_whatsapp.get("export_path", "data/WhatsApp-music-group.txt"))
WHATSAPP_SKIP_SYSTEM_MESSAGES = bool(_whatsapp.get("skip_system_messages", True))
WHATSAPP_STRICT = bool(_whatsapp.get("strict", False))
WHATSAPP_BATCH_SIZE = int(_whatsapp.get("batch_size", 1000))
WHATSAPP_TIMEZONE = _timezone(_whatsapp.get("timezone"))

# Deduplication policy per source:
# - "identifier_sender": one record per (video, sender), earliest share wins
# - "identifier_sender_time": one record per (video, sender, timestamp)
_dedup = _CONFIG.get("dedup", {})
SIGNAL_DEDUP_POLICY = _policy(_dedup.get("signal_policy", POLICY_WITHOUT_TIME))
WHATSAPP_DEDUP_POLICY = _policy(_dedup.get("whatsapp_policy", POLICY_WITH_TIME))

# Exclusion list ("blacklist") of identifiers that are never added.
_exclusions = _CONFIG.get("exclusions", {})
EXCLUSION_LIST_PATH = _project_path(_exclusions.get("path", "data/video-blacklist.json"))

# Pause between playlist calls (delay_ms in config.json).
_commit = _CONFIG.get("commit", {})
COMMIT_DELAY_SECONDS = int(_commit.get("delay_ms", 1000)) / 1000

# Metadata output files. An empty path disables writing.
_metadata = _CONFIG.get("metadata", {})
SIGNAL_METADATA_PATH = _project_path(_metadata["signal_output"]) if _metadata.get("signal_output") else ""
_whatsapp_output = _metadata.get("whatsapp_output", "data/youtube_links_metadata_whatsapp.json")
WHATSAPP_METADATA_PATH = _project_path(_whatsapp_output) if _whatsapp_output else ""

# Salt for anonymized metadata copies.
SALT = os.getenv("SALT", "")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {"enabled": True})
