"""Application entry point for chatreel."""

from __future__ import annotations

import argparse
import importlib
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

from adapters.exclusion_list import load_exclusion_list
from adapters.metadata_store import anonymize_metadata_file, save_link_metadata
from adapters.report_formatting import (
    format_extraction_summary,
    format_link_sample,
    format_parse_errors,
    format_playlists,
    format_run_summary,
)
from adapters.signal_store import SignalStore
from adapters.youtube_playlist import YouTubePlaylistClient
from client import build_client
from core.aggregator import sort_by_timestamp
from core.committer import PlaylistCommitter
from core.config import CommitConfig, ParseOptions
from core.dedup import deduplicate, unique_identifiers
from core.errors import ChatreelError, ChatSourceError, ConfigurationError
from core.processor import PlaylistSync, SyncReport
from pipeline import ExtractionResult, collect_signal_links, collect_whatsapp_links

NAME = "CHATREEL"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)

# Imported by main() so that an invalid config.json is reported as a fatal error.
settings = None


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _load_settings() -> None:
    global settings
    settings = importlib.import_module("settings")


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/chatreel.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _require_playlist_id() -> str:
    if not settings.PLAYLIST_ID:
        raise ConfigurationError(
            "YOUTUBE_PLAYLIST_ID environment variable is required\n\n"
            "Add to your .env file:\nYOUTUBE_PLAYLIST_ID=your_playlist_id"
        )
    return settings.PLAYLIST_ID


def _print_extraction(result: ExtractionResult, unique_links: int) -> None:
    parse_errors = format_parse_errors(result.errors)
    if parse_errors:
        print(parse_errors)
    print(
        format_extraction_summary(
            total_messages=result.total_messages,
            link_messages=result.link_messages,
            unique_links=unique_links,
            errors=len(result.errors),
        )
    )


def _sync_playlist(playlist_id: str, identifiers: list[str], source_label: str) -> int:
    """Reconcile and commit identifiers; return the process exit status."""

    playlist = YouTubePlaylistClient(build_client(settings.TOKEN_PATH), playlist_id)
    excluded = load_exclusion_list(settings.EXCLUSION_LIST_PATH)
    LOGGER.info("Found %s blacklisted videos in %s", len(excluded), settings.EXCLUSION_LIST_PATH)

    committer = PlaylistCommitter(
        playlist,
        excluded,
        config=CommitConfig(delay_seconds=settings.COMMIT_DELAY_SECONDS),
    )
    report: SyncReport = PlaylistSync(playlist, excluded, committer).run(identifiers)
    print(format_run_summary(report.stats, source_label))
    return report.stats.exit_code


def _run_signal() -> int:
    playlist_id = _require_playlist_id()
    store = SignalStore(settings.SIGNAL_PATH, settings.SIGNAL_GROUP_NAME)

    LOGGER.info("Extracting video links from Signal group %r", settings.SIGNAL_GROUP_NAME)
    # The store is closed before any remote call, including when extraction fails.
    with store:
        result = collect_signal_links(store, strict=settings.SIGNAL_STRICT)

    deduplicated = deduplicate(result.links, settings.SIGNAL_DEDUP_POLICY)
    identifiers = list(unique_identifiers(deduplicated.records))
    _print_extraction(result, len(identifiers))
    if settings.SIGNAL_METADATA_PATH:
        save_link_metadata(deduplicated.records, settings.SIGNAL_METADATA_PATH)

    return _sync_playlist(playlist_id, identifiers, "Signal")


def _run_whatsapp(export_path: Optional[str]) -> int:
    playlist_id = _require_playlist_id()
    path = export_path or settings.WHATSAPP_EXPORT_PATH
    options = ParseOptions(
        skip_system_messages=settings.WHATSAPP_SKIP_SYSTEM_MESSAGES,
        strict=settings.WHATSAPP_STRICT,
        timezone=settings.WHATSAPP_TIMEZONE,
    )

    LOGGER.info("Reading WhatsApp export %s", path)
    result = collect_whatsapp_links(path, options, batch_size=settings.WHATSAPP_BATCH_SIZE)

    deduplicated = deduplicate(sort_by_timestamp(result.links), settings.WHATSAPP_DEDUP_POLICY)
    if settings.WHATSAPP_METADATA_PATH:
        save_link_metadata(deduplicated.records, settings.WHATSAPP_METADATA_PATH)

    identifiers = list(unique_identifiers(deduplicated.records))
    _print_extraction(result, len(identifiers))
    sample = format_link_sample(deduplicated.records)
    if sample:
        print(sample)

    if not identifiers:
        print("No videos to upload to the YouTube playlist")
        return 0
    return _sync_playlist(playlist_id, identifiers, "WhatsApp")


def _run_auth() -> int:
    from get_session import authorize

    authorize(settings.CREDENTIALS_PATH, settings.TOKEN_PATH)
    print("Authentication successful! You can now use the YouTube API.")
    return 0


def _run_playlists() -> int:
    playlist = YouTubePlaylistClient(build_client(settings.TOKEN_PATH), settings.PLAYLIST_ID or "")
    print(format_playlists(playlist.list_playlists()))
    return 0


def _run_anonymize(paths: list[str]) -> int:
    if not settings.SALT:
        raise ConfigurationError("SALT environment variable is not set. Add a SALT value to your .env file.")
    for path in paths:
        output_path = anonymize_metadata_file(path, settings.SALT)
        print(f"Created anonymized file: {output_path}")
    return 0


def _hint_for(error: ChatreelError) -> Optional[str]:
    message = str(error)
    if settings is None:
        return "Check config.json against config.example.json"
    if "token" in message or "Authentication required" in message:
        return "Please authenticate with YouTube first: chatreel auth"
    if "SIGNAL_GROUP_NAME" in message:
        return 'Add SIGNAL_GROUP_NAME to your .env file, e.g. SIGNAL_GROUP_NAME="Music"'
    if "Conversation" in message:
        return f'Make sure SIGNAL_GROUP_NAME matches exactly. Current value: "{settings.SIGNAL_GROUP_NAME}"'
    if "YOUTUBE_PLAYLIST_ID" in message:
        return "Add YOUTUBE_PLAYLIST_ID=PLxxxxxxxxxxxx to your .env file"
    if isinstance(error, ChatSourceError) and "WhatsApp" in message:
        return "Export your WhatsApp chat and place it at the configured whatsapp.export_path"
    return None


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="chatreel")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("signal", help="Sync video links from the Signal group to the playlist")
    whatsapp_parser = subparsers.add_parser(
        "whatsapp",
        help="Extract video links from a WhatsApp export, save metadata and sync the playlist",
    )
    whatsapp_parser.add_argument("--export", help="Path to the WhatsApp chat export (.txt)")
    subparsers.add_parser("auth", help="Authorize access to your YouTube account")
    subparsers.add_parser("playlists", help="List the playlists of the authorized account")
    anonymize_parser = subparsers.add_parser("anonymize", help="Write anonymized copies of metadata files")
    anonymize_parser.add_argument("files", nargs="+", help="Metadata JSON files")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    _print_banner()

    try:
        _load_settings()
        _configure_logging()
        if args.command == "signal":
            return _run_signal()
        if args.command == "whatsapp":
            return _run_whatsapp(args.export)
        if args.command == "auth":
            return _run_auth()
        if args.command == "playlists":
            return _run_playlists()
        return _run_anonymize(args.files)
    except ChatreelError as error:
        LOGGER.error("Fatal error: %s", error)
        hint = _hint_for(error)
        if hint:
            print(hint)
        return 1


if __name__ == "__main__":
    sys.exit(main())
