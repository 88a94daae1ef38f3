"""Human-readable run summaries.

Keeping formatting here prevents drift between the Signal and WhatsApp
commands and keeps the printed reports consistent.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from core.models import LinkRecord, RunStats

DIVIDER = "──────────────"

_SKIP_LABELS = {
    "blacklisted": "blacklisted",
    "not_found": "not found",
    "duplicate": "duplicate",
}


def _format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M %d-%m-%Y")


def format_reasons(counts: dict[str, int], labels: dict[str, str]) -> str:
    if not counts:
        return ""
    parts = [f"{labels.get(reason, reason)}: {count}" for reason, count in sorted(counts.items())]
    return f" ({', '.join(parts)})"


def format_run_summary(stats: RunStats, source_label: str) -> str:
    """Return the end-of-run summary block."""

    lines = [
        "Summary:",
        DIVIDER,
        f"Total {source_label} videos:   {stats.total_candidates}",
        f"Previously in playlist: {stats.previously_present} (playlist size {stats.playlist_size})",
        f"Blacklisted videos:     {stats.excluded}",
        f"New videos added:       {stats.added}",
        f"Skipped:                {stats.skipped}{format_reasons(stats.skipped_by_reason, _SKIP_LABELS)}",
        f"Errors:                 {stats.errors}{format_reasons(stats.errors_by_reason, {})}",
        f"Final playlist size:    {stats.final_playlist_size}",
        DIVIDER,
    ]
    if stats.failed:
        lines.append("Some videos failed to add. Check errors above.")
    return "\n".join(lines)


def format_extraction_summary(
    total_messages: int,
    link_messages: int,
    unique_links: int,
    errors: int,
) -> str:
    lines = [
        "Extraction summary:",
        DIVIDER,
        f"Total messages processed:  {total_messages}",
        f"Messages with video links: {link_messages}",
        f"Unique video links:        {unique_links}",
        f"Errors encountered:        {errors}",
        DIVIDER,
    ]
    return "\n".join(lines)


def format_parse_errors(errors: Sequence[Exception], limit: int = 5) -> str:
    """List parse errors, collapsing long lists to the first few."""

    if not errors:
        return ""
    shown = errors if len(errors) <= limit else errors[: max(limit - 2, 1)]
    lines = [f"Encountered {len(errors)} parsing errors"]
    lines.extend(f"   {error}" for error in shown)
    if len(shown) < len(errors):
        lines.append(f"   ... and {len(errors) - len(shown)} more errors")
    return "\n".join(lines)


def format_link_sample(records: Sequence[LinkRecord], limit: int = 3) -> str:
    """Show the first few extracted links with their sender and date."""

    if not records:
        return ""
    lines = ["Sample extracted data:"]
    for index, record in enumerate(records[:limit], start=1):
        lines.append(f"   {index}. Video: {record.identifier}")
        lines.append(f"      User: {record.sender_id or 'Unknown'}")
        lines.append(f"      Date: {_format_timestamp(record.timestamp_ms)}")
    if len(records) > limit:
        lines.append(f"   ... and {len(records) - limit} more entries")
    return "\n".join(lines)


def format_playlists(playlists: Sequence[dict]) -> str:
    if not playlists:
        return "No playlists found for this account."
    lines = []
    for index, playlist in enumerate(playlists, start=1):
        title = playlist.get("snippet", {}).get("title", "untitled")
        count = playlist.get("contentDetails", {}).get("itemCount", 0)
        lines.append(f"{index}. {title} | {playlist.get('id')} | {count} videos")
    return "\n".join(lines)
