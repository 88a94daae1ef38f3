"""Message normalization for Signal rows and WhatsApp export lines."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Mapping, Optional

from core.config import ParseOptions
from core.errors import ParseError
from core.models import NormalizedMessage

# "25/11/2016, 01:29 - +43 677 61419397: message content"
WHATSAPP_LINE_REGEX = re.compile(r"^(\d{1,2}/\d{1,2}/\d{4}),\s(\d{1,2}:\d{2})\s-\s([^:]+):\s(.*)$")

# Notices WhatsApp writes in place of an author when a membership or group
# setting changes and the notice itself contains a colon.
SYSTEM_AUTHOR_PATTERNS = [
    re.compile(r"Messages and calls are end-to-end encrypted"),
    re.compile(r"security code (?:changed|with)"),
    re.compile(r"\bcreated group\b"),
    re.compile(r"\badded\b"),
    re.compile(r"\bleft$"),
    re.compile(r"\bremoved\b"),
    re.compile(r"joined using this group's invite link"),
    re.compile(r"changed the group description"),
    re.compile(r"changed the subject"),
    re.compile(r"changed this group's (?:icon|settings)"),
]

DELETED_BODIES = frozenset({"This message was deleted", "You deleted this message"})

SIGNAL_INCOMING = "incoming"


def _is_system_notice(author: str, body: str) -> bool:
    if body.strip() in DELETED_BODIES:
        return True
    return any(pattern.search(author) for pattern in SYSTEM_AUTHOR_PATTERNS)


def normalize_author(author: str) -> Optional[str]:
    """Return a stable sender id for a WhatsApp author field."""

    trimmed = author.strip()
    if trimmed.startswith("+"):
        # Phone numbers are exported with spaces (often non-breaking) between groups.
        return re.sub(r"\s+", "", trimmed)
    return trimmed or None


def parse_day_first_timestamp(
    date_str: str,
    time_str: str,
    options: ParseOptions,
    line_number: int,
) -> int:
    """Convert a D/M/YYYY date and H:MM time to epoch milliseconds."""

    day, month, year = (int(part) for part in date_str.split("/"))
    hours, minutes = (int(part) for part in time_str.split(":"))
    try:
        moment = datetime(year, month, day, hours, minutes, tzinfo=options.timezone)
    except ValueError as exc:
        raise ParseError(f"Invalid date/time '{date_str}, {time_str}': {exc}", line_number) from exc
    return int(moment.timestamp() * 1000)


def parse_whatsapp_line(
    line: str,
    line_number: int,
    options: Optional[ParseOptions] = None,
) -> Optional[NormalizedMessage]:
    """Parse one export line into a NormalizedMessage.

    Lines that do not match the header grammar are continuation lines of the
    previous message and are dropped without an error. Only a header with an
    impossible date or time raises ParseError.
    """

    options = options or ParseOptions()
    if not line.strip():
        return None

    match = WHATSAPP_LINE_REGEX.match(line)
    if not match:
        return None

    date_str, time_str, author, body = match.groups()
    if options.skip_system_messages and _is_system_notice(author, body):
        return None

    return NormalizedMessage(
        text=body.strip(),
        timestamp_ms=parse_day_first_timestamp(date_str, time_str, options, line_number),
        sender_id=normalize_author(author),
    )


def normalize_signal_row(row: Mapping[str, Any], row_number: int) -> NormalizedMessage:
    """Map a Signal ``messages`` row to a NormalizedMessage.

    Only incoming messages carry a sender id; our own messages map to None.
    """

    data = dict(row)
    missing = [name for name in ("body", "type") if data.get(name) is None]
    timestamp = data.get("sent_at") or data.get("timestamp")
    if timestamp is None:
        missing.append("sent_at/timestamp")
    if missing:
        raise ParseError(f"Missing required field(s): {', '.join(missing)}", row_number)

    sender_id = data.get("sourceServiceId") if data["type"] == SIGNAL_INCOMING else None
    return NormalizedMessage(
        text=str(data["body"]),
        timestamp_ms=int(timestamp),
        sender_id=sender_id or None,
    )
