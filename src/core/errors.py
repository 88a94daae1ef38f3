"""Error taxonomy for the sync pipeline.

Adapters translate integration-specific failures into these types so the
core can classify outcomes without importing any client library.
"""

from __future__ import annotations

from typing import Optional

# Reasons the YouTube API reports with a 403 that are quota problems rather
# than missing permissions.
QUOTA_REASONS = frozenset({"quotaExceeded", "rateLimitExceeded", "userRateLimitExceeded", "dailyLimitExceeded"})
CONFLICT_REASONS = frozenset({"videoAlreadyInPlaylist", "duplicate"})
NOT_FOUND_REASONS = frozenset({"videoNotFound", "notFound"})


class ChatreelError(Exception):
    """Base class for all chatreel errors."""


class ConfigurationError(ChatreelError):
    """Required configuration is missing or malformed. Always fatal."""


class ChatSourceError(ChatreelError):
    """The local chat source could not be opened or read."""


class ParseError(ChatreelError):
    """A single source record could not be parsed."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(f"Line {line_number}: {message}")
        self.line_number = line_number


class RemoteError(ChatreelError):
    """A failed call against the remote playlist system."""

    def __init__(self, message: str, status: Optional[int] = None, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason


class NotFoundError(RemoteError):
    """The identifier is unknown to the remote catalog."""


class ConflictError(RemoteError):
    """The identifier is already present in the playlist."""


class RemotePermissionError(RemoteError):
    """The credentials are not allowed to modify the playlist."""


class UnclassifiedRemoteError(RemoteError):
    """Any other remote failure."""


def remote_error_from_status(
    status: Optional[int],
    message: str,
    reason: Optional[str] = None,
) -> RemoteError:
    """Classify a remote failure into the fixed taxonomy.

    Structured data (HTTP status, API reason) wins; the message text is only
    inspected for the duplicate case, where some endpoints report nothing else.
    """

    message = message or ""
    if status == 409 or reason in CONFLICT_REASONS or "duplicate" in message.lower():
        return ConflictError(message, status=status, reason=reason)
    if status == 404 or reason in NOT_FOUND_REASONS:
        return NotFoundError(message, status=status, reason=reason)
    if status == 403 and reason not in QUOTA_REASONS:
        return RemotePermissionError(message, status=status, reason=reason)
    return UnclassifiedRemoteError(message, status=status, reason=reason)
