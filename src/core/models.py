"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

ADDED = "added"
SKIPPED_BLACKLISTED = "skipped:blacklisted"
SKIPPED_NOT_FOUND = "skipped:not_found"
SKIPPED_DUPLICATE = "skipped:duplicate"
ERROR_PERMISSION = "error:permission"
ERROR_OTHER = "error:other"


@dataclass(frozen=True)
class NormalizedMessage:
    """One chat message reduced to what link extraction needs."""

    text: str
    timestamp_ms: int
    # None for outgoing messages and messages without an author.
    sender_id: Optional[str]


@dataclass(frozen=True)
class LinkRecord:
    """A single identifier shared in a message."""

    identifier: str
    timestamp_ms: int
    sender_id: Optional[str]


@dataclass(frozen=True)
class VideoInfo:
    """Remote catalog entry returned by a lookup."""

    identifier: str
    title: str


@dataclass(frozen=True)
class CommitResult:
    """Outcome of one committer step."""

    identifier: str
    outcome: str
    message: str
    title: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.outcome.startswith("error:")

    @property
    def is_skipped(self) -> bool:
        return self.outcome.startswith("skipped:")


@dataclass(frozen=True)
class RunStats:
    """Aggregate statistics for one sync run."""

    total_candidates: int
    playlist_size: int
    previously_present: int
    excluded: int
    to_add: int
    added: int
    skipped_by_reason: dict[str, int] = field(default_factory=dict)
    errors_by_reason: dict[str, int] = field(default_factory=dict)

    @property
    def skipped(self) -> int:
        return sum(self.skipped_by_reason.values())

    @property
    def errors(self) -> int:
        return sum(self.errors_by_reason.values())

    @property
    def final_playlist_size(self) -> int:
        return self.playlist_size + self.added

    @property
    def failed(self) -> bool:
        return self.errors > 0

    @property
    def exit_code(self) -> int:
        # Skips are not failures; only error outcomes fail the run.
        return 1 if self.failed else 0
