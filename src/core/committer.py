"""Sequential, paced application of additions to the remote playlist."""

from __future__ import annotations

import logging
import time
from typing import AbstractSet, Callable, List, Optional, Sequence

from core.config import CommitConfig
from core.errors import (
    ConflictError,
    NotFoundError,
    RemoteError,
    RemotePermissionError,
    remote_error_from_status,
)
from core.models import (
    ADDED,
    ERROR_OTHER,
    ERROR_PERMISSION,
    SKIPPED_BLACKLISTED,
    SKIPPED_DUPLICATE,
    SKIPPED_NOT_FOUND,
    CommitResult,
)
from core.ports import PlaylistPort

LOGGER = logging.getLogger(__name__)


def outcome_for_error(exc: Exception, inserting: bool = False) -> str:
    """Map an exception raised by a remote call to a commit outcome.

    Only a lookup can end in skipped:not_found; a missing playlist or video
    reported by insert is an error.
    """

    if not isinstance(exc, RemoteError):
        status = getattr(exc, "status", None) or getattr(exc, "code", None)
        exc = remote_error_from_status(status if isinstance(status, int) else None, str(exc))

    if isinstance(exc, ConflictError):
        return SKIPPED_DUPLICATE
    if isinstance(exc, NotFoundError) and not inserting:
        return SKIPPED_NOT_FOUND
    if isinstance(exc, RemotePermissionError):
        return ERROR_PERMISSION
    return ERROR_OTHER


def _message_for(identifier: str, outcome: str, detail: str = "") -> str:
    if outcome == SKIPPED_BLACKLISTED:
        return f"Video {identifier} is blacklisted - skipping"
    if outcome == SKIPPED_NOT_FOUND:
        return f"Video {identifier} not found - skipping"
    if outcome == SKIPPED_DUPLICATE:
        return f"Already exists: {identifier}"
    if outcome == ERROR_PERMISSION:
        return f"Permission denied for {identifier} - check playlist permissions"
    return f"Error adding {identifier}: {detail}"


class PlaylistCommitter:
    """Adds identifiers one at a time with a fixed pause between calls."""

    def __init__(
        self,
        playlist: PlaylistPort,
        excluded_identifiers: AbstractSet[str],
        config: Optional[CommitConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._playlist = playlist
        self._excluded = excluded_identifiers
        self._config = config or CommitConfig()
        self._sleep = sleep

    def commit(self, identifiers: Sequence[str]) -> List[CommitResult]:
        """Attempt every identifier; failures become results, never exceptions."""

        results: List[CommitResult] = []
        total = len(identifiers)
        for index, identifier in enumerate(identifiers):
            result = self.commit_one(identifier)
            results.append(result)
            log = LOGGER.error if result.is_error else LOGGER.info
            log("[%s/%s] %s", index + 1, total, result.message)

            if index < total - 1:
                self._sleep(self._config.delay_seconds)
        return results

    def commit_one(self, identifier: str) -> CommitResult:
        # Excluded ids never reach the remote, even without prior reconciliation.
        if identifier in self._excluded:
            return CommitResult(identifier, SKIPPED_BLACKLISTED, _message_for(identifier, SKIPPED_BLACKLISTED))

        try:
            info = self._playlist.lookup(identifier)
        except Exception as exc:
            outcome = outcome_for_error(exc)
            return CommitResult(identifier, outcome, _message_for(identifier, outcome, str(exc)))
        if info is None:
            return CommitResult(identifier, SKIPPED_NOT_FOUND, _message_for(identifier, SKIPPED_NOT_FOUND))

        try:
            self._playlist.insert(identifier)
        except Exception as exc:
            outcome = outcome_for_error(exc, inserting=True)
            return CommitResult(identifier, outcome, _message_for(identifier, outcome, str(exc)))

        title = info.title or identifier
        return CommitResult(identifier, ADDED, f"Added: {title}", title=title)
