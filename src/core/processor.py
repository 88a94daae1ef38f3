"""Core sync pipeline.

This module is integration-agnostic. It only relies on the playlist port,
enabling other chat sources or playlist backends without changes here.

The run enforces a strict order:
1) Fetch the current playlist contents (fresh snapshot, never updated)
2) Reconcile local identifiers against playlist and exclusion set
3) Commit additions sequentially, paced
4) Build run statistics
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Sequence

from core.committer import PlaylistCommitter
from core.models import ADDED, CommitResult, RunStats
from core.ports import PlaylistPort
from core.reconciler import Reconciliation, reconcile

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncReport:
    """Everything a run produced, for summaries and the exit status."""

    reconciliation: Reconciliation
    results: List[CommitResult]
    stats: RunStats


def build_run_stats(
    reconciliation: Reconciliation,
    results: Sequence[CommitResult],
    playlist_size: int,
) -> RunStats:
    skipped = Counter(r.outcome.split(":", 1)[1] for r in results if r.is_skipped)
    errors = Counter(r.outcome.split(":", 1)[1] for r in results if r.is_error)
    return RunStats(
        total_candidates=len(reconciliation.candidates),
        playlist_size=playlist_size,
        previously_present=len(reconciliation.already_present),
        excluded=len(reconciliation.excluded),
        to_add=len(reconciliation.to_add),
        added=sum(1 for r in results if r.outcome == ADDED),
        skipped_by_reason=dict(skipped),
        errors_by_reason=dict(errors),
    )


class PlaylistSync:
    """Orchestrates reconciliation, commit and statistics for one run."""

    def __init__(
        self,
        playlist: PlaylistPort,
        excluded_identifiers: AbstractSet[str],
        committer: PlaylistCommitter,
    ) -> None:
        self._playlist = playlist
        self._excluded = excluded_identifiers
        self._committer = committer

    def run(self, local_identifiers: Iterable[str]) -> SyncReport:
        """Run one sync over already deduplicated local identifiers."""

        remote = self._playlist.list_identifiers()
        LOGGER.info("Found %s videos in playlist", len(remote))

        reconciliation = reconcile(local_identifiers, remote, self._excluded)
        if reconciliation.excluded:
            LOGGER.info("Found %s blacklisted videos (will be skipped)", len(reconciliation.excluded))

        if reconciliation.is_noop:
            LOGGER.info("Playlist is already up to date")
            results: List[CommitResult] = []
        else:
            LOGGER.info("Found %s new videos to add", len(reconciliation.to_add))
            results = self._committer.commit(reconciliation.to_add)

        stats = build_run_stats(reconciliation, results, playlist_size=len(remote))
        return SyncReport(reconciliation=reconciliation, results=results, stats=stats)
