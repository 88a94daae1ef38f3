"""Deduplication helpers (core domain)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from core.models import LinkRecord

LOGGER = logging.getLogger(__name__)

# identifier + sender + time: the same link re-shared later is a new event.
POLICY_WITH_TIME = "identifier_sender_time"
# identifier + sender: repeats from one sender collapse onto the earliest share.
POLICY_WITHOUT_TIME = "identifier_sender"

POLICIES = (POLICY_WITH_TIME, POLICY_WITHOUT_TIME)


@dataclass(frozen=True)
class DedupResult:
    """Survivors plus counts for operator visibility."""

    records: List[LinkRecord]
    total: int

    @property
    def removed(self) -> int:
        return self.total - len(self.records)


def _sender_part(sender_id: Optional[str]) -> str:
    return "null" if sender_id is None else sender_id


def dedup_key(record: LinkRecord, policy: str) -> str:
    """Return the deduplication key of a record under a policy."""

    if policy == POLICY_WITH_TIME:
        return f"{record.identifier}:{_sender_part(record.sender_id)}:{record.timestamp_ms}"
    if policy == POLICY_WITHOUT_TIME:
        return f"{record.identifier}:{_sender_part(record.sender_id)}"
    raise ValueError(f"Unsupported dedup policy: {policy}")


def deduplicate(records: Iterable[LinkRecord], policy: str) -> DedupResult:
    """Collapse records to one per key, in first-seen key order.

    With time in the key the first record wins. Without it, every record for a
    key has to be seen before the earliest one can be picked, so the whole
    input is buffered.
    """

    if policy not in POLICIES:
        raise ValueError(f"Unsupported dedup policy: {policy}")

    survivors: Dict[str, LinkRecord] = {}
    total = 0
    for record in records:
        total += 1
        key = dedup_key(record, policy)
        current = survivors.get(key)
        if current is None:
            survivors[key] = record
        elif policy == POLICY_WITHOUT_TIME and record.timestamp_ms < current.timestamp_ms:
            # Reassigning an existing key keeps its original insertion position.
            survivors[key] = record

    result = DedupResult(records=list(survivors.values()), total=total)
    if result.removed:
        LOGGER.info("Removed %s duplicate entries (%s -> %s)", result.removed, total, len(result.records))
    return result


def unique_identifiers(records: Iterable[LinkRecord]) -> Iterator[str]:
    """Yield each identifier once, in first-seen order."""

    seen: set[str] = set()
    for record in records:
        if record.identifier in seen:
            continue
        seen.add(record.identifier)
        yield record.identifier
