"""Flat-map normalized messages into link records."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from core.extractor import DEFAULT_PATTERNS, LinkPattern, extract_identifiers
from core.models import LinkRecord, NormalizedMessage


def iter_links(
    messages: Iterable[NormalizedMessage],
    patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS,
) -> Iterator[LinkRecord]:
    for message in messages:
        for identifier in extract_identifiers(message.text, patterns):
            yield LinkRecord(
                identifier=identifier,
                timestamp_ms=message.timestamp_ms,
                sender_id=message.sender_id,
            )


def aggregate_links(
    messages: Iterable[NormalizedMessage],
    patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS,
) -> List[LinkRecord]:
    """Return every link in message order, then pattern order, then match order."""

    return list(iter_links(messages, patterns))


def aggregate_batches(
    batches: Iterable[Iterable[NormalizedMessage]],
    patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS,
) -> List[LinkRecord]:
    """Aggregate batch by batch; equal to one pass over the concatenated input."""

    records: List[LinkRecord] = []
    for batch in batches:
        records.extend(aggregate_links(batch, patterns))
    return records


def sort_by_timestamp(records: Iterable[LinkRecord]) -> List[LinkRecord]:
    """Stable chronological sort; records sharing a timestamp keep their order."""

    return sorted(records, key=lambda record: record.timestamp_ms)
