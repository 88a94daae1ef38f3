"""Source collection for chat histories.

Each collector enforces the same order:
1) Read raw records from the chat source (file lines or database rows)
2) Normalize each record, collecting or raising ParseErrors per strictness
3) Extract link records from the normalized messages

Deduplication and playlist sync happen afterwards in the app layer, so a
collector's output is the full, unfiltered link stream of one source.
"""

from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from adapters.whatsapp_export import NumberedLine, iter_export_batches
from core.aggregator import aggregate_links
from core.config import ParseOptions
from core.errors import ParseError
from core.extractor import DEFAULT_PATTERNS, LinkPattern, has_match
from core.models import LinkRecord, NormalizedMessage
from core.normalizer import normalize_signal_row, parse_whatsapp_line
from core.ports import MessageRowSource

LOGGER = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Links extracted from one source plus counters for the summary."""

    total_messages: int = 0
    link_messages: int = 0
    links: List[LinkRecord] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)


def _handle_parse_error(error: ParseError, strict: bool, result: ExtractionResult) -> None:
    if strict:
        raise error
    LOGGER.warning("Skipping malformed record: %s", error)
    result.errors.append(error)


def _count_messages(messages: Sequence[NormalizedMessage], patterns: Sequence[LinkPattern], result: ExtractionResult) -> None:
    result.total_messages += len(messages)
    result.link_messages += sum(1 for message in messages if has_match(message.text, patterns))


def normalize_whatsapp_batch(
    batch: Sequence[NumberedLine],
    options: ParseOptions,
    result: ExtractionResult,
) -> List[NormalizedMessage]:
    messages: List[NormalizedMessage] = []
    for line_number, line in batch:
        try:
            message = parse_whatsapp_line(line, line_number, options)
        except ParseError as error:
            _handle_parse_error(error, options.strict, result)
            continue
        if message is not None:
            messages.append(message)
    return messages


def collect_whatsapp_links(
    path: str,
    options: Optional[ParseOptions] = None,
    patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS,
    batch_size: int = 1000,
) -> ExtractionResult:
    """Extract every link record from a WhatsApp text export."""

    options = options or ParseOptions()
    result = ExtractionResult()
    with closing(iter_export_batches(path, batch_size=batch_size)) as batches:
        for batch in batches:
            messages = normalize_whatsapp_batch(batch, options, result)
            _count_messages(messages, patterns, result)
            result.links.extend(aggregate_links(messages, patterns))

    LOGGER.info("Found %s video links in %s messages", len(result.links), result.total_messages)
    return result


def collect_signal_links(
    source: MessageRowSource,
    patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS,
    strict: bool = False,
) -> ExtractionResult:
    """Extract every link record from an open Signal store."""

    result = ExtractionResult()
    messages: List[NormalizedMessage] = []
    for row_number, row in enumerate(source.iter_message_rows(), start=1):
        try:
            messages.append(normalize_signal_row(row, row_number))
        except ParseError as error:
            _handle_parse_error(error, strict, result)

    _count_messages(messages, patterns, result)
    result.links.extend(aggregate_links(messages, patterns))
    LOGGER.info("Found %s video links in %s messages", len(result.links), result.total_messages)
    return result
