"""WhatsApp text export reader.

Reads the export lazily so large histories are never held in memory as raw
text; only the extracted link records accumulate.
"""

from __future__ import annotations

import os
from typing import Iterator, List, Tuple

from core.errors import ChatSourceError

NumberedLine = Tuple[int, str]


def validate_export_file(path: str) -> None:
    """Fail fast with a clear error when the export cannot be read."""

    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise ChatSourceError(f"Cannot read WhatsApp export file at {path}")


def iter_export_lines(path: str, encoding: str = "utf-8") -> Iterator[NumberedLine]:
    """Yield ``(line_number, line)`` pairs with 1-based line numbers.

    Line endings are stripped (CRLF exports included) and a leading byte order
    mark on the first line is dropped.
    """

    validate_export_file(path)
    try:
        with open(path, "r", encoding=encoding, newline="") as handle:
            for line_number, line in enumerate(handle, start=1):
                line = line.rstrip("\r\n")
                if line_number == 1:
                    line = line.lstrip("\ufeff")
                yield line_number, line
    except (OSError, UnicodeDecodeError) as exc:
        raise ChatSourceError(f"Error reading WhatsApp export file {path}: {exc}") from exc


def iter_export_batches(path: str, batch_size: int = 1000, encoding: str = "utf-8") -> Iterator[List[NumberedLine]]:
    """Yield the export in batches of at most ``batch_size`` numbered lines."""

    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    batch: List[NumberedLine] = []
    for numbered_line in iter_export_lines(path, encoding=encoding):
        batch.append(numbered_line)
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch
