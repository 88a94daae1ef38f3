"""Link metadata JSON files.

The on-disk shape is consumed by the anonymization step and external
tooling, so field names and their order are fixed:
[{"videoId": str, "datetime": int, "userId": str | null}, ...]
"""

from __future__ import annotations

import json
import logging
import os
from typing import Iterable, List

from core.anonymize import anonymize_records
from core.models import LinkRecord

LOGGER = logging.getLogger(__name__)


def record_to_json(record: LinkRecord) -> dict:
    return {
        "videoId": record.identifier,
        "datetime": record.timestamp_ms,
        "userId": record.sender_id,
    }


def record_from_json(entry: dict) -> LinkRecord:
    return LinkRecord(
        identifier=entry["videoId"],
        timestamp_ms=int(entry["datetime"]),
        sender_id=entry.get("userId"),
    )


def save_link_metadata(records: Iterable[LinkRecord], path: str) -> int:
    """Write records to ``path`` (overwriting) and return how many were saved."""

    payload = [record_to_json(record) for record in records]
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
    LOGGER.info("Saved %s links with metadata to %s", len(payload), path)
    return len(payload)


def load_link_metadata(path: str) -> List[LinkRecord]:
    with open(path, "r", encoding="utf-8") as handle:
        return [record_from_json(entry) for entry in json.load(handle)]


def anonymized_path(path: str) -> str:
    root, ext = os.path.splitext(path)
    return f"{root}_anonymized{ext or '.json'}"


def anonymize_metadata_file(input_path: str, salt: str, output_path: str = "") -> str:
    """Write an anonymized copy of a metadata file and return its path."""

    output_path = output_path or anonymized_path(input_path)
    records = load_link_metadata(input_path)
    save_link_metadata(anonymize_records(records, salt), output_path)
    return output_path
