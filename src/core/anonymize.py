"""Salted hashing of sender ids in link metadata."""

from __future__ import annotations

import hashlib
from dataclasses import replace
from typing import Iterable, List

from core.models import LinkRecord


def hash_with_salt(value: str, salt: str) -> str:
    """Return the SHA-256 hex digest of ``value + salt``."""

    return hashlib.sha256(f"{value}{salt}".encode("utf-8")).hexdigest()


def anonymize_records(records: Iterable[LinkRecord], salt: str) -> List[LinkRecord]:
    """Replace every sender id with its salted hash; None stays None."""

    return [
        record if record.sender_id is None else replace(record, sender_id=hash_with_salt(record.sender_id, salt))
        for record in records
    ]
