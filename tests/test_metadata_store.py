from __future__ import annotations

import hashlib
import json

from adapters.metadata_store import (
    anonymize_metadata_file,
    anonymized_path,
    load_link_metadata,
    save_link_metadata,
)
from core.anonymize import hash_with_salt
from core.models import LinkRecord

RECORDS = [
    LinkRecord("AAAAAAAAAAA", 1480037340000, "+4367761419397"),
    LinkRecord("BBBBBBBBBBB", 1480037400000, None),
]


def test_writes_fixed_field_order(tmp_path) -> None:
    path = tmp_path / "out" / "links.json"

    assert save_link_metadata(RECORDS, str(path)) == 2

    data = json.loads(path.read_text(encoding="utf-8"))
    assert [list(entry) for entry in data] == [["videoId", "datetime", "userId"]] * 2
    assert data[1]["userId"] is None
    assert load_link_metadata(str(path)) == RECORDS


def test_anonymized_copy_hashes_senders(tmp_path) -> None:
    path = tmp_path / "links.json"
    save_link_metadata(RECORDS, str(path))

    output = anonymize_metadata_file(str(path), "pepper")

    assert output == str(tmp_path / "links_anonymized.json")
    anonymized = load_link_metadata(output)
    assert anonymized[0].sender_id == hash_with_salt("+4367761419397", "pepper")
    assert anonymized[0].identifier == "AAAAAAAAAAA"
    assert anonymized[1].sender_id is None
    assert load_link_metadata(str(path)) == RECORDS


def test_anonymized_path_keeps_extension() -> None:
    assert anonymized_path("data/a.json") == "data/a_anonymized.json"
    assert anonymized_path("data/a") == "data/a_anonymized.json"


def test_hash_is_salted_sha256() -> None:
    assert hash_with_salt("user", "salt") == hashlib.sha256(b"usersalt").hexdigest()
    assert hash_with_salt("user", "salt") != hash_with_salt("user", "other")
