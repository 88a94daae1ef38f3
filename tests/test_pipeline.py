from __future__ import annotations

from datetime import timezone

import pytest

import pipeline
from core.config import ParseOptions
from core.errors import ParseError
from core.models import LinkRecord
from pipeline import collect_signal_links, collect_whatsapp_links

EXPORT = "\n".join(
    [
        "25/11/2016, 01:29 - Messages and calls are end-to-end encrypted. Tap to learn more.: x",
        "25/11/2016, 01:30 - +43 677 61419397: check this https://youtu.be/AAAAAAAAAAA",
        "and the continuation https://youtu.be/ZZZZZZZZZZZ",
        "31/02/2017, 10:00 - Anna: broken date https://youtu.be/BBBBBBBBBBB",
        "26/11/2016, 10:00 - Anna: no link",
        "27/11/2016, 10:00 - Anna: https://www.youtube.com/watch?v=CCCCCCCCCCC",
    ]
)


def _write_export(tmp_path) -> str:
    path = tmp_path / "WhatsApp.txt"
    path.write_text(EXPORT, encoding="utf-8")
    return str(path)


def test_collects_whatsapp_links_and_keeps_going_on_bad_lines(tmp_path) -> None:
    options = ParseOptions(timezone=timezone.utc)

    result = collect_whatsapp_links(_write_export(tmp_path), options, batch_size=2)

    assert [record.identifier for record in result.links] == ["AAAAAAAAAAA", "CCCCCCCCCCC"]
    assert result.links[0].sender_id == "+4367761419397"
    assert result.links[1].sender_id == "Anna"
    assert result.total_messages == 3
    assert result.link_messages == 2
    assert len(result.errors) == 1
    assert result.errors[0].line_number == 4


def test_strict_mode_aborts_on_bad_line(tmp_path) -> None:
    options = ParseOptions(strict=True, timezone=timezone.utc)

    with pytest.raises(ParseError):
        collect_whatsapp_links(_write_export(tmp_path), options)


def test_strict_mode_releases_the_export(monkeypatch) -> None:
    released: list[str] = []

    def batches(path: str, batch_size: int = 1000):
        try:
            yield [(1, "31/02/2017, 10:00 - Anna: broken date")]
            yield [(2, "01/03/2017, 10:00 - Anna: later")]
        finally:
            released.append(path)

    monkeypatch.setattr(pipeline, "iter_export_batches", batches)

    with pytest.raises(ParseError):
        collect_whatsapp_links("chat.txt", ParseOptions(strict=True, timezone=timezone.utc))

    assert released == ["chat.txt"]


class FakeSource:
    def __init__(self, rows: list[dict]) -> None:
        self.rows = rows

    def iter_message_rows(self):
        return iter(self.rows)


SIGNAL_ROWS = [
    {"body": "https://youtu.be/AAAAAAAAAAA", "sent_at": 10, "type": "incoming", "sourceServiceId": "u1"},
    {"body": "no link", "sent_at": 20, "type": "incoming", "sourceServiceId": "u2"},
    {"body": "https://youtu.be/BBBBBBBBBBB", "type": "incoming", "sourceServiceId": "u2"},
    {"body": "youtu.be/AAAAAAAAAAA", "sent_at": 5, "type": "outgoing", "sourceServiceId": "me"},
]


def test_collects_signal_links() -> None:
    result = collect_signal_links(FakeSource(SIGNAL_ROWS))

    assert result.links == [
        LinkRecord("AAAAAAAAAAA", 10, "u1"),
        LinkRecord("AAAAAAAAAAA", 5, None),
    ]
    assert result.total_messages == 3
    assert result.link_messages == 2
    assert [error.line_number for error in result.errors] == [3]


def test_signal_strict_mode_raises() -> None:
    with pytest.raises(ParseError):
        collect_signal_links(FakeSource(SIGNAL_ROWS), strict=True)
