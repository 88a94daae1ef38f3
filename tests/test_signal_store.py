from __future__ import annotations

import json
import os
import sqlite3

import pytest

from adapters.signal_store import SignalStore
from core.errors import ChatSourceError, ConfigurationError


class TrackingConnection:
    def __init__(self, path: str) -> None:
        self._conn = sqlite3.connect(path)
        self.closed = False

    def execute(self, *args):
        return self._conn.execute(*args)

    def close(self) -> None:
        self.closed = True
        self._conn.close()


def _make_profile(root, key: str = "00ff") -> str:
    profile = root / "Signal"
    (profile / "sql").mkdir(parents=True)
    (profile / "config.json").write_text(json.dumps({"key": key}), encoding="utf-8")

    conn = sqlite3.connect(profile / "sql" / "db.sqlite")
    conn.execute("CREATE TABLE conversations (id TEXT, name TEXT)")
    conn.execute(
        "CREATE TABLE messages (id TEXT, conversationId TEXT, body TEXT, sent_at INTEGER,"
        " timestamp INTEGER, sourceServiceId TEXT, type TEXT)"
    )
    conn.executemany(
        "INSERT INTO conversations VALUES (?, ?)",
        [("c1", "Music"), ("c2", "Family")],
    )
    conn.executemany(
        "INSERT INTO messages VALUES (?, ?, ?, ?, ?, ?, ?)",
        [
            ("m1", "c1", "https://youtu.be/AAAAAAAAAAA", 100, 101, "uuid-1", "incoming"),
            ("m2", "c1", None, 200, 201, "uuid-1", "incoming"),
            ("m3", "c1", "NULL", 300, 301, "uuid-2", "incoming"),
            ("m4", "c2", "other group", 400, 401, "uuid-3", "incoming"),
            ("m5", "c1", "mine", 500, 501, None, "outgoing"),
        ],
    )
    conn.commit()
    conn.close()
    return str(profile)


def test_requires_group_name(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        SignalStore(str(tmp_path), "")


def test_yields_rows_of_the_group_only(tmp_path) -> None:
    profile = _make_profile(tmp_path)
    keys: list[str] = []

    def connect(db_path: str, key: str) -> TrackingConnection:
        keys.append(key)
        return TrackingConnection(db_path)

    with SignalStore(profile, "Music", connect=connect) as store:
        rows = list(store.iter_message_rows())

    assert keys == ["00ff"]
    assert [row["id"] for row in rows] == ["m1", "m5"]
    assert rows[0]["sourceServiceId"] == "uuid-1"
    assert rows[0]["sent_at"] == 100
    assert rows[1]["type"] == "outgoing"


def test_unknown_conversation_is_a_configuration_error_and_closes(tmp_path) -> None:
    profile = _make_profile(tmp_path)
    connections: list[TrackingConnection] = []

    def connect(db_path: str, key: str) -> TrackingConnection:
        connections.append(TrackingConnection(db_path))
        return connections[-1]

    with pytest.raises(ConfigurationError, match="Nope"):
        with SignalStore(profile, "Nope", connect=connect) as store:
            list(store.iter_message_rows())

    assert connections[0].closed


def test_missing_key_is_a_configuration_error(tmp_path) -> None:
    profile = _make_profile(tmp_path, key="")

    with pytest.raises(ConfigurationError):
        SignalStore(profile, "Music", connect=lambda path, key: TrackingConnection(path)).open()


def test_missing_profile_is_a_source_error(tmp_path) -> None:
    store = SignalStore(str(tmp_path / "absent"), "Music")

    with pytest.raises(ChatSourceError):
        store.open()


def test_missing_database_is_a_source_error(tmp_path) -> None:
    profile = _make_profile(tmp_path)
    os.remove(os.path.join(profile, "sql", "db.sqlite"))

    with pytest.raises(ChatSourceError):
        SignalStore(profile, "Music").open()
