"""Signal Desktop storage adapter.

Opens the SQLCipher-encrypted Signal database read-only and yields raw rows
of one group conversation. Mapping rows to core messages happens in
core.normalizer; this module only knows about files and SQL.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Iterator, Mapping, Optional

from core.errors import ChatSourceError, ConfigurationError

LOGGER = logging.getLogger(__name__)

Connector = Callable[[str, str], Any]


def _connect_sqlcipher(db_path: str, key: str):
    """Open the database with the cipher settings Signal Desktop uses."""

    # Imported lazily so importing this module does not need the native build.
    import sqlcipher3

    conn = sqlcipher3.connect(f"file:{db_path}?mode=ro", uri=True)
    conn.execute("PRAGMA cipher='sqlcipher'")
    conn.execute("PRAGMA legacy=4")
    conn.execute(f"PRAGMA key=\"x'{key}'\"")
    return conn


class SignalStore:
    """Read-only access to the messages of a single Signal group."""

    def __init__(
        self,
        signal_path: str,
        group_name: str,
        connect: Connector = _connect_sqlcipher,
    ) -> None:
        if not group_name:
            raise ConfigurationError("SIGNAL_GROUP_NAME environment variable is required")
        self._signal_path = signal_path
        self._group_name = group_name
        self._connect = connect
        self._conn = None

    @property
    def db_path(self) -> str:
        return os.path.join(self._signal_path, "sql", "db.sqlite")

    def _read_key(self) -> str:
        config_path = os.path.join(self._signal_path, "config.json")
        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                credentials = json.load(handle)
        except OSError as exc:
            raise ChatSourceError(f"Cannot read Signal config at {config_path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Signal config at {config_path} is not valid JSON: {exc}") from exc

        key = credentials.get("key")
        if not key:
            raise ConfigurationError(f"No database key found in {config_path}")
        return key

    def open(self) -> "SignalStore":
        if self._conn is not None:
            return self
        key = self._read_key()
        if not os.path.exists(self.db_path):
            raise ChatSourceError(f"Signal database not found at {self.db_path}")
        LOGGER.info("Opening Signal database %s", self.db_path)
        try:
            self._conn = self._connect(self.db_path, key)
        except Exception as exc:
            raise ChatSourceError(f"Cannot open Signal database {self.db_path}: {exc}") from exc
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None

    def __enter__(self) -> "SignalStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_conn(self):
        if self._conn is None:
            raise ChatSourceError("Signal database is not open")
        return self._conn

    def find_conversation_id(self) -> str:
        row = self._require_conn().execute(
            "SELECT id FROM conversations WHERE name = ?",
            (self._group_name,),
        ).fetchone()
        if row is None:
            raise ConfigurationError(f"Conversation '{self._group_name}' not found")
        return row[0]

    def iter_message_rows(self, conversation_id: Optional[str] = None) -> Iterator[Mapping[str, Any]]:
        """Yield message rows with a body, as plain dicts."""

        conn = self._require_conn()
        conversation_id = conversation_id or self.find_conversation_id()
        cursor = conn.execute(
            """
            SELECT id, body, sent_at, timestamp, sourceServiceId, type
            FROM messages
            WHERE conversationId = ? AND body IS NOT NULL AND body != 'NULL'
            """,
            (conversation_id,),
        )
        columns = [description[0] for description in cursor.description]
        for row in cursor:
            yield dict(zip(columns, row))
