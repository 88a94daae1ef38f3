"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the playlist and chat-source adapters
so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Protocol

from core.models import VideoInfo


class PlaylistPort(Protocol):
    """Remote playlist operations required by the core pipeline."""

    def list_identifiers(self) -> set[str]:
        ...

    def lookup(self, identifier: str) -> Optional[VideoInfo]:
        ...

    def insert(self, identifier: str) -> dict:
        ...


class MessageRowSource(Protocol):
    """Structured chat store yielding raw message rows."""

    def iter_message_rows(self) -> Iterator[Mapping[str, Any]]:
        ...
