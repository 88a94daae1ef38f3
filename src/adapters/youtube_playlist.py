"""YouTube Data API adapter.

Implements the core PlaylistPort on top of a googleapiclient ``youtube``
service. Every HttpError is translated into the core error taxonomy so the
committer never sees a client-library exception.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from googleapiclient.errors import HttpError

from core.errors import RemoteError, remote_error_from_status
from core.models import VideoInfo

LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 50


def _http_error_reason(exc: HttpError) -> Optional[str]:
    try:
        data = json.loads(exc.content.decode("utf-8"))
    except (ValueError, AttributeError):
        return None
    errors = data.get("error", {}).get("errors", []) if isinstance(data, dict) else []
    if errors:
        return errors[0].get("reason")
    return None


def translate_http_error(exc: HttpError) -> RemoteError:
    """Return the core error for a failed API call."""

    status = getattr(exc.resp, "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None
    message = getattr(exc, "reason", None) or str(exc)
    return remote_error_from_status(status, message, _http_error_reason(exc))


class YouTubePlaylistClient:
    """PlaylistPort backed by the YouTube Data API v3."""

    def __init__(self, service, playlist_id: str) -> None:
        self._service = service
        self._playlist_id = playlist_id

    def _execute(self, request, what: str) -> Any:
        try:
            return request.execute()
        except HttpError as exc:
            error = translate_http_error(exc)
            LOGGER.debug("%s failed: %s (status=%s, reason=%s)", what, error, error.status, error.reason)
            raise error from exc

    def list_identifiers(self) -> set[str]:
        """Return the ids of every video in the playlist, across all pages."""

        identifiers: set[str] = set()
        page_token: Optional[str] = None
        while True:
            request = self._service.playlistItems().list(
                part="contentDetails",
                playlistId=self._playlist_id,
                maxResults=PAGE_SIZE,
                pageToken=page_token,
            )
            response = self._execute(request, "playlistItems.list")
            for item in response.get("items", []):
                video_id = item.get("contentDetails", {}).get("videoId")
                if video_id:
                    identifiers.add(video_id)
            page_token = response.get("nextPageToken")
            if not page_token:
                return identifiers

    def lookup(self, identifier: str) -> Optional[VideoInfo]:
        request = self._service.videos().list(part="snippet", id=identifier)
        response = self._execute(request, "videos.list")
        items = response.get("items") or []
        if not items:
            return None
        title = items[0].get("snippet", {}).get("title") or identifier
        return VideoInfo(identifier=identifier, title=title)

    def insert(self, identifier: str) -> dict:
        request = self._service.playlistItems().insert(
            part="snippet",
            body={
                "snippet": {
                    "playlistId": self._playlist_id,
                    "resourceId": {"kind": "youtube#video", "videoId": identifier},
                }
            },
        )
        return self._execute(request, "playlistItems.insert")

    def list_playlists(self) -> list[dict]:
        """Return the playlists owned by the authorized account."""

        playlists: list[dict] = []
        page_token: Optional[str] = None
        while True:
            request = self._service.playlists().list(
                part="snippet,contentDetails",
                mine=True,
                maxResults=PAGE_SIZE,
                pageToken=page_token,
            )
            response = self._execute(request, "playlists.list")
            playlists.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                return playlists
