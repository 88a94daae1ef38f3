from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from googleapiclient.errors import HttpError

from adapters.youtube_playlist import YouTubePlaylistClient, translate_http_error
from core.errors import ConflictError, NotFoundError, RemotePermissionError, UnclassifiedRemoteError


def _http_error(status: int, message: str, reason: Optional[str] = None) -> HttpError:
    error: dict[str, Any] = {"code": status, "message": message}
    if reason:
        error["errors"] = [{"reason": reason, "message": message}]
    content = json.dumps({"error": error}).encode("utf-8")
    return HttpError(resp=SimpleNamespace(status=status, reason=message), content=content)


class FakeRequest:
    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self._response = response
        self._error = error

    def execute(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._response


class FakeResource:
    def __init__(self, responses: dict[str, list[FakeRequest]]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, dict]] = []

    def _next(self, method: str, kwargs: dict) -> FakeRequest:
        self.calls.append((method, kwargs))
        return self._responses[method].pop(0)

    def list(self, **kwargs) -> FakeRequest:
        return self._next("list", kwargs)

    def insert(self, **kwargs) -> FakeRequest:
        return self._next("insert", kwargs)


class FakeService:
    def __init__(self, playlist_items=None, videos=None, playlists=None) -> None:
        self.playlist_items = FakeResource(playlist_items or {})
        self.video_resource = FakeResource(videos or {})
        self.playlist_resource = FakeResource(playlists or {})

    def playlistItems(self) -> FakeResource:
        return self.playlist_items

    def videos(self) -> FakeResource:
        return self.video_resource

    def playlists(self) -> FakeResource:
        return self.playlist_resource


def test_lists_identifiers_across_pages() -> None:
    service = FakeService(
        playlist_items={
            "list": [
                FakeRequest({"items": [{"contentDetails": {"videoId": "a"}}], "nextPageToken": "p2"}),
                FakeRequest({"items": [{"contentDetails": {"videoId": "b"}}, {"contentDetails": {}}]}),
            ]
        }
    )

    identifiers = YouTubePlaylistClient(service, "PL1").list_identifiers()

    assert identifiers == {"a", "b"}
    calls = service.playlist_items.calls
    assert [kwargs["pageToken"] for _, kwargs in calls] == [None, "p2"]
    assert all(kwargs["playlistId"] == "PL1" and kwargs["maxResults"] == 50 for _, kwargs in calls)


def test_lookup_returns_title_or_none() -> None:
    service = FakeService(
        videos={
            "list": [
                FakeRequest({"items": [{"snippet": {"title": "Song"}}]}),
                FakeRequest({"items": []}),
            ]
        }
    )
    client = YouTubePlaylistClient(service, "PL1")

    info = client.lookup("abc")

    assert info is not None
    assert info.title == "Song"
    assert client.lookup("missing") is None


def test_insert_sends_resource_body() -> None:
    service = FakeService(playlist_items={"insert": [FakeRequest({"id": "item"})]})

    assert YouTubePlaylistClient(service, "PL1").insert("abc") == {"id": "item"}

    _, kwargs = service.playlist_items.calls[0]
    assert kwargs["part"] == "snippet"
    assert kwargs["body"]["snippet"] == {
        "playlistId": "PL1",
        "resourceId": {"kind": "youtube#video", "videoId": "abc"},
    }


def test_insert_conflict_is_translated() -> None:
    error = _http_error(409, "Video already in playlist", "videoAlreadyInPlaylist")
    service = FakeService(playlist_items={"insert": [FakeRequest(error=error)]})

    with pytest.raises(ConflictError) as excinfo:
        YouTubePlaylistClient(service, "PL1").insert("abc")

    assert excinfo.value.status == 409
    assert excinfo.value.reason == "videoAlreadyInPlaylist"


@pytest.mark.parametrize(
    ("status", "reason", "expected"),
    [
        (404, "videoNotFound", NotFoundError),
        (403, "forbidden", RemotePermissionError),
        (403, "quotaExceeded", UnclassifiedRemoteError),
        (500, None, UnclassifiedRemoteError),
    ],
)
def test_translate_http_error(status: int, reason: Optional[str], expected) -> None:
    assert type(translate_http_error(_http_error(status, "failure", reason))) is expected


def test_list_playlists() -> None:
    service = FakeService(playlists={"list": [FakeRequest({"items": [{"id": "PL1"}, {"id": "PL2"}]})]})

    assert [item["id"] for item in YouTubePlaylistClient(service, "").list_playlists()] == ["PL1", "PL2"]
    assert service.playlist_resource.calls[0][1]["mine"] is True
