from __future__ import annotations

import pytest

from core.errors import (
    ConflictError,
    NotFoundError,
    RemotePermissionError,
    UnclassifiedRemoteError,
    remote_error_from_status,
)


@pytest.mark.parametrize(
    ("status", "message", "reason", "expected"),
    [
        (409, "Conflict", None, ConflictError),
        (400, "Bad request", "videoAlreadyInPlaylist", ConflictError),
        (None, "Duplicate video in playlist", None, ConflictError),
        (404, "Not Found", None, NotFoundError),
        (400, "Bad request", "videoNotFound", NotFoundError),
        (403, "Forbidden", "playlistItemsNotAccessible", RemotePermissionError),
        (403, "Forbidden", None, RemotePermissionError),
        (403, "Quota", "quotaExceeded", UnclassifiedRemoteError),
        (500, "Backend Error", "backendError", UnclassifiedRemoteError),
        (None, "", None, UnclassifiedRemoteError),
    ],
)
def test_remote_error_from_status(status, message, reason, expected) -> None:
    error = remote_error_from_status(status, message, reason)

    assert type(error) is expected
    assert error.status == status
    assert error.reason == reason
