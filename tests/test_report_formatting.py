from __future__ import annotations

from adapters.report_formatting import (
    format_extraction_summary,
    format_link_sample,
    format_parse_errors,
    format_playlists,
    format_run_summary,
)
from core.errors import ParseError
from core.models import LinkRecord, RunStats


def test_run_summary_lists_counts_and_failure_hint() -> None:
    stats = RunStats(
        total_candidates=5,
        playlist_size=10,
        previously_present=2,
        excluded=1,
        to_add=2,
        added=1,
        skipped_by_reason={"not_found": 1},
        errors_by_reason={"permission": 1},
    )

    text = format_run_summary(stats, "Signal")

    assert "Total Signal videos:   5" in text
    assert "New videos added:       1" in text
    assert "Skipped:                1 (not found: 1)" in text
    assert "Errors:                 1 (permission: 1)" in text
    assert "Final playlist size:    11" in text
    assert text.endswith("Some videos failed to add. Check errors above.")


def test_run_summary_without_errors_has_no_hint() -> None:
    stats = RunStats(total_candidates=0, playlist_size=0, previously_present=0, excluded=0, to_add=0, added=0)

    text = format_run_summary(stats, "WhatsApp")

    assert "failed" not in text
    assert "Skipped:                0\n" in text


def test_parse_errors_collapse_long_lists() -> None:
    errors = [ParseError("bad", line) for line in range(1, 8)]

    lines = format_parse_errors(errors).splitlines()

    assert lines[0] == "Encountered 7 parsing errors"
    assert lines[1] == "   Line 1: bad"
    assert lines[-1] == "   ... and 4 more errors"
    assert format_parse_errors([]) == ""


def test_extraction_summary_and_sample() -> None:
    summary = format_extraction_summary(total_messages=10, link_messages=3, unique_links=2, errors=0)
    sample = format_link_sample([LinkRecord("AAAAAAAAAAA", 0, None)] * 4)

    assert "Unique video links:        2" in summary
    assert "User: Unknown" in sample
    assert sample.endswith("... and 1 more entries")


def test_format_playlists() -> None:
    playlists = [{"id": "PL1", "snippet": {"title": "Music"}, "contentDetails": {"itemCount": 3}}]

    assert format_playlists(playlists) == "1. Music | PL1 | 3 videos"
    assert format_playlists([]) == "No playlists found for this account."
