"""Link pattern compilation and identifier extraction (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List, Sequence


@dataclass(frozen=True)
class LinkPattern:
    """Compiled link pattern; group 1 captures the identifier."""

    name: str
    regex: re.Pattern


@dataclass(frozen=True)
class ExtractedLink:
    """A single identifier match inside a text."""

    identifier: str
    matched_text: str
    pattern_name: str


def build_patterns(patterns_config: Iterable[dict]) -> List[LinkPattern]:
    """Compile pattern configs, skipping disabled entries.

    Every pattern must expose exactly the identifier as its first group.
    """

    compiled: List[LinkPattern] = []
    for entry in patterns_config:
        if not entry.get("enabled", True):
            continue
        regex = re.compile(entry["regex"])
        if regex.groups < 1:
            raise ValueError(f"Pattern {entry['name']!r} has no capture group for the identifier")
        compiled.append(LinkPattern(name=entry["name"], regex=regex))
    return compiled


DEFAULT_PATTERNS: List[LinkPattern] = build_patterns(
    [
        {"name": "youtu.be", "regex": r"youtu\.be/([A-Za-z0-9_-]{11,})"},
        {"name": "youtube.com/watch", "regex": r"youtube\.com/watch\?(?:[^\s#]*?&)?v=([A-Za-z0-9_-]{11,})"},
    ]
)


def extract_links(text: str, patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS) -> List[ExtractedLink]:
    """Return all matches in pattern order, then match order.

    finditer builds a fresh scanner per call, so no match position carries
    over from one text to the next.
    """

    links: List[ExtractedLink] = []
    for pattern in patterns:
        for match in pattern.regex.finditer(text):
            links.append(
                ExtractedLink(
                    identifier=match.group(1),
                    matched_text=match.group(0),
                    pattern_name=pattern.name,
                )
            )
    return links


def extract_identifiers(text: str, patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS) -> List[str]:
    return [link.identifier for link in extract_links(text, patterns)]


def has_match(text: str, patterns: Sequence[LinkPattern] = DEFAULT_PATTERNS) -> bool:
    """Return True as soon as any pattern matches."""

    return any(pattern.regex.search(text) for pattern in patterns)
