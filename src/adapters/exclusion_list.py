"""Exclusion list loader.

The list is a static JSON document:
{"description": "...", "identifiers": ["abc12345678", ...]}
Older files use "videoIds" instead of "identifiers"; both are accepted.
"""

from __future__ import annotations

import json
import logging
import os

from core.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


def load_exclusion_list(path: str) -> frozenset[str]:
    """Return the excluded identifiers, or an empty set if the file is absent."""

    if not os.path.exists(path):
        LOGGER.warning("Could not find video blacklist at %s, continuing without filtering", path)
        return frozenset()

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Video blacklist {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Video blacklist {path} must be a JSON object")
    identifiers = data.get("identifiers", data.get("videoIds", []))
    if not isinstance(identifiers, list) or not all(isinstance(item, str) for item in identifiers):
        raise ConfigurationError(f"Video blacklist {path} must list identifiers as strings")

    return frozenset(item.strip() for item in identifiers if item.strip())
