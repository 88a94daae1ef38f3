"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional


@dataclass(frozen=True)
class ParseOptions:
    """Settings for the line-oriented normalizer."""

    skip_system_messages: bool = True
    strict: bool = False
    # None means the local timezone of the machine running the sync.
    timezone: Optional[tzinfo] = None


@dataclass(frozen=True)
class CommitConfig:
    """Pacing settings for the committer."""

    delay_seconds: float = 1.0
