"""Set difference between local identifiers and the remote playlist."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable, List


@dataclass(frozen=True)
class Reconciliation:
    """Local identifiers split by what the run has to do with them."""

    candidates: List[str]
    already_present: List[str]
    excluded: List[str]
    to_add: List[str]

    @property
    def is_noop(self) -> bool:
        return not self.to_add


def reconcile(
    local_identifiers: Iterable[str],
    remote_identifiers: AbstractSet[str],
    excluded_identifiers: AbstractSet[str],
) -> Reconciliation:
    """Split local identifiers into present, excluded and to-add lists.

    Relative order of ``local_identifiers`` is preserved and repeats are
    dropped even though upstream dedup should already have removed them.
    An identifier both in the playlist and excluded counts as present.
    """

    seen: set[str] = set()
    candidates: List[str] = []
    already_present: List[str] = []
    excluded: List[str] = []
    to_add: List[str] = []

    for identifier in local_identifiers:
        if identifier in seen:
            continue
        seen.add(identifier)
        candidates.append(identifier)
        if identifier in remote_identifiers:
            already_present.append(identifier)
        elif identifier in excluded_identifiers:
            excluded.append(identifier)
        else:
            to_add.append(identifier)

    return Reconciliation(
        candidates=candidates,
        already_present=already_present,
        excluded=excluded,
        to_add=to_add,
    )


def find_new_identifiers(
    local_identifiers: Iterable[str],
    remote_identifiers: AbstractSet[str],
    excluded_identifiers: AbstractSet[str],
) -> List[str]:
    """Return the ordered list of identifiers the playlist is missing."""

    return reconcile(local_identifiers, remote_identifiers, excluded_identifiers).to_add
