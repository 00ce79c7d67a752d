"""
In-memory result store for one search session.

Entries are addressed by position. Results are never re-sorted or merged, so
a position stays valid until the next replace_all().
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from hostfinder.models import Candidate

log = logging.getLogger(__name__)

Listener = Callable[[int, bool], None]


class ResultStore:
    def __init__(self) -> None:
        self._entries: list[Candidate] = []
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._entries)

    def __getitem__(self, position: int) -> Candidate:
        return self._entries[position]

    def subscribe(self, listener: Listener) -> None:
        """Call listener(position, included) after every effective toggle."""
        self._listeners.append(listener)

    def replace_all(self, candidates: Iterable[Candidate | Mapping[str, Any]]) -> None:
        """Drop the current list and store candidates, all marked included."""
        entries = []
        for c in candidates:
            entry = c.model_copy() if isinstance(c, Candidate) else Candidate.model_validate(c)
            entry.included = True
            entries.append(entry)
        self._entries = entries
        log.info("Result store replaced: %d entries", len(entries))

    def set_included(self, position: int, included: bool) -> None:
        if not 0 <= position < len(self._entries):
            return
        self._entries[position].included = included
        for listener in self._listeners:
            listener(position, included)

    def included_entries(self) -> list[Candidate]:
        return [c for c in self._entries if c.included]
