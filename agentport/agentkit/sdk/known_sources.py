"""Persisted, most-recently-used-first list of sources that loaded successfully."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable, Sequence

from pydantic import TypeAdapter, ValidationError

from agentkit.adapters.stores import KeyValueStore

logger = logging.getLogger(__name__)

KNOWN_SOURCES_KEY = "known_sources"

_SOURCE_LIST = TypeAdapter(list[str])


def promote(current: Sequence[str], used: Sequence[str]) -> list[str]:
    """Move ``used`` to the front of ``current``, keeping the rest in order.

    A source used by several slots of one batch appears once, at its first
    position. Applying the same ``used`` twice gives the same result as once.

    >>> promote(["x", "y", "z"], ["y", "w"])
    ['y', 'w', 'x', 'z']
    """
    front = list(dict.fromkeys(used))
    promoted = set(front)
    return front + [source for source in current if source not in promoted]


class KnownSources:
    """The known-source list backed by a key-value store.

    Read once on construction; written in full on every :meth:`promote`.
    """

    def __init__(self, store: KeyValueStore, key: str = KNOWN_SOURCES_KEY) -> None:
        self.store = store
        self.key = key
        self._sources: list[str] = self._load()

    def _load(self) -> list[str]:
        """Read the stored list; missing or unparseable means empty."""
        try:
            raw = self.store.get(self.key)
        except (OSError, ValueError, sqlite3.Error) as e:
            logger.warning("Could not read known sources from %s: %s", self.key, e)
            return []
        if raw is None:
            return []
        try:
            sources = _SOURCE_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Ignoring unparseable known sources under '%s': %s",
                self.key,
                e.errors()[0]["msg"] if e.errors() else e,
            )
            return []
        # stored lists written by older versions may contain duplicates
        return list(dict.fromkeys(sources))

    @property
    def sources(self) -> list[str]:
        """A copy of the list, most recent first."""
        return list(self._sources)

    def promote(self, used: Iterable[str]) -> list[str]:
        """Move ``used`` to the front and persist the whole list."""
        updated = promote(self._sources, list(used))
        self.store.set(self.key, json.dumps(updated))
        self._sources = updated
        logger.info("Known sources updated (%d entries)", len(updated))
        return self.sources

    def clear(self) -> None:
        """Forget every known source."""
        self.store.delete(self.key)
        self._sources = []

    def __iter__(self):
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source: object) -> bool:
        return source in self._sources
