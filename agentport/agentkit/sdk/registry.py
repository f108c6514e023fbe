"""Ordered registry of committed agent handles.

The registry is an explicit object owned by the host: build one (usually
through :func:`open_registry`), hand it to an :class:`AgentImporter`, and
read agents back with :meth:`AgentRegistry.get`.

Example:
    registry = open_registry()
    importer = AgentImporter(registry, ConsoleCollaborator())
    await importer.request_batch(2, ["move"], ["White", "Black"])
    registry.get(0).call("move", board)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from agentkit.adapters.stores import KeyValueStore, MemoryStore
from agentkit.config import Settings
from agentkit.errors import EmptySlotError
from agentkit.models.agent_handle import AgentHandle
from agentkit.models.batch import AgentSummary
from agentkit.sdk.known_sources import KnownSources

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Slots of agent handles plus the persisted known-source list.

    A slot is either empty or holds a fully loaded handle. Slots only change
    through :meth:`commit`, which replaces a whole batch in one step.
    """

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self.known_sources = KnownSources(store if store is not None else MemoryStore())
        self._slots: list[AgentHandle | None] = []

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, index: int) -> AgentHandle:
        """Return the handle at ``index``.

        Raises:
            EmptySlotError: if no batch has committed a handle to that slot.
        """
        handle = self.slot(index)
        if handle is None:
            raise EmptySlotError(index)
        return handle

    def slot(self, index: int) -> AgentHandle | None:
        """Return the handle at ``index``, or None if the slot is empty."""
        if index < 0 or index >= len(self._slots):
            return None
        return self._slots[index]

    def summaries(self) -> list[AgentSummary]:
        """Describe every filled slot."""
        return [
            AgentSummary(
                slot=index,
                source_id=handle.source_id,
                function_names=handle.function_names,
                loaded_at=handle.loaded_at,
            )
            for index, handle in enumerate(self._slots)
            if handle is not None
        ]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[AgentHandle | None]:
        return iter(list(self._slots))

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def commit(self, handles: Sequence[AgentHandle], first_slot: int = 0) -> None:
        """Install a whole batch and promote its sources.

        ``handles[i]`` goes to slot ``first_slot + i``. The known-source list
        is persisted first; if that fails nothing in the registry changes.
        """
        if not handles:
            raise ValueError("cannot commit an empty batch")
        if first_slot < 0:
            raise ValueError("first_slot must be >= 0")

        self.known_sources.promote(handle.source_id for handle in handles)

        slots = list(self._slots)
        end = first_slot + len(handles)
        if end > len(slots):
            slots.extend([None] * (end - len(slots)))
        slots[first_slot:end] = handles
        self._slots = slots

        logger.info(
            "Committed %d agent(s) to slots %d-%d",
            len(handles),
            first_slot,
            end - 1,
        )

    def __repr__(self) -> str:
        filled = sum(1 for handle in self._slots if handle is not None)
        return f"AgentRegistry(slots={len(self._slots)}, filled={filled}, known_sources={len(self.known_sources)})"


def open_registry(settings: Settings | None = None) -> AgentRegistry:
    """Build a registry over the configured durable store."""
    settings = settings or Settings.from_env()
    return AgentRegistry(settings.open_store())
