"""Batch importer: ask for sources, load them all, commit all or nothing.

One call to :meth:`AgentImporter.request_batch` runs a batch through

    collecting -> loading -> evaluating -> committed
                                  |
                                  +-> collecting (any slot failed)

and only returns once every slot loaded. Loads of one attempt run
concurrently and are always awaited to completion; a fast failure never
cancels the other slots.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from agentkit.collaborators.base import Collaborator
from agentkit.errors import AgentLoadError, BatchInProgressError
from agentkit.models.agent_handle import AgentHandle
from agentkit.models.batch import BatchRequest, BatchState, SlotFailure
from agentkit.sdk.loader import AgentLoader
from agentkit.sdk.registry import AgentRegistry
from agentkit.utils.identifiers import generate_batch_id

logger = logging.getLogger(__name__)


class AgentImporter:
    """Coordinates import batches between a collaborator, a loader and a registry."""

    def __init__(
        self,
        registry: AgentRegistry,
        collaborator: Collaborator,
        loader: AgentLoader | None = None,
    ) -> None:
        self.registry = registry
        self.collaborator = collaborator
        self.loader = loader or AgentLoader()
        self.state: BatchState | None = None  # None until the first batch starts
        self._active = False

    @property
    def active(self) -> bool:
        """Whether a batch is between collecting and committed."""
        return self._active

    async def request_batch(
        self,
        slot_count: int,
        function_names: Sequence[str],
        labels: Sequence[str] = (),
        first_slot: int = 0,
    ) -> list[AgentHandle]:
        """Import ``slot_count`` agents that each provide ``function_names``.

        Keeps asking the collaborator until every slot loads, then commits the
        handles to slots ``first_slot .. first_slot + slot_count - 1``.

        Args:
            slot_count: Number of agents to import.
            function_names: Functions every agent must provide.
            labels: Optional label per slot; missing labels default to "Source".
            first_slot: Registry slot of the first agent.

        Returns:
            The committed handles, in slot order.

        Raises:
            BatchInProgressError: if another batch is still running.
        """
        if self._active:
            raise BatchInProgressError("An import batch is already in progress")
        if first_slot < 0:
            raise ValueError("first_slot must be >= 0")

        batch_id = generate_batch_id()
        self._active = True
        try:
            attempt = 1
            while True:
                request = self._build_request(batch_id, slot_count, function_names, labels, attempt)
                handles = await self._attempt(request)
                if handles is not None:
                    break
                attempt += 1

            self.registry.commit(handles, first_slot=first_slot)
            self.state = BatchState.committed
            await self.collaborator.dismiss()
            return handles
        finally:
            self._active = False

    def _build_request(
        self,
        batch_id: str,
        slot_count: int,
        function_names: Sequence[str],
        labels: Sequence[str],
        attempt: int,
    ) -> BatchRequest:
        # rebuilt per attempt so suggestions always mirror the stored list
        return BatchRequest(
            batch_id=batch_id,
            slot_count=slot_count,
            function_names=list(function_names),
            labels=list(labels),
            suggestions=self.registry.known_sources.sources,
            attempt=attempt,
        )

    async def _attempt(self, request: BatchRequest) -> list[AgentHandle] | None:
        """Run one collect-and-load round. Returns the handles, or None on failure."""
        self.state = BatchState.collecting
        sources = await self.collaborator.request_sources(request)
        if len(sources) != request.slot_count:
            raise ValueError(
                f"Collaborator returned {len(sources)} source(s) for {request.slot_count} slot(s)"
            )

        tasks = [
            asyncio.ensure_future(self._load_slot(slot, source, request.function_names))
            for slot, source in enumerate(sources)
        ]
        self.state = BatchState.loading
        results = await asyncio.gather(*tasks, return_exceptions=True)
        self.state = BatchState.evaluating

        # anything other than a load error is a bug; surface it once all slots settled
        for result in results:
            if isinstance(result, BaseException):
                raise result

        if any(result is None for result in results):
            failed = sum(1 for result in results if result is None)
            logger.warning(
                "Batch %s attempt %d rejected: %d of %d slot(s) failed",
                request.batch_id,
                request.attempt,
                failed,
                request.slot_count,
            )
            return None
        return list(results)

    async def _load_slot(
        self,
        slot: int,
        source: str,
        function_names: Sequence[str],
    ) -> AgentHandle | None:
        """Load one slot, reporting a failure the moment it happens."""
        try:
            return await self.loader.load(source, function_names)
        except AgentLoadError as e:
            failure = SlotFailure.from_error(slot, e)
            logger.warning(
                "Slot %d failed to load %r: %s",
                slot,
                source,
                e.user_message,
                exc_info=e.__cause__ is not None,
            )
            await self.collaborator.report_failure(failure)
            return None
