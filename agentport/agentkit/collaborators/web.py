"""Collaborator driven over HTTP: one pending request, resolved by a submit call.

The importer awaits :meth:`WebCollaborator.request_sources`; the server
exposes :attr:`pending` and :attr:`failures` to the browser and calls
:meth:`submit` when the user presses "Import".
"""

from __future__ import annotations

import asyncio
import logging

from agentkit.errors import BatchInProgressError, NoPendingRequestError
from agentkit.models.batch import BatchRequest, SlotFailure

logger = logging.getLogger(__name__)


class WebCollaborator:
    """Holds at most one pending request as an asyncio future."""

    def __init__(self) -> None:
        self._pending: BatchRequest | None = None
        self._future: asyncio.Future[list[str]] | None = None
        self.failures: list[SlotFailure] = []  # failures of the last submit
        self.dismissed = False

    @property
    def pending(self) -> BatchRequest | None:
        """The request waiting for sources, if any."""
        return self._pending

    async def request_sources(self, request: BatchRequest) -> list[str]:
        if self._future is not None and not self._future.done():
            raise BatchInProgressError("Another request is already waiting for sources")

        self._future = asyncio.get_running_loop().create_future()
        self._pending = request
        self.dismissed = False
        logger.info(
            "Waiting for %d source(s) (batch %s, attempt %d)",
            request.slot_count,
            request.batch_id,
            request.attempt,
        )
        try:
            return await self._future
        finally:
            self._pending = None
            self._future = None

    def submit(self, sources: list[str]) -> None:
        """Resolve the pending request with the user's sources.

        Raises:
            NoPendingRequestError: if no request is waiting.
            ValueError: if the number of sources does not match the slot count.
        """
        request = self._pending
        if request is None or self._future is None or self._future.done():
            raise NoPendingRequestError("No import is waiting for sources")
        if len(sources) != request.slot_count:
            raise ValueError(
                f"Expected {request.slot_count} source(s), got {len(sources)}"
            )
        self.failures = []
        self._pending = None
        self._future.set_result(list(sources))

    async def report_failure(self, failure: SlotFailure) -> None:
        self.failures.append(failure)

    async def dismiss(self) -> None:
        self.failures = []
        self.dismissed = True
