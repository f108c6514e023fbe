"""Protocol between the batch importer and whatever asks the user for sources."""

from typing import Protocol

from agentkit.models.batch import BatchRequest, SlotFailure


class Collaborator(Protocol):
    """Presentation layer for one import batch.

    ``request_sources`` may be called again with a new attempt of the same
    request after a batch fails.
    """

    async def request_sources(self, request: BatchRequest) -> list[str]:
        """Ask for one source per slot and return them once the user submits."""
        ...

    async def report_failure(self, failure: SlotFailure) -> None:
        """Show a per-slot failure to the user as soon as it happens."""
        ...

    async def dismiss(self) -> None:
        """Close the prompt after the batch committed."""
        ...
