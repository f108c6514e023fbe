"""Request and report models for one import batch.

These travel between the importer, the collaborators and the HTTP server,
so they are pydantic models and serialise cleanly to JSON.
"""

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field, model_validator

from agentkit.errors import AgentLoadError, LoadErrorKind, MissingFunctionError

DEFAULT_LABEL = "Source"


class BatchState(str, Enum):
    """Where a batch is in its life cycle."""

    collecting = "collecting"  # waiting for the user to submit sources
    loading = "loading"  # all loads dispatched
    evaluating = "evaluating"  # all loads settled, deciding
    committed = "committed"  # terminal success


class BatchRequest(BaseModel):
    """What the collaborator must ask the user for.

    ``labels`` is padded to ``slot_count`` with ``DEFAULT_LABEL``;
    ``defaults`` pre-fills slot ``i`` with the ``i``-th known source.
    """

    model_config = {"extra": "forbid"}

    batch_id: str
    slot_count: int = Field(ge=1)
    function_names: list[str] = Field(min_length=1)
    labels: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)  # known sources, MRU first
    defaults: list[str] = Field(default_factory=list)
    attempt: int = 1

    @model_validator(mode="after")
    def fill_slots(self) -> Self:
        """Pad labels and defaults so both have one entry per slot."""
        if len(self.labels) > self.slot_count:
            raise ValueError(
                f"got {len(self.labels)} labels for {self.slot_count} slots"
            )
        if any(not name for name in self.function_names):
            raise ValueError("function names must be non-empty strings")
        self.labels = self.labels + [DEFAULT_LABEL] * (self.slot_count - len(self.labels))
        if not self.defaults:
            self.defaults = [
                self.suggestions[i] if i < len(self.suggestions) else ""
                for i in range(self.slot_count)
            ]
        elif len(self.defaults) != self.slot_count:
            raise ValueError("defaults must have one entry per slot")
        return self


class SlotFailure(BaseModel):
    """A per-slot load failure, shown to the user."""

    slot: int
    source_id: str
    kind: LoadErrorKind
    message: str  # what the user should fix
    function_name: str | None = None
    detail: str | None = None  # underlying error, for diagnostics

    @classmethod
    def from_error(cls, slot: int, error: AgentLoadError) -> "SlotFailure":
        cause = error.__cause__
        return cls(
            slot=slot,
            source_id=error.source_id,
            kind=error.kind,
            message=error.user_message,
            function_name=error.function_name if isinstance(error, MissingFunctionError) else None,
            detail=f"{type(cause).__name__}: {cause}" if cause is not None else None,
        )

    def describe(self) -> str:
        """One line for consoles and logs."""
        return f"Slot {self.slot} ({self.source_id or '<empty>'}): {self.message}"


class AgentSummary(BaseModel):
    """Serialisable view of a committed registry slot."""

    slot: int
    source_id: str
    function_names: list[str]
    loaded_at: str
