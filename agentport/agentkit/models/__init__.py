"""Core data models for agentkit."""

from agentkit.models.agent_handle import AgentHandle
from agentkit.models.batch import (
    DEFAULT_LABEL,
    AgentSummary,
    BatchRequest,
    BatchState,
    SlotFailure,
)

__all__ = [
    # Handles
    "AgentHandle",
    # Batch request/report
    "DEFAULT_LABEL",
    "AgentSummary",
    "BatchRequest",
    "BatchState",
    "SlotFailure",
]
