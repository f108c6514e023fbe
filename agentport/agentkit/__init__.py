"""agentkit - load agents from user-supplied sources at runtime."""

__version__ = "0.1.0"

from agentkit.collaborators import ConsoleCollaborator, WebCollaborator
from agentkit.config import Settings
from agentkit.errors import (
    AgentKitError,
    AgentLoadError,
    AmbiguousNamespaceError,
    BatchInProgressError,
    EmptySlotError,
    LoadErrorKind,
    MissingFunctionError,
    MissingNamespaceError,
    NoPendingRequestError,
    UnreachableSourceError,
)
from agentkit.models import AgentHandle, AgentSummary, BatchRequest, BatchState, SlotFailure
from agentkit.sdk import AgentImporter, AgentLoader, AgentRegistry, open_registry

__all__ = [
    # Models
    "AgentHandle",
    "AgentSummary",
    "BatchRequest",
    "BatchState",
    "SlotFailure",
    # Errors
    "AgentKitError",
    "AgentLoadError",
    "AmbiguousNamespaceError",
    "BatchInProgressError",
    "EmptySlotError",
    "LoadErrorKind",
    "MissingFunctionError",
    "MissingNamespaceError",
    "NoPendingRequestError",
    "UnreachableSourceError",
    # High-level APIs
    "AgentImporter",
    "AgentLoader",
    "AgentRegistry",
    "ConsoleCollaborator",
    "Settings",
    "WebCollaborator",
    "open_registry",
]
