"""Exceptions raised by the loader, registry and importer."""

from enum import Enum


class LoadErrorKind(str, Enum):
    """Why a single slot failed to load."""

    unreachable = "unreachable"
    missing_namespace = "missing_namespace"
    missing_function = "missing_function"


class AgentKitError(Exception):
    """Base for all agentkit errors."""
    pass


class AgentLoadError(AgentKitError):
    """A source could not be turned into an agent handle.

    Carries a ``user_message`` that tells the user what to fix in the source
    string. The underlying exception, if any, is chained as ``__cause__``.
    """

    kind: LoadErrorKind

    def __init__(self, source_id: str, user_message: str):
        self.source_id = source_id
        self.user_message = user_message
        super().__init__(f"{source_id or '<empty>'}: {user_message}")


class UnreachableSourceError(AgentLoadError):
    """The source could not be fetched or evaluated."""

    kind = LoadErrorKind.unreachable


class MissingNamespaceError(AgentLoadError):
    """The module exports no namespace object to take functions from."""

    kind = LoadErrorKind.missing_namespace


class AmbiguousNamespaceError(MissingNamespaceError):
    """The module exports several namespace objects and marks none of them."""

    def __init__(self, source_id: str, candidates: list[str]):
        self.candidates = candidates
        names = ", ".join(candidates)
        super().__init__(
            source_id,
            f"module exports several namespaces ({names}); "
            "set __agent__ to the one that provides the functions",
        )


class MissingFunctionError(AgentLoadError):
    """A required function is absent from the namespace or not callable."""

    kind = LoadErrorKind.missing_function

    def __init__(self, source_id: str, function_name: str, reason: str = "missing"):
        self.function_name = function_name
        self.reason = reason
        super().__init__(
            source_id,
            f"required function '{function_name}' is {reason}",
        )


class BatchInProgressError(AgentKitError):
    """A batch was requested while another one is still collecting or loading."""
    pass


class EmptySlotError(AgentKitError, LookupError):
    """A registry slot was read before any batch committed a handle to it."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"No agent committed for slot {index}")


class NoPendingRequestError(AgentKitError):
    """Sources were submitted while no batch was waiting for them."""
    pass
