"""In-memory handle for a successfully loaded agent.

Handles hold live callables, so unlike the request/report models they are
plain dataclasses rather than pydantic models. The function table is exposed
as a read-only mapping: callers look functions up by name instead of reading
attributes added at runtime.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from agentkit.utils.identifiers import utc_timestamp


@dataclass(frozen=True)
class AgentHandle:
    """The bound function table of one agent and where it came from."""

    source_id: str
    functions: Mapping[str, Callable[..., Any]]
    loaded_at: str = field(default_factory=utc_timestamp)

    def __post_init__(self) -> None:
        # freeze the table so a committed handle can't be half-mutated later
        object.__setattr__(self, "functions", MappingProxyType(dict(self.functions)))

    def function(self, name: str) -> Callable[..., Any]:
        """Return the bound function ``name``.

        Raises:
            KeyError: if the agent was not loaded with that function.
        """
        try:
            return self.functions[name]
        except KeyError:
            raise KeyError(
                f"Agent from {self.source_id} has no function '{name}'. "
                f"Available: {sorted(self.functions)}"
            ) from None

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call the bound function ``name`` and return its result as-is.

        Coroutine functions return a coroutine; the caller awaits it.
        """
        return self.function(name)(*args, **kwargs)

    @property
    def function_names(self) -> list[str]:
        return list(self.functions)

    def __contains__(self, name: object) -> bool:
        return name in self.functions

    def __repr__(self) -> str:
        return f"AgentHandle(source_id={self.source_id!r}, functions={self.function_names!r})"
