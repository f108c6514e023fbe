"""SDK for loading agents and keeping them in a registry."""

from agentkit.sdk.importer import AgentImporter
from agentkit.sdk.known_sources import KNOWN_SOURCES_KEY, KnownSources, promote
from agentkit.sdk.loader import AgentLoader, bind_functions, find_namespace
from agentkit.sdk.registry import AgentRegistry, open_registry

__all__ = [
    "AgentImporter",
    "AgentLoader",
    "AgentRegistry",
    "KNOWN_SOURCES_KEY",
    "KnownSources",
    "bind_functions",
    "find_namespace",
    "open_registry",
    "promote",
]
