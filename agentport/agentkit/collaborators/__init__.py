"""Collaborators that collect agent sources from a user."""

from agentkit.collaborators.base import Collaborator
from agentkit.collaborators.console import ConsoleCollaborator
from agentkit.collaborators.web import WebCollaborator

__all__ = [
    "Collaborator",
    "ConsoleCollaborator",
    "WebCollaborator",
]
