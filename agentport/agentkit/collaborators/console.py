"""Terminal collaborator: prompts for one source per slot on stdin."""

import asyncio
from collections.abc import Callable

from agentkit.models.batch import BatchRequest, SlotFailure


class ConsoleCollaborator:
    """Asks for sources with ``input()`` and prints failures.

    An empty answer takes the slot default; ``#N`` picks the N-th known source.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self.input_fn = input_fn
        self.output_fn = output_fn

    async def request_sources(self, request: BatchRequest) -> list[str]:
        if request.attempt == 1:
            self.output_fn("Import agents")
        else:
            self.output_fn(f"Import agents (attempt {request.attempt})")
        self.output_fn("Select or type a source for each agent. Agents need to provide:")
        for name in request.function_names:
            self.output_fn(f"  - {name}")

        if request.suggestions:
            self.output_fn("Known sources:")
            for number, source in enumerate(request.suggestions, start=1):
                self.output_fn(f"  #{number} {source}")

        sources = []
        for label, default in zip(request.labels, request.defaults):
            prompt = f"{label} [{default}]: " if default else f"{label}: "
            # input() blocks, so keep it off the event loop
            answer = (await asyncio.to_thread(self.input_fn, prompt)).strip()
            sources.append(self._resolve_answer(answer, default, request.suggestions))
        return sources

    @staticmethod
    def _resolve_answer(answer: str, default: str, suggestions: list[str]) -> str:
        if not answer:
            return default
        if answer.startswith("#") and answer[1:].isdigit():
            index = int(answer[1:]) - 1
            if 0 <= index < len(suggestions):
                return suggestions[index]
        return answer

    async def report_failure(self, failure: SlotFailure) -> None:
        self.output_fn(f"✗ {failure.describe()}")

    async def dismiss(self) -> None:
        self.output_fn("✓ Agents imported")
