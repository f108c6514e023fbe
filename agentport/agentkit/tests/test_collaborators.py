"""Tests for the console and web collaborators."""

import asyncio

import pytest

from agentkit.collaborators.console import ConsoleCollaborator
from agentkit.collaborators.web import WebCollaborator
from agentkit.errors import (
    BatchInProgressError,
    MissingFunctionError,
    NoPendingRequestError,
)
from agentkit.models.batch import BatchRequest, SlotFailure


def _request(slot_count=2, suggestions=(), attempt=1):
    return BatchRequest(
        batch_id="batch-1",
        slot_count=slot_count,
        function_names=["move", "reset"],
        labels=["White"],
        suggestions=list(suggestions),
        attempt=attempt,
    )


class TestConsoleCollaborator:
    """Test prompting on the terminal."""

    @staticmethod
    def _console(answers):
        answers = list(answers)
        prompts, lines = [], []

        def fake_input(prompt):
            prompts.append(prompt)
            return answers.pop(0)

        return ConsoleCollaborator(input_fn=fake_input, output_fn=lines.append), prompts, lines

    @pytest.mark.asyncio
    async def test_prompts_per_slot_with_labels(self):
        console, prompts, lines = self._console(["a.py", "b.py"])

        sources = await console.request_sources(_request())

        assert sources == ["a.py", "b.py"]
        assert prompts == ["White: ", "Source: "]
        assert "  - move" in lines
        assert "  - reset" in lines

    @pytest.mark.asyncio
    async def test_empty_answer_takes_default(self):
        """Pressing enter accepts the known source offered for the slot."""
        console, prompts, lines = self._console(["", "  "])

        sources = await console.request_sources(_request(suggestions=["x.py", "y.py"]))

        assert sources == ["x.py", "y.py"]
        assert prompts[0] == "White [x.py]: "
        assert "  #1 x.py" in lines

    @pytest.mark.asyncio
    async def test_hash_picks_known_source(self):
        """#N selects the N-th known source; out of range is taken literally."""
        console, _, _ = self._console(["#2", "#9"])

        sources = await console.request_sources(_request(suggestions=["x.py", "y.py"]))

        assert sources == ["y.py", "#9"]

    @pytest.mark.asyncio
    async def test_retry_header(self):
        console, _, lines = self._console(["a.py"])

        await console.request_sources(_request(slot_count=1, attempt=2))

        assert lines[0] == "Import agents (attempt 2)"

    @pytest.mark.asyncio
    async def test_failure_and_dismiss_output(self):
        console, _, lines = self._console([])
        failure = SlotFailure.from_error(1, MissingFunctionError("a.py", "reset"))

        await console.report_failure(failure)
        await console.dismiss()

        assert lines == [
            "✗ Slot 1 (a.py): required function 'reset' is missing",
            "✓ Agents imported",
        ]


class TestWebCollaborator:
    """Test the single pending request resolved by submit()."""

    @pytest.mark.asyncio
    async def test_submit_resolves_pending(self):
        web = WebCollaborator()
        task = asyncio.create_task(web.request_sources(_request()))
        await asyncio.sleep(0)

        assert web.pending is not None
        assert web.pending.batch_id == "batch-1"

        web.submit(["a.py", "b.py"])

        assert await task == ["a.py", "b.py"]
        assert web.pending is None

    def test_submit_without_request(self):
        with pytest.raises(NoPendingRequestError):
            WebCollaborator().submit(["a.py"])

    @pytest.mark.asyncio
    async def test_submit_wrong_count_keeps_request(self):
        """A wrong number of sources is refused and the request stays pending."""
        web = WebCollaborator()
        task = asyncio.create_task(web.request_sources(_request()))
        await asyncio.sleep(0)

        with pytest.raises(ValueError, match="Expected 2"):
            web.submit(["a.py"])

        assert web.pending is not None
        web.submit(["a.py", "b.py"])
        await task

    @pytest.mark.asyncio
    async def test_second_request_rejected(self):
        web = WebCollaborator()
        task = asyncio.create_task(web.request_sources(_request()))
        await asyncio.sleep(0)

        with pytest.raises(BatchInProgressError):
            await web.request_sources(_request())

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert web.pending is None

    @pytest.mark.asyncio
    async def test_failures_cleared_on_submit_and_dismiss(self):
        """Failures describe the last submit only."""
        web = WebCollaborator()
        failure = SlotFailure.from_error(0, MissingFunctionError("a.py", "move"))
        await web.report_failure(failure)
        assert web.failures == [failure]

        task = asyncio.create_task(web.request_sources(_request()))
        await asyncio.sleep(0)
        web.submit(["a.py", "b.py"])
        await task
        assert web.failures == []

        await web.report_failure(failure)
        await web.dismiss()
        assert web.failures == []
        assert web.dismissed
