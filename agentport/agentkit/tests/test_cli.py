"""Tests for the agentkit command line."""

import json

import pytest

from agentkit import __main__ as cli
from agentkit.adapters.stores import SqliteStore
from agentkit.collaborators.console import ConsoleCollaborator
from agentkit.sdk.known_sources import KNOWN_SOURCES_KEY

AGENT = """
class Agent:
    @staticmethod
    def run(x):
        return x + 1
"""


@pytest.fixture
def store_path(tmp_path, monkeypatch):
    path = tmp_path / "kv.db"
    monkeypatch.setenv("AGENTKIT_STORE_BACKEND", "sqlite")
    monkeypatch.setenv("AGENTKIT_STORE_PATH", str(path))
    return path


class TestSourcesCommand:
    def test_list_sources(self, store_path, capsys):
        SqliteStore(store_path).set(KNOWN_SOURCES_KEY, json.dumps(["a.py", "b.py"]))

        assert cli.main(["sources"]) == 0

        out = capsys.readouterr().out
        assert "#1 a.py" in out
        assert "#2 b.py" in out

    def test_clear_sources(self, store_path, capsys):
        SqliteStore(store_path).set(KNOWN_SOURCES_KEY, json.dumps(["a.py"]))

        assert cli.main(["sources", "--clear"]) == 0

        assert "Forgot 1 known source(s)" in capsys.readouterr().out
        assert SqliteStore(store_path).get(KNOWN_SOURCES_KEY) is None


class TestImportCommand:
    def test_import_from_console(self, store_path, tmp_path, monkeypatch, capsys):
        """Answers typed at the prompt are loaded and remembered."""
        agent = tmp_path / "agent.py"
        agent.write_text(AGENT, encoding="utf-8")
        monkeypatch.setattr(
            cli,
            "ConsoleCollaborator",
            lambda: ConsoleCollaborator(input_fn=lambda prompt: str(agent)),
        )

        assert cli.main(["import", "--functions", "run"]) == 0

        out = capsys.readouterr().out
        assert f"[0] {agent} (run)" in out
        assert "✓ Agents imported" in out
        assert json.loads(SqliteStore(store_path).get(KNOWN_SOURCES_KEY)) == [str(agent)]

    def test_abandoned_import(self, store_path, monkeypatch):
        def interrupted(prompt):
            raise EOFError()

        monkeypatch.setattr(
            cli,
            "ConsoleCollaborator",
            lambda: ConsoleCollaborator(input_fn=interrupted),
        )

        assert cli.main(["import", "--functions", "run"]) == 1

    def test_too_many_labels(self, store_path):
        with pytest.raises(SystemExit):
            cli.main(["import", "--functions", "run", "--labels", "a,b"])

    @pytest.mark.parametrize("functions", ["", ",", " , "])
    def test_empty_function_list(self, store_path, capsys, functions):
        """An empty --functions is a usage error, not a validation traceback."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["import", "--functions", functions])

        assert exc_info.value.code == 2
        assert "--functions must name at least one function" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage: agentkit" in capsys.readouterr().out
