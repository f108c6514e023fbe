"""Interface for ``python -m agentkit``."""

import asyncio
import logging
from argparse import ArgumentParser, Namespace
from collections.abc import Sequence

from . import __version__
from .collaborators.console import ConsoleCollaborator
from .config import Settings
from .sdk.importer import AgentImporter
from .sdk.loader import AgentLoader
from .sdk.registry import AgentRegistry, open_registry
from .utils.log_config import setup_logging

__all__ = ["main"]


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def main(args: Sequence[str] | None = None) -> int:
    """Entry point: parse CLI args then dispatch to the chosen command."""
    parser = ArgumentParser(
        prog="agentkit",
        description="agentkit: load agents from user-supplied sources",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=__version__,
    )

    sub = parser.add_subparsers(dest="command")

    # --- import: interactive console batch ---
    imp = sub.add_parser("import", help="Import agents interactively")
    imp.add_argument(
        "--slots",
        type=int,
        default=1,
        help="Number of agents to import (default: 1)",
    )
    imp.add_argument(
        "--functions",
        type=_split,
        required=True,
        help="Comma-separated functions every agent must provide",
    )
    imp.add_argument(
        "--labels",
        type=_split,
        default=[],
        help="Comma-separated label per slot",
    )

    # --- sources: inspect the known-source list ---
    src = sub.add_parser("sources", help="List known sources, most recent first")
    src.add_argument(
        "--clear",
        action="store_true",
        help="Forget every known source",
    )

    # --- serve: run the HTTP server ---
    srv = sub.add_parser("serve", help="Run the agentport HTTP server")
    srv.add_argument("--host", default="127.0.0.1", help="Bind address")
    srv.add_argument("--port", type=int, default=8000, help="Bind port")

    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    settings = Settings.from_env()
    setup_logging(settings.log_level)

    if parsed.command == "import":
        if parsed.slots < 1:
            parser.error("--slots must be at least 1")
        if not parsed.functions:
            parser.error("--functions must name at least one function")
        if len(parsed.labels) > parsed.slots:
            parser.error("more --labels than --slots")
        return _run_import(parsed, settings)
    if parsed.command == "sources":
        return _run_sources(parsed, settings)
    return _run_serve(parsed, settings)


def _print_registry(registry: AgentRegistry) -> None:
    for summary in registry.summaries():
        functions = ", ".join(summary.function_names)
        print(f"[{summary.slot}] {summary.source_id} ({functions})")


def _run_import(parsed: Namespace, settings: Settings) -> int:
    """Execute the import subcommand."""
    registry = open_registry(settings)
    importer = AgentImporter(
        registry,
        ConsoleCollaborator(),
        AgentLoader(timeout=settings.fetch_timeout),
    )
    try:
        asyncio.run(
            importer.request_batch(parsed.slots, parsed.functions, parsed.labels)
        )
    except (KeyboardInterrupt, EOFError):
        logging.warning("Import abandoned")
        return 1
    _print_registry(registry)
    return 0


def _run_sources(parsed: Namespace, settings: Settings) -> int:
    """Execute the sources subcommand."""
    registry = open_registry(settings)
    if parsed.clear:
        count = len(registry.known_sources)
        registry.known_sources.clear()
        print(f"Forgot {count} known source(s)")
        return 0
    for number, source in enumerate(registry.known_sources, start=1):
        print(f"#{number} {source}")
    return 0


def _run_serve(parsed: Namespace, settings: Settings) -> int:
    """Execute the serve subcommand."""
    import uvicorn

    from server.app import create_app

    uvicorn.run(create_app(settings), host=parsed.host, port=parsed.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
