"""Agent loader: turn a source string into a validated AgentHandle.

A source is one of

- an ``http://`` or ``https://`` URL, fetched with httpx,
- a ``file://`` URL or a path to a ``.py`` file,
- an importable dotted module name (``my_agents.chess``).

The module must export one namespace object (a class, a
``SimpleNamespace``, an instance of a class it defines, or whatever it
assigns to ``__agent__``) that carries every required function.

Example:
    loader = AgentLoader()
    handle = await loader.load("https://example.com/agents/random.py", ["move"])
    handle.call("move", board)
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
import os
import sys
import types
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from agentkit.errors import (
    AmbiguousNamespaceError,
    MissingFunctionError,
    MissingNamespaceError,
    UnreachableSourceError,
)
from agentkit.models.agent_handle import AgentHandle
from agentkit.utils.identifiers import generate_module_name

logger = logging.getLogger(__name__)

# explicit marker an agent module can set to name its namespace
AGENT_ATTRIBUTE = "__agent__"

HTTP_SCHEMES = {"http", "https"}

# values that are data, never a namespace
_PLAIN_VALUES = (
    str, bytes, bytearray, int, float, complex, bool,
    list, tuple, set, frozenset, dict,
)

_MISSING = object()


def module_exports(module: types.ModuleType) -> list[tuple[str, Any]]:
    """Return the module's exported members in definition order.

    Uses ``__all__`` when the module defines it. Otherwise every public
    attribute, minus submodules and classes/functions imported from elsewhere.
    """
    names = getattr(module, "__all__", None)
    if names is not None:
        return [(name, getattr(module, name)) for name in names if hasattr(module, name)]

    exports = []
    for name, value in vars(module).items():
        if name.startswith("_") or inspect.ismodule(value):
            continue
        if (inspect.isclass(value) or inspect.isroutine(value)) and getattr(
            value, "__module__", None
        ) != module.__name__:
            continue
        exports.append((name, value))
    return exports


def _is_namespace(value: Any, module: types.ModuleType, explicit: bool) -> bool:
    """Whether an exported value can hold the agent's functions."""
    if inspect.isroutine(value) or inspect.ismodule(value):
        return False
    if value is None or isinstance(value, _PLAIN_VALUES):
        return False
    if inspect.isclass(value) or explicit:
        return True
    # loggers, typing forms, clients etc. imported from libraries are not namespaces
    return type(value) is types.SimpleNamespace or type(value).__module__ == module.__name__


def find_namespace(module: types.ModuleType, source_id: str) -> Any:
    """Discover the single namespace object the module exports.

    Raises:
        MissingNamespaceError: if the module exports no namespace.
        AmbiguousNamespaceError: if it exports several and sets no ``__agent__``.
    """
    marked = getattr(module, AGENT_ATTRIBUTE, _MISSING)
    if marked is not _MISSING:
        if marked is None:
            raise MissingNamespaceError(source_id, f"{AGENT_ATTRIBUTE} is set to None")
        return marked

    explicit = hasattr(module, "__all__")
    candidates = [
        (name, value)
        for name, value in module_exports(module)
        if _is_namespace(value, module, explicit)
    ]
    if not candidates:
        raise MissingNamespaceError(
            source_id,
            "module exports no namespace object; export one class or namespace "
            f"holding the functions, or set {AGENT_ATTRIBUTE}",
        )
    if len(candidates) > 1:
        raise AmbiguousNamespaceError(source_id, [name for name, _ in candidates])
    return candidates[0][1]


def bind_functions(
    namespace: Any,
    function_names: Sequence[str],
    source_id: str,
) -> dict[str, Callable[..., Any]]:
    """Look up every required name on the namespace.

    Either all names resolve to callables or MissingFunctionError is raised
    for the first one that does not.
    """
    functions: dict[str, Callable[..., Any]] = {}
    for name in function_names:
        try:
            if isinstance(namespace, Mapping):
                member = namespace.get(name, _MISSING)
            else:
                member = getattr(namespace, name, _MISSING)
        except Exception as e:
            raise MissingFunctionError(source_id, name, "unreadable") from e
        if member is _MISSING:
            raise MissingFunctionError(source_id, name)
        if not callable(member):
            raise MissingFunctionError(
                source_id, name, f"not callable (got {type(member).__name__})"
            )
        functions[name] = member
    return functions


class AgentLoader:
    """Fetch, evaluate and validate agent modules.

    The loader holds no per-load state; one instance can serve any number of
    concurrent loads.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Args:
            http_client: Client used for http(s) sources. A short-lived client
                is created per fetch when omitted.
            timeout: Fetch timeout in seconds for the per-fetch client.
                None waits indefinitely.
        """
        self.http_client = http_client
        self.timeout = timeout

    async def load(self, source_id: str, required_functions: Sequence[str]) -> AgentHandle:
        """Load ``source_id`` and bind ``required_functions`` onto a new handle.

        Raises:
            ValueError: if ``required_functions`` is empty.
            UnreachableSourceError: if the source can't be fetched or evaluated.
            MissingNamespaceError: if the module exports no usable namespace.
            MissingFunctionError: if a required function is absent or not callable.
        """
        names = list(required_functions)
        if not names:
            raise ValueError("required_functions must name at least one function")

        source = source_id.strip()
        if not source:
            raise UnreachableSourceError(source_id, "no source given")

        module = await self._resolve(source)
        namespace = find_namespace(module, source)
        functions = bind_functions(namespace, names, source)

        logger.debug("Loaded %s from %s", names, source)
        return AgentHandle(source_id=source, functions=functions)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def _resolve(self, source: str) -> types.ModuleType:
        """Return the evaluated or imported module behind ``source``."""
        parts = urlsplit(source)
        scheme = parts.scheme.lower()

        if scheme in HTTP_SCHEMES:
            code = await self._fetch(source)
            return self._evaluate(source, code)

        if scheme == "file":
            path = Path(url2pathname(parts.path))
        elif _looks_like_path(source) or await asyncio.to_thread(os.path.exists, source):
            path = Path(source).expanduser()
        else:
            return self._import(source)

        code = await self._read(source, path)
        return self._evaluate(source, code)

    async def _fetch(self, url: str) -> str:
        """Download module source over HTTP."""
        try:
            if self.http_client is not None:
                response = await self.http_client.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(
                    timeout=self.timeout, follow_redirects=True
                ) as client:
                    response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UnreachableSourceError(
                url, f"server answered {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UnreachableSourceError(
                url, f"could not fetch source ({type(e).__name__}: {e})"
            ) from e
        return response.text

    async def _read(self, source: str, path: Path) -> str:
        """Read module source from disk without blocking the event loop."""
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise UnreachableSourceError(source, f"no file at {path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise UnreachableSourceError(
                source, f"could not read {path} ({type(e).__name__}: {e})"
            ) from e

    def _evaluate(self, source: str, code: str) -> types.ModuleType:
        """Execute ``code`` as a fresh module.

        The module is registered in ``sys.modules`` only while it executes;
        its functions keep their globals, so nothing stays behind once the
        load is done.
        """
        try:
            compiled = compile(code, source, "exec")
        except SyntaxError as e:
            raise UnreachableSourceError(
                source, f"source is not valid Python (line {e.lineno}: {e.msg})"
            ) from e
        except ValueError as e:
            raise UnreachableSourceError(source, f"source is not valid Python ({e})") from e

        module_name = generate_module_name()
        module = types.ModuleType(module_name)
        module.__file__ = source
        # dataclasses and typing look the module up by name while it executes
        sys.modules[module_name] = module
        try:
            exec(compiled, module.__dict__)
        except (Exception, SystemExit) as e:
            raise UnreachableSourceError(
                source, f"source failed while loading ({type(e).__name__}: {e})"
            ) from e
        finally:
            sys.modules.pop(module_name, None)
        return module

    def _import(self, name: str) -> types.ModuleType:
        """Import an installed module by dotted name."""
        try:
            return importlib.import_module(name)
        except ImportError as e:
            raise UnreachableSourceError(name, f"no module or file named '{name}'") from e
        except (Exception, SystemExit) as e:
            raise UnreachableSourceError(
                name, f"module failed while importing ({type(e).__name__}: {e})"
            ) from e


def _looks_like_path(source: str) -> bool:
    # "C:\agents\x.py" parses with scheme "c"; the backslash marks it as a path
    return source.endswith(".py") or "/" in source or "\\" in source or source.startswith("~")
