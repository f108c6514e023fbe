"""Durable key-value stores for agentkit state.

Only one key is used today (the known-source list) but the stores are
generic string-to-string maps so the registry does not care where it
persists.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


def _move_aside(path: Path, reason: Exception) -> None:
    """Rename an unreadable store file to ``<name>.bak`` so a fresh one can replace it."""
    backup = path.with_suffix(path.suffix + ".bak")
    logger.warning(
        "Store %s is unreadable (%s); starting a new one, old copy kept at %s",
        path,
        reason,
        backup,
    )
    path.replace(backup)


class KeyValueStore(Protocol):
    """Protocol for durable string storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never set."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, overwriting any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...


class MemoryStore:
    """Keeps values in a dict. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


class JsonFileStore:
    """Keeps all keys in one JSON object on disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _read_for_update(self) -> dict[str, str]:
        """Current contents, or an empty object if the file can't be parsed."""
        try:
            return self._read()
        except ValueError as e:
            _move_aside(self.path, e)
            return {}

    def _write(self, data: dict[str, str]) -> None:
        # write-then-rename so a crash never leaves half a file behind
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write(data)


class SqliteStore:
    """Keeps values in a ``kv_store`` table of a SQLite database."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        try:
            self.init_db()
        except sqlite3.DatabaseError as e:
            _move_aside(self.path, e)
            self.init_db()

    def _connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                create table if not exists kv_store (
                    key text primary key,
                    value text not null
                )
                """
            )
            conn.commit()

    def get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "select value from kv_store where key = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        return row["value"]

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                insert into kv_store (key, value)
                values (?, ?)
                on conflict(key) do update set value = excluded.value
                """,
                (key, value),
            )
            conn.commit()

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("delete from kv_store where key = ?", (key,))
            conn.commit()
