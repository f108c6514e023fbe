"""Runtime settings read from the environment (and a ``.env`` file if present)."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from agentkit.adapters.stores import JsonFileStore, KeyValueStore, SqliteStore

DEFAULT_DATA_DIR = Path.home() / ".agentkit"
STORE_BACKENDS = {"sqlite", "json"}


def _parse_timeout(raw: str | None) -> float | None:
    """Empty, ``none`` or non-positive means "wait forever"."""
    if raw is None or raw.strip().lower() in ("", "none", "0"):
        return None
    timeout = float(raw)
    return timeout if timeout > 0 else None


@dataclass
class Settings:
    """Container for agentkit configuration."""

    store_backend: str = "sqlite"
    store_path: Path = DEFAULT_DATA_DIR / "agentkit.db"
    fetch_timeout: float | None = None  # seconds per remote fetch, None = no limit
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Unknown store backend '{self.store_backend}'. "
                f"Expected one of {sorted(STORE_BACKENDS)}"
            )
        self.store_path = Path(self.store_path)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from ``AGENTKIT_*`` environment variables."""
        if dotenv:
            load_dotenv()

        backend = os.getenv("AGENTKIT_STORE_BACKEND", "sqlite").strip().lower()
        default_name = "agentkit.db" if backend == "sqlite" else "agentkit.json"
        store_path = Path(
            os.getenv("AGENTKIT_STORE_PATH", str(DEFAULT_DATA_DIR / default_name))
        ).expanduser()

        return cls(
            store_backend=backend,
            store_path=store_path,
            fetch_timeout=_parse_timeout(os.getenv("AGENTKIT_FETCH_TIMEOUT")),
            log_level=os.getenv("AGENTKIT_LOG_LEVEL", "INFO"),
            cors_origins=os.getenv("AGENTKIT_CORS_ORIGINS", "*").split(","),
        )

    def open_store(self) -> KeyValueStore:
        """Open the configured durable store."""
        if self.store_backend == "json":
            return JsonFileStore(self.store_path)
        return SqliteStore(self.store_path)
