"""Tests for the key-value stores and the settings that open them."""

import pytest

from agentkit.adapters.stores import JsonFileStore, MemoryStore, SqliteStore
from agentkit.config import Settings


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    if request.param == "json":
        return JsonFileStore(tmp_path / "nested" / "state.json")
    return SqliteStore(tmp_path / "nested" / "state.db")


class TestKeyValueStores:
    """Behaviour shared by every store."""

    def test_missing_key(self, store):
        """An unset key reads as None."""
        assert store.get("nope") is None

    def test_set_overwrites(self, store):
        """set() replaces the previous value."""
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"

    def test_delete(self, store):
        """delete() removes a key and ignores unknown keys."""
        store.set("k", "v")
        store.delete("k")
        store.delete("never-set")
        assert store.get("k") is None


class TestDurableStores:
    """File-backed stores keep values across instances."""

    def test_sqlite_persists(self, tmp_path):
        path = tmp_path / "state.db"
        SqliteStore(path).set("k", "v")
        assert SqliteStore(path).get("k") == "v"

    def test_json_persists(self, tmp_path):
        path = tmp_path / "state.json"
        JsonFileStore(path).set("k", "v")
        assert JsonFileStore(path).get("k") == "v"
        assert not path.with_suffix(".json.tmp").exists()

    def test_json_rejects_non_object(self, tmp_path):
        """A file that holds something other than an object is an error."""
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            JsonFileStore(path).get("k")

    def test_json_corrupt_file_replaced_on_write(self, tmp_path, caplog):
        """Writing over an unparseable file starts fresh and keeps a backup."""
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        with caplog.at_level("WARNING"):
            store.set("k", "v")

        assert store.get("k") == "v"
        assert path.with_suffix(".json.bak").read_text(encoding="utf-8") == "{not json"
        assert "unreadable" in caplog.text

    def test_sqlite_corrupt_file_replaced(self, tmp_path):
        """A file that is not a database is moved aside and recreated."""
        path = tmp_path / "state.db"
        garbage = b"this is not a database\n" * 64
        path.write_bytes(garbage)

        store = SqliteStore(path)
        store.set("k", "v")

        assert store.get("k") == "v"
        assert path.with_suffix(".db.bak").read_bytes() == garbage


class TestSettings:
    """Test environment-driven configuration."""

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AGENTKIT_STORE_BACKEND", "json")
        monkeypatch.setenv("AGENTKIT_STORE_PATH", str(tmp_path / "s.json"))
        monkeypatch.setenv("AGENTKIT_FETCH_TIMEOUT", "2.5")
        monkeypatch.setenv("AGENTKIT_CORS_ORIGINS", "http://a,http://b")

        settings = Settings.from_env(dotenv=False)

        assert settings.store_backend == "json"
        assert settings.fetch_timeout == 2.5
        assert settings.cors_origins == ["http://a", "http://b"]
        assert isinstance(settings.open_store(), JsonFileStore)

    def test_timeout_off_by_default(self, monkeypatch):
        monkeypatch.delenv("AGENTKIT_FETCH_TIMEOUT", raising=False)
        assert Settings.from_env(dotenv=False).fetch_timeout is None

        monkeypatch.setenv("AGENTKIT_FETCH_TIMEOUT", "0")
        assert Settings.from_env(dotenv=False).fetch_timeout is None

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown store backend"):
            Settings(store_backend="redis")

    def test_sqlite_store(self, tmp_path):
        settings = Settings(store_path=tmp_path / "kv.db")
        assert isinstance(settings.open_store(), SqliteStore)
