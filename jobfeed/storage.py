import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .errors import PersistenceError


class KeyValueStore(Protocol):
    """String key to string value slots, like a device key-value store."""

    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


def load_store(path: Path) -> Dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {}
            data = json.loads(content)
    except (json.JSONDecodeError, IOError):
        return {}
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if isinstance(v, str)}


def save_store(path: Path, store: Dict[str, str]) -> None:
    """Write the whole store, replacing the previous file in one step."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(store, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class JsonFileStore:
    """Key-value slots kept in a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        return load_store(self.path).get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            store = load_store(self.path)
            store[key] = value
            save_store(self.path, store)
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e

    def remove_item(self, key: str) -> None:
        store = load_store(self.path)
        if key not in store:
            return
        del store[key]
        try:
            save_store(self.path, store)
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


def open_store(settings) -> KeyValueStore:
    """Return the key-value backend selected by settings.storage."""
    if settings.storage == "sqlite":
        from .database import SqlKeyValueStore
        return SqlKeyValueStore(settings.db_path)
    return JsonFileStore(settings.store_path)
