"""Persistence gateways: durable key-value storage for users and task blobs.

Keys used by the application:

- ``todo_current_user``: the logged-in user
- ``todo_users``: every registered user
- ``todos_<user id>``: one user's exported task store

Gateways do not catch storage errors. An ``OSError`` from the file gateway
reaches the caller unchanged, and nothing here assumes a write succeeded.
There is also no locking between processes: two writers of the same key
race and the last write wins.
"""

import logging
import re
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "todo_current_user"
USERS_KEY = "todo_users"

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def task_store_key(user_id: int | str) -> str:
    """Key of the task blob for a user."""
    return f"todos_{user_id}"


class PersistenceGateway(Protocol):
    """Key-value store of string values."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryGateway:
    """Gateway backed by a dict. Data is lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileGateway:
    """Gateway storing each key as a JSON file under a data directory.

    Args:
        data_dir: Directory for the files. Created if missing.
    """

    def __init__(self, data_dir: str | Path = "data"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        # Readers never see a partially written file.
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug(f"Stored {key} ({len(value)} chars) at {path}")

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


def create_gateway(backend: str, data_dir: str | Path) -> PersistenceGateway:
    """Build the gateway named in the config."""
    if backend == "memory":
        logger.info("Using in-memory storage; data will not survive a restart")
        return InMemoryGateway()
    logger.info(f"Using file storage in {data_dir}")
    return FileGateway(data_dir)
