"""
Local session stores: a JSON file on disk and a process-local dict.

LocalSessionStore is the default durable backend; it plays the role browser
localStorage plays for a web client and survives process restarts.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional, Union

from collegehub.utils.logger import get_logger
from .exceptions import StorageException
from .exceptions import PermissionError as StoragePermissionError

logger = get_logger(__name__)

DEFAULT_SESSION_FILE = Path.home() / ".collegehub" / "session.json"


class LocalSessionStore:
    """
    Key/value store persisted as a single JSON object in a file.

    The file is rewritten atomically (temp file + rename) on every change and
    created with user-only permissions, since it holds a bearer token.
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path else DEFAULT_SESSION_FILE

    def _load(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.warning(
                "Session file is corrupt; treating as empty",
                operation="load_session_file",
                context={"path": str(self.path)},
                error=str(e),
            )
            return {}
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read session file {self.path}: {e}") from e
        except OSError as e:
            raise StorageException(f"I/O error reading session file {self.path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning(
                "Session file does not hold an object; treating as empty",
                operation="load_session_file",
                context={"path": str(self.path)},
            )
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write session file {self.path}: {e}") from e
        except OSError as e:
            raise StorageException(f"Failed to write session file {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> bool:
        data = self._load()
        data[key] = value
        self._write(data)
        logger.debug("Key saved", operation="set_item", context={"key": key})
        return True

    def remove_item(self, key: str) -> bool:
        data = self._load()
        if key in data:
            del data[key]
            self._write(data)
            logger.debug("Key removed", operation="remove_item", context={"key": key})
        return True


class MemorySessionStore:
    """Non-persistent store; the session lasts only as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    def remove_item(self, key: str) -> bool:
        self.data.pop(key, None)
        return True

