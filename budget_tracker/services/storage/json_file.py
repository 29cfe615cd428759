"""
JSON File Storage Implementation

DESIGN DECISION: Each key is stored as its own file, `<key>.json`, under a
data directory. This is the local-disk equivalent of a browser key-value
store:
1. No database setup required
2. Users can inspect or back up their data with any text editor
3. One key is one file, so a corrupt value never affects other keys

TRADEOFFS:
- Not suitable for large volumes (personal finance scale is fine)
- A single writer is assumed; there is no file locking

Writes go to a temporary file first and are moved into place with
os.replace, so a failed write never leaves a half-written value behind.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from budget_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)

logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorageInterface):
    """Stores each key as a UTF-8 file in a data directory."""

    SUFFIX = ".json"

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File path backing a key."""
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{self.SUFFIX}"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

    def write(self, key: str, raw: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.",
                suffix=".tmp",
                dir=self._data_dir,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(raw)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed", path=tmp_name)
        logger.debug("storage_written", key=key, bytes=len(raw))

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageWriteError(f"Could not delete {path}: {e}") from e
        logger.debug("storage_deleted", key=key)
