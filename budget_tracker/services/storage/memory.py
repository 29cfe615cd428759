"""In-memory key-value storage, used by tests and throwaway sessions."""

from typing import Optional

from budget_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageWriteError,
)


class InMemoryStorage(KeyValueStorageInterface):
    """
    Dict-backed storage.

    `fail_writes` makes every write raise StorageWriteError, which is how
    tests exercise the quota-exceeded path.
    """

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        fail_writes: bool = False,
    ):
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, raw: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Storage quota exceeded writing {key!r}")
        self._data[key] = raw
        self.write_count += 1

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
