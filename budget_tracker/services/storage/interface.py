"""
Abstract Storage Interface

DESIGN DECISION: The transaction store talks to persistence only through
this narrow key-value contract. This allows us to:
1. Swap the JSON file backend for something else later
2. Use in-memory storage for testing
3. Keep the aggregation engine decoupled from storage details

The interface is intentionally tiny: read, write and delete a raw string
under a key. Serialization is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional

from budget_tracker.errors import BudgetTrackerError


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for a local key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, raw: str) -> None:
        """
        Store a raw value under a key, replacing any previous value.

        Args:
            key: Storage key
            raw: Serialized value

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Deleting an absent key is not an error.

        Raises:
            StorageWriteError: If the key exists but could not be removed
        """
        pass


class StorageError(BudgetTrackerError):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written (e.g. disk full, permissions)."""
    pass
