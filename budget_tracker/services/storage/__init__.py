"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The JSON file backend is the default, but the store only depends on the
interface, so backends are swappable.
"""

from budget_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from budget_tracker.services.storage.json_file import JsonFileStorage
from budget_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
