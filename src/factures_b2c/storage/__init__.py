"""Couche de stockage : interface abstraite et backend en mémoire."""

from factures_b2c.storage.base import BaseStorage, merge_settings
from factures_b2c.storage.errors import (
    DuplicateOrderError,
    NotFoundError,
    SequenceYearError,
    StorageError,
)
from factures_b2c.storage.memory import MemoryStorage

__all__ = [
    "BaseStorage",
    "DuplicateOrderError",
    "MemoryStorage",
    "NotFoundError",
    "SequenceYearError",
    "StorageError",
    "merge_settings",
]
