"""
Persistence adapters.

``SQLRepository`` talks to the relational store, ``MemoryRepository`` is the
in-memory mirror used when the store is unreachable. Both satisfy ``Backend``
and order their results identically.
"""

from .base import Backend, DuplicateEmailError, PersistenceError
from .memory_repository import MemoryRepository
from .sql_repository import SQLRepository

__all__ = ["Backend", "DuplicateEmailError", "MemoryRepository", "PersistenceError", "SQLRepository"]
