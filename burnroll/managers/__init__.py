"""Database-backed managers."""

from burnroll.managers.base import BaseManager
from burnroll.managers.character_store import SqlCharacterStore

__all__ = [
    "BaseManager",
    "SqlCharacterStore",
]
