from .base import DataStore
from .memory import InMemoryStore

__all__ = ["DataStore", "InMemoryStore"]
