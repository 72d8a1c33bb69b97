# Stats adapters
from .json_store import JsonFileStatsStore
from .memory_store import InMemoryStatsStore

__all__ = ["JsonFileStatsStore", "InMemoryStatsStore"]
