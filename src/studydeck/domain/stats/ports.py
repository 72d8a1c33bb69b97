"""
Ports (interfaces) for review-stats persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from studydeck.domain.models import CardStats


class StatsStore(ABC):
    """
    Port for persisting per-card review stats. Last write wins.

    Implementations:
        - JsonFileStatsStore: A single JSON blob under one storage key.
        - InMemoryStatsStore: Process-local dict, for tests and throwaway sessions.
    """

    @abstractmethod
    def load_all(self) -> dict[str, CardStats]:
        """
        Read every stored record.

        Returns:
            Mapping of card id to CardStats.

        Raises:
            StatsStoreError: If the backing storage cannot be read.
        """
        pass

    @abstractmethod
    def save_one(self, stats: CardStats) -> None:
        """
        Store a single record, replacing any previous one with the same id.

        Raises:
            StatsStoreError: If the backing storage cannot be written.
        """
        pass

    @abstractmethod
    def save_batch(self, stats: Iterable[CardStats]) -> None:
        """
        Store several records in one write.

        Raises:
            StatsStoreError: If the backing storage cannot be written.
        """
        pass
