"""
Stats Service: Application layer wrapper around the StatsStore port.

Persistence problems are logged and swallowed here so a failing store never
interrupts a study session. The affected update is lost; there is no retry.
"""

import logging
from collections.abc import Iterable

from studydeck.application.utils.common import now_ms
from studydeck.domain.errors import StatsStoreError
from studydeck.domain.models import CardStats, Deck, DeckOverview, default_stats
from studydeck.domain.stats.ports import StatsStore

from .metrics_calculator import MetricsCalculator

logger = logging.getLogger(__name__)


class StatsService:
    """
    Application service for reading and recording card statistics.

    Follows Dependency Inversion: depends on the StatsStore abstraction,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        store: StatsStore,
        calculator: MetricsCalculator | None = None,
    ):
        """
        Args:
            store: The store (port) holding card stats.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._store = store
        self._calc = calculator or MetricsCalculator()

    def load_all(self) -> dict[str, CardStats]:
        """Every stored record, or an empty mapping if the store cannot be read."""
        try:
            return self._store.load_all()
        except StatsStoreError as e:
            logger.warning(f"Could not read card stats, continuing without them: {e}")
            return {}

    def get(self, card_id: str, now: int | None = None) -> CardStats:
        """Stored stats for ``card_id``, or the unseen defaults."""
        stored = self.load_all().get(card_id)
        if stored is not None:
            return stored
        return default_stats(card_id, now if now is not None else now_ms())

    def record(self, stats: CardStats) -> bool:
        """Persist one record. Returns False if the write was lost."""
        try:
            self._store.save_one(stats)
            return True
        except StatsStoreError as e:
            logger.error(f"Failed to save stats for {stats.id}: {e}")
            return False

    def record_batch(self, stats: Iterable[CardStats]) -> bool:
        stats = list(stats)
        if not stats:
            return True
        if len(stats) == 1:
            return self.record(stats[0])
        try:
            self._store.save_batch(stats)
            return True
        except StatsStoreError as e:
            logger.error(f"Failed to save stats for {len(stats)} cards: {e}")
            return False

    def deck_overviews(self, decks: Iterable[Deck], now: int | None = None) -> list[DeckOverview]:
        """Due/learned counters for each deck, computed from one read of the store."""
        all_stats = self.load_all()
        return [self._calc.overview(deck, all_stats, now=now) for deck in decks]
