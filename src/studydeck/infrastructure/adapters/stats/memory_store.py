from collections.abc import Iterable

from studydeck.domain.models import CardStats
from studydeck.domain.stats.ports import StatsStore


class InMemoryStatsStore(StatsStore):
    """Process-local store. Nothing survives the process."""

    def __init__(self, initial: Iterable[CardStats] = ()):
        self._data: dict[str, CardStats] = {s.id: s for s in initial}

    def load_all(self) -> dict[str, CardStats]:
        return dict(self._data)

    def save_one(self, stats: CardStats) -> None:
        self._data[stats.id] = stats

    def save_batch(self, stats: Iterable[CardStats]) -> None:
        for s in stats:
            self._data[s.id] = s
