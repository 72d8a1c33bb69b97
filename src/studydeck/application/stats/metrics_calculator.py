"""
Metrics calculator for deck-level progress counters.

This is a pure computation module with no I/O.
"""

from collections.abc import Mapping

from studydeck.application.utils.common import now_ms
from studydeck.domain.constants import DAY_MS
from studydeck.domain.models import CardStats, Deck, DeckOverview


class MetricsCalculator:
    """
    Computes hub-page counters from stored card stats.

    Stateless and side-effect free.
    """

    def overview(
        self,
        deck: Deck,
        stats: Mapping[str, CardStats],
        now: int | None = None,
    ) -> DeckOverview:
        """
        Count cards that are due and cards that have been learned.

        Unseen cards count toward neither; they have no due date yet.
        """
        if now is None:
            now = now_ms()

        due = 0
        learned = 0
        for card in deck.cards:
            card_stats = stats.get(card.id)
            if card_stats is None:
                continue
            if card_stats.reviews > 0:
                learned += 1
            if card_stats.due <= now:
                due += 1

        return DeckOverview(
            deck_id=deck.id,
            title=deck.title,
            unit=deck.unit,
            due=due,
            learned=learned,
            total=len(deck.cards),
        )

    def days_until_due(self, stats: CardStats, now: int | None = None) -> int:
        """Whole days until ``stats`` falls due (negative if overdue)."""
        if now is None:
            now = now_ms()
        return int((stats.due - now) / DAY_MS)
