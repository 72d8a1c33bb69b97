"""
Card selection for study sessions.

Two independent orderings over the same stats:
1. Weighted sampling without replacement (random / blind mode)
2. Due-first ordering (unit mode)

Pure functions: callers pass in the stats mapping and, optionally, the clock
and random source.
"""

import logging
import random
from collections.abc import Mapping, Sequence

from studydeck.application.utils.common import now_ms
from studydeck.domain.constants import LAPSE_WEIGHT, OVERDUE_WEIGHT
from studydeck.domain.models import CardStats, Flashcard, default_stats

logger = logging.getLogger(__name__)


def card_weight(stats: CardStats, now: int) -> float:
    """
    Selection weight for random mode. Higher weight = more likely to be picked.

    Factors:
    - Low ease -> harder card -> picked more
    - Many lapses -> struggles -> picked more
    - Overdue (past due date) -> picked more
    """
    overdue_factor = OVERDUE_WEIGHT if stats.due <= now else 1.0
    lapse_factor = 1 + stats.lapses * LAPSE_WEIGHT
    ease_factor = 1 / stats.ease
    return ease_factor * lapse_factor * overdue_factor


def weighted_select(
    pool: Sequence[Flashcard],
    count: int,
    stats: Mapping[str, CardStats],
    now: int | None = None,
    rng: random.Random | None = None,
) -> list[Flashcard]:
    """
    Pick ``count`` distinct cards from ``pool``, biased toward weak cards.

    If the pool is no larger than ``count`` every card is used and only the
    order is randomized.

    Args:
        pool: Candidate cards.
        count: Number of cards to draw.
        stats: Stored stats; cards without an entry use defaults (due now).
        now: Epoch milliseconds.
        rng: Random source, for deterministic tests.
    """
    rng = rng or random.Random()
    if now is None:
        now = now_ms()

    if not pool:
        return []

    if len(pool) <= count:
        shuffled = list(pool)
        rng.shuffle(shuffled)
        return shuffled

    remaining = list(pool)
    weights = [card_weight(stats.get(c.id) or default_stats(c.id, now), now) for c in remaining]
    total = sum(weights)
    selected: list[Flashcard] = []

    while len(selected) < count and remaining:
        draw = rng.random() * total
        chosen = len(remaining) - 1  # float drift can leave the draw unspent
        for i, weight in enumerate(weights):
            draw -= weight
            if draw < 0:
                chosen = i
                break

        selected.append(remaining.pop(chosen))
        total -= weights.pop(chosen)

    logger.debug(f"[selector] Drew {len(selected)} of {len(pool)} cards")
    return selected


def sort_for_unit_mode(
    cards: Sequence[Flashcard],
    stats: Mapping[str, CardStats],
    now: int | None = None,
) -> list[Flashcard]:
    """
    Order a deck for a unit playthrough: overdue first, then soonest due,
    ties broken by ease ascending (hardest first).

    Cards with no stored stats go after every card that has stats, keeping
    their original relative order.
    """
    if now is None:
        now = now_ms()

    seen = [c for c in cards if c.id in stats]
    unseen = [c for c in cards if c.id not in stats]

    def sort_key(card: Flashcard) -> tuple[int, float]:
        s = stats[card.id]
        effective_due = 0 if s.due <= now else s.due
        return (effective_due, s.ease)

    return sorted(seen, key=sort_key) + unseen
