"""
Review scheduler: a simplified, Anki-style SM-2 update rule.

Rating scale:
    1 = Again  -> hard reset, add to lapses, ease drops sharply
    2 = Hard   -> short interval, ease drops slightly
    3 = Good   -> normal progression
    4 = Easy   -> larger jump, ease increases

This is a pure computation module with no I/O. Persistence is the caller's job.
"""

from dataclasses import replace

from studydeck.application.utils.common import now_ms, round_half_up
from studydeck.domain.constants import (
    AGAIN_EASE_PENALTY,
    DAY_MS,
    EASY_EASE_BONUS,
    EASY_FIRST_INTERVAL,
    EASY_INTERVAL_FACTOR,
    GOOD_SECOND_INTERVAL,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_FACTOR,
    MAX_EASE,
    MIN_EASE,
)
from studydeck.domain.models import CardStats, Rating


def clamp_ease(ease: float) -> float:
    return min(MAX_EASE, max(MIN_EASE, ease))


def apply_rating(stats: CardStats, rating: Rating | int, now: int | None = None) -> CardStats:
    """
    Return the stats that result from rating a card.

    Branch conditions read the review count *before* this rating, so a card
    with 0 or 1 prior reviews is on its first exposure and one with exactly 2
    is on its second.

    Args:
        stats: Current stats (stored, or defaults for an unseen card).
        rating: 1-4.
        now: Epoch milliseconds; defaults to the current time.
    """
    rating = Rating(rating)
    if now is None:
        now = now_ms()

    prior_reviews = stats.reviews
    ease = clamp_ease(stats.ease)
    interval = max(1, stats.interval)
    lapses = stats.lapses

    if rating == Rating.AGAIN:
        lapses += 1
        ease = clamp_ease(ease - AGAIN_EASE_PENALTY)
        new_interval = 1
    elif rating == Rating.HARD:
        ease = clamp_ease(ease - HARD_EASE_PENALTY)
        new_interval = round_half_up(interval * HARD_INTERVAL_FACTOR)
    elif rating == Rating.GOOD:
        if prior_reviews <= 1:
            new_interval = 1
        elif prior_reviews == 2:
            new_interval = GOOD_SECOND_INTERVAL
        else:
            new_interval = round_half_up(interval * ease)
    else:
        # Easy grows from the pre-bonus ease
        if prior_reviews <= 1:
            new_interval = EASY_FIRST_INTERVAL
        else:
            new_interval = round_half_up(interval * ease * EASY_INTERVAL_FACTOR)
        ease = clamp_ease(ease + EASY_EASE_BONUS)

    new_interval = max(1, new_interval)

    return replace(
        stats,
        ease=round(ease, 4),
        interval=new_interval,
        due=now + new_interval * DAY_MS,
        reviews=prior_reviews + 1,
        lapses=lapses,
        last_rating=rating,
    )


def preview_interval(stats: CardStats, rating: Rating | int, now: int | None = None) -> int:
    """Interval in days that ``rating`` would produce, without persisting anything."""
    return apply_rating(stats, rating, now=now).interval


def format_interval(days: int) -> str:
    """Compact label for a rating button: "1d", "12d", "2mo", "1.2y"."""
    if days < 1:
        return "<1d"
    if days < 30:
        return f"{days}d"
    if days < 365:
        return f"{round_half_up(days / 30)}mo"
    return f"{days / 365:.1f}y"
