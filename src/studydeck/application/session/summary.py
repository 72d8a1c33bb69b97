from collections import Counter
from collections.abc import Iterable

from studydeck.application.utils.common import round_half_up
from studydeck.domain.models import Rating, ReviewResult, SessionSummary


def session_summary(results: Iterable[ReviewResult]) -> SessionSummary:
    """Tally ratings; ``pct`` is the rounded share of Good/Easy answers (0 when empty)."""
    counts = Counter(Rating(r.rating) for r in results)
    total = sum(counts.values())
    correct = counts[Rating.GOOD] + counts[Rating.EASY]
    pct = round_half_up(correct / total * 100) if total > 0 else 0

    return SessionSummary(
        again=counts[Rating.AGAIN],
        hard=counts[Rating.HARD],
        good=counts[Rating.GOOD],
        easy=counts[Rating.EASY],
        total=total,
        correct=correct,
        pct=pct,
    )


def result_message(pct: int) -> str:
    if pct >= 90:
        return "Excellent work!"
    if pct >= 70:
        return "Good job! Keep it up."
    if pct >= 50:
        return "Room to improve, keep studying."
    return "These cards need more practice."
