"""
Domain models for flashcards, decks and review statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .constants import DEFAULT_EASE, DEFAULT_INTERVAL


class Rating(IntEnum):
    """Button pressed after flipping a card."""

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @property
    def label(self) -> str:
        return RATING_LABELS[self]

    @property
    def is_correct(self) -> bool:
        return self >= Rating.GOOD


RATING_LABELS: dict[Rating, str] = {
    Rating.AGAIN: "Again",
    Rating.HARD: "Hard",
    Rating.GOOD: "Good",
    Rating.EASY: "Easy",
}


class GameMode(str, Enum):
    UNIT = "unit"
    RANDOM = "random"


@dataclass(frozen=True)
class Flashcard:
    """
    A single question/answer pair.

    Attributes:
        id: Stable identifier used to key review stats.
        question: Front of the card.
        answer: Back of the card.
        deck_id: Slug of the deck the card belongs to.
    """

    id: str
    question: str
    answer: str
    deck_id: str


@dataclass(frozen=True)
class Deck:
    """
    A deck corresponds to one YAML file (e.g. flashcards/unit-1.yml).

    Attributes:
        id: Slug taken from the file name (e.g. "unit-1").
        title: Human readable title.
        cards: Cards in file order.
        path: Path of the source file relative to the decks root.
        unit: Optional unit tag.
    """

    id: str
    title: str
    cards: tuple[Flashcard, ...]
    path: str
    unit: str | None = None


@dataclass(frozen=True)
class CardStats:
    """
    Memory-strength record for one card. Replaced, never mutated.

    Attributes:
        id: Card identifier.
        ease: Interval growth factor, kept within [1.3, 3.0].
        interval: Whole days until the next review (>= 1).
        due: Epoch milliseconds after which the card is due.
        reviews: Total number of ratings applied.
        lapses: Number of "Again" ratings.
        last_rating: Most recent rating, if any.
    """

    id: str
    ease: float = DEFAULT_EASE
    interval: int = DEFAULT_INTERVAL
    due: int = 0
    reviews: int = 0
    lapses: int = 0
    last_rating: Rating | None = None


def default_stats(card_id: str, now: int) -> CardStats:
    """Stats for a card that has never been rated."""
    return CardStats(id=card_id, due=now)


@dataclass(frozen=True)
class ReviewResult:
    """One rating given during the current session."""

    card_id: str
    rating: Rating


@dataclass(frozen=True)
class SessionSummary:
    """Counts of each rating across a result list."""

    again: int = 0
    hard: int = 0
    good: int = 0
    easy: int = 0
    total: int = 0
    correct: int = 0
    pct: int = 0

    def count(self, rating: Rating) -> int:
        return {
            Rating.AGAIN: self.again,
            Rating.HARD: self.hard,
            Rating.GOOD: self.good,
            Rating.EASY: self.easy,
        }[rating]


@dataclass(frozen=True)
class DeckOverview:
    """Hub-page counters for one deck."""

    deck_id: str
    title: str
    due: int
    learned: int
    total: int
    unit: str | None = None

    @property
    def learned_pct(self) -> int:
        if self.total == 0:
            return 0
        return int(self.learned * 100 / self.total + 0.5)


@dataclass
class LoadReport:
    """Outcome of loading every deck in a scope."""

    decks: list[Deck] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)  # path -> reason
