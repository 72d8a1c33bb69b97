# Domain Package
from .blinds import BLINDS, BlindTier
from .models import (
    CardStats,
    Deck,
    DeckOverview,
    Flashcard,
    GameMode,
    Rating,
    ReviewResult,
    SessionSummary,
    default_stats,
)

__all__ = [
    "BLINDS",
    "BlindTier",
    "CardStats",
    "Deck",
    "DeckOverview",
    "Flashcard",
    "GameMode",
    "Rating",
    "ReviewResult",
    "SessionSummary",
    "default_stats",
]
