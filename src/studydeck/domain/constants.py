"""Centralized constants for the studydeck engine.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
DAY_MS = 86_400_000

# ---------- Scheduler ----------
DEFAULT_EASE = 2.5
MIN_EASE = 1.3
MAX_EASE = 3.0
DEFAULT_INTERVAL = 1

AGAIN_EASE_PENALTY = 0.20
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15
HARD_INTERVAL_FACTOR = 1.2
EASY_INTERVAL_FACTOR = 1.3

GOOD_SECOND_INTERVAL = 6
EASY_FIRST_INTERVAL = 4

# ---------- Selector ----------
LAPSE_WEIGHT = 0.4
OVERDUE_WEIGHT = 1.5

# ---------- Blind scoring ----------
POINTS_PER_CORRECT = 100

# ---------- Persistence ----------
STORAGE_KEY = "study-doc:card-stats"

# ---------- Deck files ----------
DECK_EXTENSIONS = (".yml", ".yaml")
DEFAULT_DECKS_FOLDER = "flashcards"
