import random
from pathlib import Path

import pytest

from studydeck.domain.models import Deck, Flashcard

NOW = 1_700_000_000_000
DAY = 86_400_000


def make_cards(deck_id: str, n: int) -> tuple[Flashcard, ...]:
    return tuple(
        Flashcard(id=f"{deck_id}-card-{i}", question=f"Q{i}", answer=f"A{i}", deck_id=deck_id)
        for i in range(n)
    )


def make_deck(deck_id: str, n: int, title: str | None = None) -> Deck:
    return Deck(
        id=deck_id,
        title=title or deck_id.title(),
        cards=make_cards(deck_id, n),
        path=f"flashcards/{deck_id}.yml",
    )


def deck_yaml(title: str, n: int) -> str:
    lines = [f"title: {title}", "cards:"]
    for i in range(n):
        lines.append(f"  - question: Question {i}")
        lines.append(f"    answer: Answer {i}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def deck_factory():
    return make_deck


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def decks_root(tmp_path: Path) -> Path:
    """A decks root with a flashcards/ folder holding two small decks."""
    root = tmp_path / "notes"
    folder = root / "flashcards"
    folder.mkdir(parents=True)
    (folder / "unit-1.yml").write_text(deck_yaml("Unit 1", 3))
    (folder / "unit-2.yaml").write_text(deck_yaml("Unit 2", 2))
    return root


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for var in ("STUDYDECK_DECKS_ROOT", "STUDYDECK_DECKS_FOLDER", "STUDYDECK_STATS_FILE"):
        monkeypatch.delenv(var, raising=False)
    return home
