"""
YAML Deck Source: reads flashcard decks from a folder of .yml/.yaml files.

Expected shape::

    title: Unit 1
    unit: "1"            # optional
    cards:
      - question: ...
        answer: ...
        id: custom-id    # optional, defaults to <deck>-card-<index>
"""

import logging
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import Any

import yaml  # type: ignore

from studydeck.domain.constants import DECK_EXTENSIONS
from studydeck.domain.errors import DeckValidationError
from studydeck.domain.interfaces import DeckSource
from studydeck.domain.models import Deck, Flashcard

logger = logging.getLogger(__name__)


def path_to_slug(file_path: str) -> str:
    # "flashcards/unit-1.yml" -> "unit-1"
    return PurePosixPath(file_path).stem


def generate_card_id(deck_id: str, index: int) -> str:
    return f"{deck_id}-card-{index}"


def parse_deck_yaml(raw_yaml: str, file_path: str) -> Deck:
    """
    Parse raw YAML text into a Deck.

    Raises:
        DeckValidationError: If the YAML or its structure is invalid.
    """
    deck_id = path_to_slug(file_path)

    # Fix tabs (common user error)
    if "\t" in raw_yaml:
        raw_yaml = raw_yaml.replace("\t", "  ")

    try:
        parsed = yaml.safe_load(raw_yaml)
    except yaml.YAMLError as e:
        raise DeckValidationError(file_path, f"is not valid YAML: {e}") from e

    if not isinstance(parsed, dict):
        raise DeckValidationError(file_path, "must be a YAML object")

    title = parsed.get("title")
    if not title or not isinstance(title, str):
        raise DeckValidationError(file_path, 'is missing a "title" field')

    raw_cards = parsed.get("cards")
    if not isinstance(raw_cards, list) or not raw_cards:
        raise DeckValidationError(file_path, 'must have a non-empty "cards" array')

    cards = tuple(_parse_card(c, i, deck_id, file_path) for i, c in enumerate(raw_cards))

    unit = parsed.get("unit")
    return Deck(
        id=deck_id,
        title=title,
        unit=str(unit) if unit is not None else None,
        cards=cards,
        path=file_path,
    )


def _parse_card(raw: Any, index: int, deck_id: str, file_path: str) -> Flashcard:
    if not isinstance(raw, dict) or not raw.get("question") or not raw.get("answer"):
        raise DeckValidationError(
            file_path, f'has a card at index {index} without "question" and "answer" fields'
        )
    card_id = raw.get("id")
    return Flashcard(
        id=str(card_id) if card_id else generate_card_id(deck_id, index),
        question=str(raw["question"]),
        answer=str(raw["answer"]),
        deck_id=deck_id,
    )


def extract_deck_paths(paths: Iterable[str], base_path: str) -> list[str]:
    """
    Keep only .yml/.yaml files that are direct children of ``base_path``.

    Nested subdirectories are ignored so unrelated YAML deeper in the tree
    is never picked up.
    """
    prefix = base_path.strip("/")
    prefix = f"{prefix}/" if prefix else ""

    found = []
    for p in paths:
        if not p.startswith(prefix) or not p.endswith(DECK_EXTENSIONS):
            continue
        if "/" in p[len(prefix) :]:
            continue
        found.append(p)
    return found


class YamlDeckSource(DeckSource):
    """
    Loads decks from YAML files under ``root``. Paths are POSIX-style and
    relative to ``root``.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    async def list_deck_paths(self, scope: str) -> list[str]:
        folder = self.root / scope if scope else self.root
        if not folder.is_dir():
            logger.warning(f"[decks] Folder not found: {folder}")
            return []

        relative = (p.relative_to(self.root).as_posix() for p in folder.iterdir() if p.is_file())
        return sorted(extract_deck_paths(relative, scope))

    async def load_deck(self, path: str) -> Deck:
        try:
            text = (self.root / path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DeckValidationError(path, "is not valid UTF-8 text") from e
        deck = parse_deck_yaml(text, path)
        logger.debug(f"[decks] Parsed {path}: {len(deck.cards)} cards")
        return deck
