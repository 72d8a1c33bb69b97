"""Deck resolution and bulk loading on top of a DeckSource."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

from studydeck.domain.errors import ConfigurationError, StudydeckError
from studydeck.domain.interfaces import DeckSource
from studydeck.domain.models import Deck, LoadReport

logger = logging.getLogger(__name__)


def _stem(path: str) -> str:
    return PurePosixPath(path).stem


def match_deck_path(paths: Iterable[str], deck_id: str) -> str | None:
    """
    Pick the file for ``deck_id``: an exact stem match wins, otherwise the
    first path that contains the id or whose stem ends with it.
    """
    if not deck_id:
        return None
    paths = list(paths)
    for p in paths:
        if _stem(p) == deck_id:
            return p
    for p in paths:
        if deck_id in p or _stem(p).endswith(deck_id):
            return p
    return None


def find_deck(decks: Sequence[Deck], deck_id: str | None) -> Deck | None:
    if not deck_id:
        return None
    for deck in decks:
        if deck.id == deck_id:
            return deck
    for deck in decks:
        if deck.id.endswith(deck_id) or _stem(deck.path).endswith(deck_id):
            return deck
    return None


async def load_all_decks(source: DeckSource, scope: str) -> LoadReport:
    """
    Load every deck in ``scope``. A deck that fails to load is dropped and
    its reason recorded; the others still load.

    Raises:
        ConfigurationError: If the scope holds no deck files at all.
    """
    paths = await source.list_deck_paths(scope)
    if not paths:
        raise ConfigurationError("No flashcard decks found.")

    outcomes = await asyncio.gather(
        *(source.load_deck(p) for p in paths), return_exceptions=True
    )

    report = LoadReport()
    for path, outcome in zip(paths, outcomes):
        if isinstance(outcome, Deck):
            report.decks.append(outcome)
        elif isinstance(outcome, (StudydeckError, OSError)):
            logger.error(f"Failed to load flashcard deck {path}: {outcome}")
            report.failures[path] = str(outcome)
        else:
            raise outcome

    logger.info(
        f"[decks] Loaded {len(report.decks)}/{len(paths)} decks from '{scope}'"
    )
    return report


async def load_deck_by_id(source: DeckSource, scope: str, deck_id: str) -> Deck:
    """
    Raises:
        ConfigurationError: If no deck file matches ``deck_id``.
        DeckValidationError: If the matching file is malformed.
    """
    paths = await source.list_deck_paths(scope)
    path = match_deck_path(paths, deck_id)
    if path is None:
        raise ConfigurationError(f'Deck "{deck_id}" not found in repository.')
    return await source.load_deck(path)
