"""
Adapter Factory
Centralizes the wiring of concrete adapters behind the domain ports.
"""

import random

from studydeck.application.config import AppConfig
from studydeck.application.session.engine import SessionEngine
from studydeck.application.stats.service import StatsService
from studydeck.domain.interfaces import DeckSource
from studydeck.domain.models import GameMode
from studydeck.domain.stats.ports import StatsStore
from studydeck.infrastructure.adapters.stats.json_store import JsonFileStatsStore
from studydeck.infrastructure.adapters.yaml_decks import YamlDeckSource


def get_stats_store(config: AppConfig) -> StatsStore:
    return JsonFileStatsStore(config.stats_file, key=config.storage_key)


def get_deck_source(config: AppConfig) -> DeckSource:
    return YamlDeckSource(config.decks_root)


def get_stats_service(config: AppConfig) -> StatsService:
    return StatsService(get_stats_store(config))


def build_engine(
    config: AppConfig,
    mode: GameMode | str,
    deck_id: str | None = None,
    folder: str | None = None,
    rng: random.Random | None = None,
) -> SessionEngine:
    """A SessionEngine wired to the configured deck folder and stats file."""
    return SessionEngine(
        deck_source=get_deck_source(config),
        stats=get_stats_service(config),
        mode=mode,
        deck_id=deck_id,
        scope=folder if folder is not None else config.decks_folder,
        rng=rng,
    )
