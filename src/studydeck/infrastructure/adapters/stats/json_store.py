"""
JSON Stats Store: Infrastructure adapter for a key/value JSON file.

The file holds a JSON object of storage keys. Card stats live as one JSON
string under a single key (the same shape the web viewer keeps in
localStorage), read in full and written in full. Other keys are left alone.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from studydeck.domain.constants import STORAGE_KEY
from studydeck.domain.errors import StatsStoreError
from studydeck.domain.models import CardStats, Rating
from studydeck.domain.stats.ports import StatsStore

logger = logging.getLogger(__name__)


def stats_to_record(stats: CardStats) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": stats.id,
        "ease": stats.ease,
        "interval": stats.interval,
        "due": stats.due,
        "reviews": stats.reviews,
        "lapses": stats.lapses,
    }
    if stats.last_rating is not None:
        record["lastRating"] = int(stats.last_rating)
    return record


def record_to_stats(card_id: str, record: dict[str, Any]) -> CardStats:
    last = record.get("lastRating")
    return CardStats(
        id=str(record.get("id", card_id)),
        ease=float(record["ease"]),
        interval=int(record["interval"]),
        due=int(record["due"]),
        reviews=int(record.get("reviews", 0)),
        lapses=int(record.get("lapses", 0)),
        last_rating=Rating(last) if last is not None else None,
    )


class JsonFileStatsStore(StatsStore):
    """
    Stores all card stats as one JSON blob under ``key`` in ``path``.
    """

    def __init__(self, path: Path, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_file(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StatsStoreError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StatsStoreError(f"{self.path} must contain a JSON object")
        return data

    def _write_file(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise StatsStoreError(f"Cannot write {self.path}: {e}") from e

    def _read_blob(self, data: dict[str, Any]) -> dict[str, Any]:
        raw = data.get(self.key)
        if not raw:
            return {}

        try:
            blob = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError as e:
            raise StatsStoreError(f"Stats under '{self.key}' are not valid JSON: {e}") from e
        if not isinstance(blob, dict):
            raise StatsStoreError(f"Stats under '{self.key}' must be a JSON object")
        return blob

    def load_all(self) -> dict[str, CardStats]:
        blob = self._read_blob(self._read_file())
        stats: dict[str, CardStats] = {}
        for card_id, record in blob.items():
            try:
                stats[card_id] = record_to_stats(card_id, record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed stats record for {card_id}: {e}")
        return stats

    def save_one(self, stats: CardStats) -> None:
        self.save_batch([stats])

    def save_batch(self, stats: Iterable[CardStats]) -> None:
        data = self._read_file()
        # Records load_all skipped are written back untouched
        blob = self._read_blob(data)
        for s in stats:
            blob[s.id] = stats_to_record(s)

        data[self.key] = json.dumps(blob)
        self._write_file(data)
        logger.debug(f"[stats] Wrote {len(blob)} records to {self.path}")
