from unittest.mock import MagicMock

import pytest

from studydeck.application.stats.service import StatsService
from studydeck.domain.errors import StatsStoreError
from studydeck.domain.models import CardStats
from studydeck.domain.stats.ports import StatsStore
from studydeck.infrastructure.adapters.stats.memory_store import InMemoryStatsStore


@pytest.fixture
def mock_store():
    return MagicMock(spec=StatsStore)


def test_get_returns_defaults_for_unseen_card(now):
    service = StatsService(InMemoryStatsStore())

    stats = service.get("c1", now=now)

    assert stats == CardStats(id="c1", ease=2.5, interval=1, due=now, reviews=0, lapses=0)


def test_get_returns_stored_record(now):
    stored = CardStats(id="c1", ease=2.1, interval=6, due=now + 5, reviews=3, lapses=1)
    service = StatsService(InMemoryStatsStore([stored]))
    assert service.get("c1", now=now) == stored


def test_record_batch_persists_every_update():
    store = InMemoryStatsStore()
    service = StatsService(store)

    ok = service.record_batch([CardStats(id="a"), CardStats(id="b")])

    assert ok is True
    assert set(store.load_all()) == {"a", "b"}


def test_record_batch_with_single_update_uses_save_one(mock_store):
    service = StatsService(mock_store)
    service.record_batch([CardStats(id="a")])
    mock_store.save_one.assert_called_once_with(CardStats(id="a"))
    mock_store.save_batch.assert_not_called()


def test_empty_batch_is_a_noop(mock_store):
    assert StatsService(mock_store).record_batch([]) is True
    mock_store.save_batch.assert_not_called()


def test_load_failure_is_treated_as_empty(mock_store, caplog):
    mock_store.load_all.side_effect = StatsStoreError("corrupt")
    service = StatsService(mock_store)

    assert service.load_all() == {}
    assert "Could not read card stats" in caplog.text


def test_write_failure_is_reported_not_raised(mock_store, caplog):
    mock_store.save_one.side_effect = StatsStoreError("read-only")
    mock_store.save_batch.side_effect = StatsStoreError("read-only")
    service = StatsService(mock_store)

    assert service.record(CardStats(id="a")) is False
    assert service.record_batch([CardStats(id="a"), CardStats(id="b")]) is False
    assert "Failed to save stats" in caplog.text


def test_deck_overviews_reads_store_once(mock_store, deck_factory, now):
    decks = [deck_factory("unit-1", 2), deck_factory("unit-2", 3)]
    mock_store.load_all.return_value = {
        "unit-1-card-0": CardStats(id="unit-1-card-0", due=now - 1, reviews=1)
    }
    service = StatsService(mock_store)

    overviews = service.deck_overviews(decks, now=now)

    assert [(o.deck_id, o.due, o.learned, o.total) for o in overviews] == [
        ("unit-1", 1, 1, 2),
        ("unit-2", 0, 0, 3),
    ]
    mock_store.load_all.assert_called_once()
