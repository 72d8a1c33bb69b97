import json

import pytest

from studydeck.domain.constants import STORAGE_KEY
from studydeck.domain.errors import StatsStoreError
from studydeck.domain.models import CardStats, Rating
from studydeck.infrastructure.adapters.stats.json_store import (
    JsonFileStatsStore,
    record_to_stats,
    stats_to_record,
)


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "state" / "card-stats.json"


def test_missing_file_is_empty(stats_path):
    assert JsonFileStatsStore(stats_path).load_all() == {}


def test_save_creates_file_with_blob_under_key(stats_path):
    store = JsonFileStatsStore(stats_path)
    store.save_one(CardStats(id="u-card-0", ease=2.3, interval=1, due=5, reviews=1, lapses=1,
                             last_rating=Rating.AGAIN))

    data = json.loads(stats_path.read_text())
    blob = json.loads(data[STORAGE_KEY])
    assert blob == {
        "u-card-0": {
            "id": "u-card-0",
            "ease": 2.3,
            "interval": 1,
            "due": 5,
            "reviews": 1,
            "lapses": 1,
            "lastRating": 1,
        }
    }


def test_batch_merges_with_existing_records(stats_path):
    store = JsonFileStatsStore(stats_path)
    store.save_one(CardStats(id="a", reviews=1))
    store.save_batch([CardStats(id="a", reviews=2), CardStats(id="b", reviews=1)])

    loaded = store.load_all()
    assert set(loaded) == {"a", "b"}
    assert loaded["a"].reviews == 2


def test_other_keys_are_preserved(stats_path):
    stats_path.parent.mkdir(parents=True)
    stats_path.write_text(json.dumps({"theme": "dark"}))

    JsonFileStatsStore(stats_path).save_one(CardStats(id="a"))

    data = json.loads(stats_path.read_text())
    assert data["theme"] == "dark"
    assert STORAGE_KEY in data


def test_reads_records_written_by_web_viewer(stats_path):
    stats_path.parent.mkdir(parents=True)
    blob = {"x": {"id": "x", "ease": 2.65, "interval": 4, "due": 1000, "reviews": 1, "lapses": 0,
                  "lastRating": 4}}
    stats_path.write_text(json.dumps({STORAGE_KEY: json.dumps(blob)}))

    stats = JsonFileStatsStore(stats_path).load_all()["x"]

    assert stats.ease == 2.65
    assert stats.last_rating == Rating.EASY


def test_malformed_record_is_skipped(stats_path, caplog):
    stats_path.parent.mkdir(parents=True)
    blob = {"good": {"ease": 2.5, "interval": 1, "due": 0}, "bad": {"ease": "x"}}
    stats_path.write_text(json.dumps({STORAGE_KEY: json.dumps(blob)}))

    loaded = JsonFileStatsStore(stats_path).load_all()

    assert list(loaded) == ["good"]
    assert "Skipping malformed stats record for bad" in caplog.text


def test_saving_keeps_records_it_cannot_parse(stats_path):
    stats_path.parent.mkdir(parents=True)
    unreadable = {"ease": "2.5e", "interval": 1, "due": 0}
    stats_path.write_text(json.dumps({STORAGE_KEY: json.dumps({"x": unreadable})}))
    store = JsonFileStatsStore(stats_path)

    store.save_one(CardStats(id="y"))

    blob = json.loads(json.loads(stats_path.read_text())[STORAGE_KEY])
    assert blob["x"] == unreadable
    assert blob["y"]["id"] == "y"
    assert list(store.load_all()) == ["y"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_corrupt_file_raises(stats_path, content):
    stats_path.parent.mkdir(parents=True)
    stats_path.write_text(content)
    with pytest.raises(StatsStoreError):
        JsonFileStatsStore(stats_path).load_all()


def test_corrupt_blob_raises(stats_path):
    stats_path.parent.mkdir(parents=True)
    stats_path.write_text(json.dumps({STORAGE_KEY: "{oops"}))
    with pytest.raises(StatsStoreError):
        JsonFileStatsStore(stats_path).load_all()


def test_record_without_last_rating():
    record = stats_to_record(CardStats(id="a"))
    assert "lastRating" not in record
    assert record_to_stats("a", record) == CardStats(id="a")
