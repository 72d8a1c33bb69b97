from studydeck.domain.blinds import BLINDS
from studydeck.domain.errors import DeckValidationError, InvalidTransition
from studydeck.domain.models import DeckOverview, Rating, SessionSummary


def test_only_good_and_easy_count_as_correct():
    assert [r.is_correct for r in Rating] == [False, False, True, True]
    assert [r.label for r in Rating] == ["Again", "Hard", "Good", "Easy"]


def test_blind_ladder_gets_harder():
    assert [b.name for b in BLINDS] == ["small", "big", "boss"]
    assert [b.card_count for b in BLINDS] == [10, 20, 30]
    assert [b.threshold for b in BLINDS] == [0.70, 0.75, 0.80]
    assert [b.point_multiplier for b in BLINDS] == [1, 1.5, 2]


def test_summary_count_by_rating():
    summary = SessionSummary(again=1, hard=2, good=3, easy=4, total=10, correct=7, pct=70)
    assert [summary.count(r) for r in Rating] == [1, 2, 3, 4]


def test_learned_pct_of_empty_deck():
    assert DeckOverview(deck_id="x", title="X", due=0, learned=0, total=0).learned_pct == 0


def test_error_messages():
    err = DeckValidationError("flashcards/a.yml", "must be a YAML object")
    assert str(err) == 'Flashcard file "flashcards/a.yml" must be a YAML object'
    assert err.path == "flashcards/a.yml"

    assert "RateCard" in str(InvalidTransition("loading", "RateCard"))
