"""
Session state machine for unit playthroughs and blind-ladder rounds.

Phases:
    loading -> error | blind-intro | playing
    blind-intro -> playing
    playing -> blind-intro (next tier) | round-over | results
    results -> playing (study again)
    round-over -> blind-intro (new round)
    error -> loading (retry)

All transitions are pure: they take a GameSession plus an event and return a
new GameSession together with the CardStats the caller must persist.
"""

import random
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from studydeck.application.deck_loader import find_deck
from studydeck.application.scheduler import apply_rating
from studydeck.application.selector import sort_for_unit_mode, weighted_select
from studydeck.application.session.summary import session_summary
from studydeck.application.utils.common import round_half_up
from studydeck.domain.blinds import BLINDS, BlindTier
from studydeck.domain.constants import POINTS_PER_CORRECT
from studydeck.domain.errors import InvalidTransition
from studydeck.domain.models import (
    CardStats,
    Deck,
    Flashcard,
    GameMode,
    Rating,
    ReviewResult,
    SessionSummary,
    default_stats,
)


class Phase(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    BLIND_INTRO = "blind-intro"
    PLAYING = "playing"
    RESULTS = "results"
    ROUND_OVER = "round-over"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DecksLoaded:
    decks: tuple[Deck, ...]


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class StartTier:
    pass


@dataclass(frozen=True)
class RateCard:
    rating: Rating


@dataclass(frozen=True)
class Replay:
    pass


@dataclass(frozen=True)
class Retry:
    pass


Event = DecksLoaded | LoadFailed | StartTier | RateCard | Replay | Retry


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GameSession:
    """
    Aggregate state of one study session.

    ``results`` holds the ratings of the current unit pass or blind tier;
    ``round_results`` accumulates every tier of a random-mode round.
    """

    mode: GameMode
    phase: Phase = Phase.LOADING
    deck_id: str | None = None
    deck: Deck | None = None
    pool: tuple[Flashcard, ...] = ()
    cards: tuple[Flashcard, ...] = ()
    current_index: int = 0
    results: tuple[ReviewResult, ...] = ()
    round_results: tuple[ReviewResult, ...] = ()
    tier_index: int = 0
    score: int = 0
    passed: bool = False
    last_earned: int = 0
    error: str | None = None
    ladder: tuple[BlindTier, ...] = BLINDS

    @property
    def current_card(self) -> Flashcard | None:
        if self.phase != Phase.PLAYING or self.current_index >= len(self.cards):
            return None
        return self.cards[self.current_index]

    @property
    def tier(self) -> BlindTier | None:
        if self.mode != GameMode.RANDOM:
            return None
        return self.ladder[self.tier_index]

    @property
    def is_last_tier(self) -> bool:
        return self.tier_index >= len(self.ladder) - 1

    @property
    def running_correct_fraction(self) -> float:
        if not self.results:
            return 0.0
        return sum(1 for r in self.results if r.rating.is_correct) / len(self.results)

    def summary(self) -> SessionSummary:
        if self.mode == GameMode.RANDOM:
            return session_summary(self.round_results)
        return session_summary(self.results)


@dataclass(frozen=True)
class Transition:
    session: GameSession
    writes: tuple[CardStats, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RoundOutcome:
    """What the round-over screen reports."""

    passed: bool
    full_ladder_cleared: bool
    tiers_reached: int
    score: int
    tier_label: str
    summary: SessionSummary

    @property
    def headline(self) -> str:
        if self.full_ladder_cleared:
            return "Full Run Complete!"
        if self.passed:
            return f"Passed {self.tier_label}"
        return f"Failed {self.tier_label}"


def new_session(
    mode: GameMode | str,
    deck_id: str | None = None,
    ladder: tuple[BlindTier, ...] = BLINDS,
) -> GameSession:
    if not ladder:
        raise ValueError("Blind ladder must have at least one tier")
    for tier in ladder:
        if tier.card_count < 1:
            raise ValueError(f"Blind tier '{tier.name}' must deal at least one card")
    return GameSession(mode=GameMode(mode), deck_id=deck_id, ladder=tuple(ladder))


def round_outcome(session: GameSession) -> RoundOutcome:
    if session.phase != Phase.ROUND_OVER:
        raise InvalidTransition(session.phase.value, "round_outcome")
    tier = session.ladder[session.tier_index]
    return RoundOutcome(
        passed=session.passed,
        full_ladder_cleared=session.passed and session.is_last_tier,
        tiers_reached=session.tier_index + 1,
        score=session.score,
        tier_label=tier.label,
        summary=session_summary(session.round_results),
    )


# ---------------------------------------------------------------------------
# Transition function
# ---------------------------------------------------------------------------


def transition(
    session: GameSession,
    event: Event,
    stats: Mapping[str, CardStats],
    now: int,
    rng: random.Random | None = None,
) -> Transition:
    """
    Apply ``event`` to ``session``.

    Args:
        session: Current state.
        event: The event to apply.
        stats: Stored stats as read before this event.
        now: Epoch milliseconds.
        rng: Random source used when dealing blind tiers.

    Raises:
        InvalidTransition: If the current phase does not accept the event.
    """
    rng = rng or random.Random()
    phase = session.phase

    if phase == Phase.LOADING and isinstance(event, DecksLoaded):
        return Transition(_on_loaded(session, event.decks, stats, now, rng))

    if phase == Phase.LOADING and isinstance(event, LoadFailed):
        return Transition(replace(session, phase=Phase.ERROR, error=event.message))

    if phase == Phase.ERROR and isinstance(event, Retry):
        return Transition(replace(session, phase=Phase.LOADING, error=None))

    if phase == Phase.BLIND_INTRO and isinstance(event, StartTier):
        return Transition(replace(session, phase=Phase.PLAYING))

    if phase == Phase.PLAYING and isinstance(event, RateCard):
        return _on_rate(session, Rating(event.rating), stats, now, rng)

    if phase == Phase.RESULTS and isinstance(event, Replay):
        deck = session.deck
        if deck is None:
            raise InvalidTransition(phase.value, type(event).__name__)
        return Transition(
            replace(
                session,
                phase=Phase.PLAYING,
                cards=tuple(sort_for_unit_mode(deck.cards, stats, now)),
                current_index=0,
                results=(),
            )
        )

    if phase == Phase.ROUND_OVER and isinstance(event, Replay):
        return Transition(_deal_tier(_reset_round(session), 0, stats, now, rng))

    raise InvalidTransition(phase.value, type(event).__name__)


def _on_loaded(
    session: GameSession,
    decks: tuple[Deck, ...],
    stats: Mapping[str, CardStats],
    now: int,
    rng: random.Random,
) -> GameSession:
    if session.mode == GameMode.UNIT:
        deck = find_deck(decks, session.deck_id)
        if deck is None:
            return replace(
                session,
                phase=Phase.ERROR,
                error=f'Deck "{session.deck_id or ""}" not found in repository.',
            )
        if not deck.cards:
            return replace(session, phase=Phase.ERROR, error=f'Deck "{deck.id}" has no cards.')
        return replace(
            session,
            phase=Phase.PLAYING,
            deck=deck,
            cards=tuple(sort_for_unit_mode(deck.cards, stats, now)),
            current_index=0,
            results=(),
        )

    pool = tuple(card for deck in decks for card in deck.cards)
    if not pool:
        return replace(session, phase=Phase.ERROR, error="No flashcards found.")
    return _deal_tier(_reset_round(replace(session, pool=pool)), 0, stats, now, rng)


def _on_rate(
    session: GameSession,
    rating: Rating,
    stats: Mapping[str, CardStats],
    now: int,
    rng: random.Random,
) -> Transition:
    card = session.cards[session.current_index]
    current = stats.get(card.id) or default_stats(card.id, now)
    updated = apply_rating(current, rating, now=now)

    session = replace(
        session,
        current_index=session.current_index + 1,
        results=session.results + (ReviewResult(card_id=card.id, rating=rating),),
    )

    if session.current_index < len(session.cards):
        return Transition(session, (updated,))

    if session.mode == GameMode.UNIT:
        return Transition(replace(session, phase=Phase.RESULTS), (updated,))

    fresh_stats = {**stats, updated.id: updated}
    return Transition(_complete_tier(session, fresh_stats, now, rng), (updated,))


def _complete_tier(
    session: GameSession,
    stats: Mapping[str, CardStats],
    now: int,
    rng: random.Random,
) -> GameSession:
    tier = session.ladder[session.tier_index]
    correct = sum(1 for r in session.results if r.rating.is_correct)
    passed = correct / len(session.cards) >= tier.threshold
    earned = round_half_up(correct * POINTS_PER_CORRECT * tier.point_multiplier)

    session = replace(
        session,
        score=session.score + earned,
        last_earned=earned,
        passed=passed,
        round_results=session.round_results + session.results,
    )

    if passed and not session.is_last_tier:
        return _deal_tier(session, session.tier_index + 1, stats, now, rng)
    return replace(session, phase=Phase.ROUND_OVER)


def _deal_tier(
    session: GameSession,
    tier_index: int,
    stats: Mapping[str, CardStats],
    now: int,
    rng: random.Random,
) -> GameSession:
    tier = session.ladder[tier_index]
    cards = weighted_select(session.pool, tier.card_count, stats, now=now, rng=rng)
    return replace(
        session,
        phase=Phase.BLIND_INTRO,
        tier_index=tier_index,
        cards=tuple(cards),
        current_index=0,
        results=(),
    )


def _reset_round(session: GameSession) -> GameSession:
    return replace(
        session,
        score=0,
        last_earned=0,
        passed=False,
        tier_index=0,
        round_results=(),
    )
