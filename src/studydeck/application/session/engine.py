"""
Session Engine: drives the pure state machine against real collaborators.

Each dispatched event runs as one synchronous sequence: read stats, apply the
transition, persist the resulting writes. Deck loading is the only awaited
step and happens while the session sits in the loading phase.
"""

import logging
import random
from collections.abc import Callable

from studydeck.application.deck_loader import load_all_decks, load_deck_by_id
from studydeck.application.scheduler import preview_interval
from studydeck.application.stats.service import StatsService
from studydeck.application.utils.common import now_ms
from studydeck.domain.blinds import BLINDS, BlindTier
from studydeck.domain.errors import StudydeckError
from studydeck.domain.interfaces import DeckSource
from studydeck.domain.models import GameMode, Rating, SessionSummary

from .machine import (
    DecksLoaded,
    Event,
    GameSession,
    LoadFailed,
    Phase,
    RateCard,
    Replay,
    Retry,
    RoundOutcome,
    StartTier,
    new_session,
    round_outcome,
    transition,
)

logger = logging.getLogger(__name__)


class SessionEngine:
    """
    Owns one GameSession and the collaborators it needs.

    Persistence failures never abort the session: they are logged by
    StatsService and the affected update is dropped.
    """

    def __init__(
        self,
        deck_source: DeckSource,
        stats: StatsService,
        mode: GameMode | str,
        deck_id: str | None = None,
        scope: str = "",
        ladder: tuple[BlindTier, ...] = BLINDS,
        rng: random.Random | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._source = deck_source
        self._stats = stats
        self._rng = rng or random.Random()
        self._clock = clock
        self.scope = scope
        self.session: GameSession = new_session(mode, deck_id=deck_id, ladder=ladder)

    # -- state accessors ---------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.session.phase

    def summary(self) -> SessionSummary:
        return self.session.summary()

    def outcome(self) -> RoundOutcome:
        return round_outcome(self.session)

    def previews(self) -> dict[Rating, int]:
        """Interval each rating would give the current card."""
        card = self.session.current_card
        if card is None:
            return {}
        current = self._stats.get(card.id, now=self._clock())
        return {r: preview_interval(current, r, now=self._clock()) for r in Rating}

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> GameSession:
        """Load decks for the session scope and leave the loading phase."""
        if self.session.phase != Phase.LOADING:
            return self.session

        try:
            if self.session.mode == GameMode.UNIT:
                deck = await load_deck_by_id(
                    self._source, self.scope, self.session.deck_id or ""
                )
                decks = (deck,)
            else:
                report = await load_all_decks(self._source, self.scope)
                decks = tuple(report.decks)
        except (StudydeckError, OSError) as e:
            logger.error(f"[session] Loading failed: {e}")
            return self.dispatch(LoadFailed(message=str(e)))

        return self.dispatch(DecksLoaded(decks=decks))

    async def retry(self) -> GameSession:
        self.dispatch(Retry())
        return await self.start()

    def dispatch(self, event: Event) -> GameSession:
        """
        Apply ``event`` and persist any stats it produced.

        Raises:
            InvalidTransition: If the current phase does not accept the event.
        """
        now = self._clock()
        result = transition(
            self.session,
            event,
            stats=self._stats.load_all(),
            now=now,
            rng=self._rng,
        )
        if result.writes:
            self._stats.record_batch(result.writes)

        previous = self.session.phase
        self.session = result.session
        if previous != self.session.phase:
            logger.debug(
                f"[session] {previous.value} -> {self.session.phase.value} "
                f"on {type(event).__name__}"
            )
        return self.session

    # -- convenience events ------------------------------------------------

    def start_tier(self) -> GameSession:
        return self.dispatch(StartTier())

    def rate(self, rating: Rating | int) -> GameSession:
        return self.dispatch(RateCard(rating=Rating(rating)))

    def replay(self) -> GameSession:
        return self.dispatch(Replay())
