import logging
import random
import time
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from ulid import ULID

from studydeck.application.scheduler import format_interval
from studydeck.application.session.engine import SessionEngine
from studydeck.application.session.machine import Phase
from studydeck.application.session.summary import result_message
from studydeck.application.utils.common import round_half_up
from studydeck.consts import VERSION
from studydeck.domain.errors import ConfigurationError, InvalidTransition
from studydeck.domain.models import SessionSummary

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("studydeck.server")

# Active sessions, one engine per id. Single writer per stats file is assumed.
sessions: dict[str, SessionEngine] = {}

# Oldest sessions are evicted past this many; finished ones go first.
MAX_SESSIONS = 64
FINISHED_PHASES = (Phase.RESULTS, Phase.ROUND_OVER, Phase.ERROR)


def _evict_sessions() -> None:
    while len(sessions) >= MAX_SESSIONS:
        finished = [sid for sid, e in sessions.items() if e.phase in FINISHED_PHASES]
        victim = finished[0] if finished else next(iter(sessions))
        del sessions[victim]
        logger.info(f"Evicted session {victim}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"studydeck server v{VERSION} starting up...")
    yield
    # Shutdown
    sessions.clear()
    logger.info("studydeck server shutting down...")


app = FastAPI(
    title="studydeck server",
    description="Session engine API for the flashcard game front end.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    active_sessions: int


class DeckOverviewResponse(BaseModel):
    deck_id: str
    title: str
    unit: str | None
    due: int
    learned: int
    total: int


class DeckListResponse(BaseModel):
    decks: list[DeckOverviewResponse]
    failures: dict[str, str]


class CreateSessionRequest(BaseModel):
    mode: Literal["unit", "random"] = "unit"
    deck: str | None = None
    folder: str | None = None
    seed: int | None = None


class RateRequest(BaseModel):
    rating: int = Field(ge=1, le=4)


class TierView(BaseModel):
    name: str
    label: str
    card_count: int
    threshold: float
    point_multiplier: float


class CardView(BaseModel):
    id: str
    question: str
    answer: str
    deck_id: str
    previews: dict[str, str]


class SummaryView(BaseModel):
    again: int
    hard: int
    good: int
    easy: int
    total: int
    correct: int
    pct: int
    message: str


class OutcomeView(BaseModel):
    headline: str
    passed: bool
    full_ladder_cleared: bool
    tiers_reached: int


class SessionView(BaseModel):
    id: str
    mode: str
    phase: str
    error: str | None = None
    deck_title: str | None = None
    position: int
    total_cards: int
    score: int
    last_earned: int
    tier_index: int
    tier: TierView | None = None
    running_correct_pct: int
    card: CardView | None = None
    summary: SummaryView | None = None
    outcome: OutcomeView | None = None


def _summary_view(summary: SessionSummary) -> SummaryView:
    return SummaryView(
        again=summary.again,
        hard=summary.hard,
        good=summary.good,
        easy=summary.easy,
        total=summary.total,
        correct=summary.correct,
        pct=summary.pct,
        message=result_message(summary.pct),
    )


def _session_view(session_id: str, engine: SessionEngine) -> SessionView:
    s = engine.session
    tier = s.tier

    card_view = None
    if s.current_card is not None:
        card = s.current_card
        card_view = CardView(
            id=card.id,
            question=card.question,
            answer=card.answer,
            deck_id=card.deck_id,
            previews={
                rating.label: format_interval(days) for rating, days in engine.previews().items()
            },
        )

    summary_view = None
    outcome_view = None
    if s.phase in (Phase.RESULTS, Phase.ROUND_OVER):
        summary_view = _summary_view(engine.summary())
    if s.phase == Phase.ROUND_OVER:
        outcome = engine.outcome()
        outcome_view = OutcomeView(
            headline=outcome.headline,
            passed=outcome.passed,
            full_ladder_cleared=outcome.full_ladder_cleared,
            tiers_reached=outcome.tiers_reached,
        )

    return SessionView(
        id=session_id,
        mode=s.mode.value,
        phase=s.phase.value,
        error=s.error,
        deck_title=s.deck.title if s.deck else None,
        position=s.current_index + 1 if s.phase == Phase.PLAYING else s.current_index,
        total_cards=len(s.cards),
        score=s.score,
        last_earned=s.last_earned,
        tier_index=s.tier_index,
        tier=TierView(**tier.__dict__) if tier else None,
        running_correct_pct=round_half_up(s.running_correct_fraction * 100),
        card=card_view,
        summary=summary_view,
        outcome=outcome_view,
    )


def _get_engine(session_id: str) -> SessionEngine:
    engine = sessions.get(session_id)
    if engine is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return engine


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(
        status="ok",
        version=VERSION,
        uptime_seconds=time.time() - start_time,
        active_sessions=len(sessions),
    )


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/decks", response_model=DeckListResponse)
async def list_decks(folder: str | None = None):
    """List decks in a folder with their due/learned counters."""
    from studydeck.application.config import resolve_config
    from studydeck.application.deck_loader import load_all_decks
    from studydeck.application.factory import get_deck_source, get_stats_service

    config = resolve_config({"decks_folder": folder})
    try:
        report = await load_all_decks(get_deck_source(config), config.decks_folder)
    except ConfigurationError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    overviews = get_stats_service(config).deck_overviews(report.decks)
    return DeckListResponse(
        decks=[DeckOverviewResponse(**o.__dict__) for o in overviews],
        failures=report.failures,
    )


@app.post("/sessions", response_model=SessionView, status_code=201)
async def create_session(req: CreateSessionRequest):
    """
    Start a session. Loading happens before the response, so the returned
    phase is already error, blind-intro or playing.
    """
    from studydeck.application.config import resolve_config
    from studydeck.application.factory import build_engine

    config = resolve_config()
    rng = random.Random(req.seed) if req.seed is not None else None
    engine = build_engine(config, req.mode, deck_id=req.deck, folder=req.folder, rng=rng)
    await engine.start()

    session_id = f"session_{ULID()}"
    _evict_sessions()
    sessions[session_id] = engine
    logger.info(f"Session {session_id} created: mode={req.mode} phase={engine.phase.value}")
    return _session_view(session_id, engine)


@app.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str):
    return _session_view(session_id, _get_engine(session_id))


@app.post("/sessions/{session_id}/start", response_model=SessionView)
async def start_tier(session_id: str):
    """Leave the blind intro and start dealing cards."""
    engine = _get_engine(session_id)
    try:
        engine.start_tier()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _session_view(session_id, engine)


@app.post("/sessions/{session_id}/rate", response_model=SessionView)
async def rate_card(session_id: str, req: RateRequest):
    """Rate the current card (1=Again, 2=Hard, 3=Good, 4=Easy)."""
    engine = _get_engine(session_id)
    try:
        engine.rate(req.rating)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _session_view(session_id, engine)


@app.post("/sessions/{session_id}/replay", response_model=SessionView)
async def replay(session_id: str):
    """Study again (unit) or start a new round (random)."""
    engine = _get_engine(session_id)
    try:
        engine.replay()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _session_view(session_id, engine)


@app.post("/sessions/{session_id}/retry", response_model=SessionView)
async def retry(session_id: str):
    """Reload decks after an error."""
    engine = _get_engine(session_id)
    try:
        await engine.retry()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _session_view(session_id, engine)


@app.delete("/sessions/{session_id}")
async def discard_session(session_id: str):
    """
    Drop the in-memory session. Stats already written by earlier ratings
    are kept.
    """
    _get_engine(session_id)
    del sessions[session_id]
    return {"ok": True}
