# Application Session Package
from .engine import SessionEngine
from .machine import (
    DecksLoaded,
    GameSession,
    LoadFailed,
    Phase,
    RateCard,
    Replay,
    Retry,
    RoundOutcome,
    StartTier,
    Transition,
    new_session,
    round_outcome,
    transition,
)
from .summary import result_message, session_summary

__all__ = [
    "DecksLoaded",
    "GameSession",
    "LoadFailed",
    "Phase",
    "RateCard",
    "Replay",
    "Retry",
    "RoundOutcome",
    "SessionEngine",
    "StartTier",
    "Transition",
    "new_session",
    "result_message",
    "round_outcome",
    "session_summary",
    "transition",
]
