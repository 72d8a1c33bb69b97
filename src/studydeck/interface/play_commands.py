"""Interactive study sessions in the terminal."""

import asyncio
import logging
import random
from pathlib import Path
from typing import Annotated

import typer

from studydeck.application.factory import build_engine
from studydeck.application.session.engine import SessionEngine
from studydeck.application.session.machine import Phase
from studydeck.domain.models import GameMode, Rating
from studydeck.interface._common import _resolve_with_overrides
from studydeck.interface.render import (
    render_answer,
    render_blind_intro,
    render_hud,
    render_question,
    render_results,
    render_round_over,
)

logger = logging.getLogger(__name__)


class QuitSession(Exception):
    pass


def _ask_rating() -> Rating:
    while True:
        raw = typer.prompt("Rate [1-4, q to quit]").strip().lower()
        if raw == "q":
            raise QuitSession()
        if raw in {"1", "2", "3", "4"}:
            return Rating(int(raw))
        typer.secho("Please enter 1, 2, 3 or 4.", fg="yellow")


def run_interactive(engine: SessionEngine) -> None:
    """Drive ``engine`` until the user leaves."""
    asyncio.run(engine.start())

    try:
        while True:
            session = engine.session

            if session.phase == Phase.ERROR:
                typer.secho(f"Error: {session.error}", fg="red")
                if typer.confirm("Retry?", default=False):
                    asyncio.run(engine.retry())
                    continue
                raise typer.Exit(1)

            if session.phase == Phase.BLIND_INTRO and session.tier is not None:
                render_blind_intro(session.tier, session.score, len(session.cards))
                typer.prompt("Press Enter to start", default="", show_default=False)
                engine.start_tier()

            elif session.phase == Phase.PLAYING and session.current_card is not None:
                card = session.current_card
                render_hud(session)
                render_question(card)
                typer.prompt("Press Enter to reveal", default="", show_default=False)
                render_answer(card, engine.previews())
                engine.rate(_ask_rating())

            elif session.phase == Phase.RESULTS:
                render_results(engine.summary(), session.deck.title if session.deck else None)
                if not typer.confirm("Study again?", default=False):
                    return
                engine.replay()

            elif session.phase == Phase.ROUND_OVER:
                render_round_over(engine.outcome())
                if not typer.confirm("New round?", default=False):
                    return
                engine.replay()

            else:
                # still loading, or a phase without its tier or card
                raise typer.Exit(1)
    except QuitSession:
        # Ratings already given stay persisted; only the session is dropped
        logger.info(f"[session] Abandoned in phase {engine.phase.value}")
        typer.echo("Session abandoned.")


def play(
    ctx: typer.Context,
    deck: Annotated[
        str | None, typer.Argument(help="Deck id for unit mode (e.g. 'unit-1').")
    ] = None,
    mode: Annotated[
        GameMode, typer.Option("--mode", "-m", help="unit: play one deck. random: blind ladder.")
    ] = GameMode.UNIT,
    root: Annotated[Path | None, typer.Option(help="Directory holding the deck folder.")] = None,
    folder: Annotated[
        str | None, typer.Option(help="Deck folder relative to the root.")
    ] = None,
    stats_file: Annotated[Path | None, typer.Option(help="Card stats JSON file.")] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for card dealing.")] = None,
):
    """[bold green]Play[/bold green] a unit deck or a random blind-ladder round."""
    if mode == GameMode.UNIT and not deck:
        typer.secho("Unit mode needs a deck id. Run 'studydeck decks' to list them.", fg="red")
        raise typer.Exit(2)

    config = _resolve_with_overrides(
        decks_root=root,
        decks_folder=folder,
        stats_file=stats_file,
        verbose=ctx.obj.get("verbose_bonus", 1) if ctx.obj else 1,
    )
    rng = random.Random(seed) if seed is not None else None
    engine = build_engine(config, mode, deck_id=deck, rng=rng)
    run_interactive(engine)
