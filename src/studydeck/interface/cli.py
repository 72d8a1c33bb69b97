"""studydeck CLI: root commands and subgroup registration."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from studydeck.application.config import resolve_config
from studydeck.interface._common import _resolve_with_overrides

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="studydeck: spaced-repetition flashcards with a blind-ladder game mode.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from studydeck.interface.play_commands import play  # noqa: E402

app.command("play")(play)

config_app = typer.Typer(help="Manage studydeck configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for studydeck."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def decks(
    ctx: typer.Context,
    root: Annotated[Path | None, typer.Option(help="Directory holding the deck folder.")] = None,
    folder: Annotated[str | None, typer.Option(help="Deck folder relative to the root.")] = None,
    stats_file: Annotated[Path | None, typer.Option(help="Card stats JSON file.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List decks with due and learned counts."""
    from studydeck.application.deck_loader import load_all_decks
    from studydeck.application.factory import get_deck_source, get_stats_service
    from studydeck.domain.errors import ConfigurationError
    from studydeck.interface.render import render_deck_overview

    config = _resolve_with_overrides(
        decks_root=root,
        decks_folder=folder,
        stats_file=stats_file,
        verbose=ctx.obj.get("verbose_bonus", 1),
    )

    try:
        report = asyncio.run(load_all_decks(get_deck_source(config), config.decks_folder))
    except ConfigurationError as e:
        typer.secho(f"{e} (looked in {config.decks_root / config.decks_folder})", fg="yellow")
        raise typer.Exit(1) from None

    overviews = get_stats_service(config).deck_overviews(report.decks)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "decks": [asdict(o) for o in overviews],
                    "failures": report.failures,
                    "due": sum(o.due for o in overviews),
                    "learned": sum(o.learned for o in overviews),
                },
                indent=2,
            )
        )
        return

    for overview in overviews:
        render_deck_overview(overview)

    typer.echo("")
    typer.echo(
        f"{len(overviews)} decks · {sum(o.due for o in overviews)} cards due · "
        f"{sum(o.learned for o in overviews)} learned"
    )
    for path, reason in report.failures.items():
        typer.secho(f"Skipped {path}: {reason}", fg="yellow")


@app.command()
def preview(
    card_id: Annotated[str, typer.Argument(help="Card id (e.g. 'unit-1-card-0').")],
    stats_file: Annotated[Path | None, typer.Option(help="Card stats JSON file.")] = None,
):
    """Show a card's stats and the interval each rating would give it."""
    from studydeck.application.factory import get_stats_service
    from studydeck.application.scheduler import format_interval, preview_interval
    from studydeck.application.stats.metrics_calculator import MetricsCalculator
    from studydeck.domain.models import Rating

    config = _resolve_with_overrides(stats_file=stats_file)
    stats = get_stats_service(config).get(card_id)

    typer.echo(
        f"{card_id}: ease {stats.ease:.2f} · interval {stats.interval}d · "
        f"{stats.reviews} reviews · {stats.lapses} lapses"
    )
    if stats.reviews:
        days = MetricsCalculator().days_until_due(stats)
        typer.echo("Due now" if days <= 0 else f"Due in {days}d")
    else:
        typer.echo("Not studied yet")

    for rating in Rating:
        typer.echo(f"  {int(rating)} {rating.label:<5} -> {format_interval(preview_interval(stats, rating))}")


@app.command()
def serve(
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Start the HTTP API for web front ends."""
    import uvicorn

    config = resolve_config({"host": host, "port": port})
    uvicorn.run("studydeck.server:app", host=config.host, port=config.port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def main():
    app()
