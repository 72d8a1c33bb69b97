"""Terminal rendering for sessions and deck listings."""

import typer

from studydeck.application.scheduler import format_interval
from studydeck.application.session.machine import GameSession, RoundOutcome
from studydeck.application.session.summary import result_message
from studydeck.application.utils.common import round_half_up
from studydeck.domain.blinds import BlindTier
from studydeck.domain.models import DeckOverview, Flashcard, Rating, SessionSummary

RATING_COLORS: dict[Rating, str] = {
    Rating.AGAIN: "red",
    Rating.HARD: "yellow",
    Rating.GOOD: "cyan",
    Rating.EASY: "green",
}


def render_deck_overview(overview: DeckOverview) -> None:
    unit = f" [unit {overview.unit}]" if overview.unit else ""
    typer.secho(f"{overview.title}{unit}", bold=True, nl=False)
    typer.echo(f"  ({overview.deck_id})")
    parts = [f"{overview.total} cards"]
    if overview.due:
        parts.append(typer.style(f"{overview.due} due", fg="yellow"))
    if overview.learned:
        parts.append(
            typer.style(f"{overview.learned} learned ({overview.learned_pct}%)", fg="green")
        )
    typer.echo("  " + " · ".join(parts))


def render_blind_intro(tier: BlindTier, score: int, dealt: int) -> None:
    typer.echo("")
    typer.secho(f"== {tier.label} ==", fg="magenta", bold=True)
    typer.echo(f"  Cards:          {dealt}")
    typer.echo(f"  Pass threshold: {round_half_up(tier.threshold * 100)}%")
    typer.echo(f"  Points:         x{tier.point_multiplier:g}")
    if score > 0:
        typer.echo(f"  Current score:  {score:,}")


def render_hud(session: GameSession) -> None:
    position = f"{session.current_index + 1} / {len(session.cards)}"
    tier = session.tier
    if tier is None:
        typer.secho(position, dim=True)
        return

    pct = round_half_up(session.running_correct_fraction * 100)
    color = "green" if session.running_correct_fraction >= tier.threshold else "yellow"
    hud = f"{position}  {tier.label}  " + typer.style(
        f"{pct}% / {round_half_up(tier.threshold * 100)}%", fg=color
    )
    if session.score > 0:
        hud += f"  score {session.score:,}"
    typer.echo(hud)


def render_question(card: Flashcard) -> None:
    typer.echo("")
    typer.secho("Q: ", bold=True, nl=False)
    typer.echo(card.question)


def render_answer(card: Flashcard, previews: dict[Rating, int]) -> None:
    typer.secho("A: ", bold=True, nl=False)
    typer.echo(card.answer)
    buttons = []
    for rating in Rating:
        label = f"[{int(rating)}] {rating.label}"
        if rating in previews:
            label += f" {format_interval(previews[rating])}"
        buttons.append(typer.style(label, fg=RATING_COLORS[rating]))
    typer.echo("  ".join(buttons))


def render_breakdown(summary: SessionSummary) -> None:
    chips = [
        typer.style(f"{summary.count(r)} {r.label}", fg=RATING_COLORS[r]) for r in Rating
    ]
    typer.echo("  " + "  ".join(chips))


def render_results(summary: SessionSummary, deck_title: str | None) -> None:
    typer.echo("")
    typer.secho(f"{summary.pct}%", bold=True)
    suffix = f" · {deck_title}" if deck_title else ""
    typer.echo(f"{summary.correct} / {summary.total} correct{suffix}")
    render_breakdown(summary)
    typer.echo(result_message(summary.pct))


def render_round_over(outcome: RoundOutcome) -> None:
    typer.echo("")
    color = "green" if outcome.passed else "red"
    typer.secho(outcome.headline, fg=color, bold=True)
    typer.echo(f"Score: {outcome.score:,}")
    blinds = "Blind" if outcome.tiers_reached == 1 else "Blinds"
    typer.echo(
        f"{outcome.tiers_reached} {blinds} reached · "
        f"{outcome.summary.correct} correct · {outcome.summary.pct}% accuracy"
    )
    render_breakdown(outcome.summary)
