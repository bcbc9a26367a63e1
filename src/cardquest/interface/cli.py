"""cardquest CLI: answer checking, scheduling, levels and terminal study sessions."""

import json
import logging
import random
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import typer

from cardquest.application.config import resolve_config
from cardquest.domain.errors import CardquestError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cardquest: adaptive flashcard learning engine.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

QUIT_WORD = ":q"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage cardquest configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for cardquest."""
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)


def _fail(e: Exception) -> None:
    typer.secho(f"Error: {e}", fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def check(
    expected: Annotated[str, typer.Argument(help="The expected answer (card back).")],
    typed: Annotated[str, typer.Argument(help="The answer as typed.")],
):
    """[bold green]Grade[/bold green] a typed answer against the expected one."""
    from cardquest.application.grading import grade_answer
    from cardquest.application.xp import xp_for_grade

    result = grade_answer(typed, expected)
    typer.echo(
        f"Score: {result.score:.3f}  Grade: {result.grade}"
        f"  Correct: {'yes' if result.correct else 'no'}"
        f"  Perfect: {'yes' if result.perfect else 'no'}"
        f"  XP: {xp_for_grade(result.grade)}"
    )


@app.command("schedule")
def schedule_cmd(
    grade: Annotated[int, typer.Option("--grade", "-g", help="Quality grade 0-5.")],
    reps: Annotated[int, typer.Option("--reps", help="Repetitions before this review.")] = 0,
    ease: Annotated[float, typer.Option("--ease", help="Ease factor before this review.")] = 2.5,
    tz: Annotated[
        str | None, typer.Option("--tz", help="IANA timezone for local-midnight due dates.")
    ] = None,
):
    """Compute the next review for one graded answer."""
    from cardquest.application.scheduler import schedule

    try:
        result = schedule(grade, reps, ease, timezone_name=tz)
    except (CardquestError, ValueError) as e:
        _fail(e)

    typer.echo(
        json.dumps(
            {
                "ease_factor": result.ease_factor,
                "interval": result.interval,
                "repetitions": result.repetitions,
                "next_review": result.next_review.isoformat(),
                "normalized": result.normalized,
            },
            indent=2,
        )
    )
    if tz and not result.normalized:
        typer.secho(f"Timezone '{tz}' not recognised; due time left unnormalized.", fg="yellow")


@app.command()
def level(
    xp: Annotated[int, typer.Argument(help="Total accumulated XP.")],
):
    """Show the level and title for a total XP amount."""
    from cardquest.application.xp import level_from_xp

    try:
        info = level_from_xp(xp)
    except ValueError as e:
        _fail(e)

    typer.echo(
        f"Level {info.level} ({info.title})  {info.current_xp}/{info.xp_for_next_level} XP"
    )


@app.command()
def study(
    deck_file: Annotated[
        Path, typer.Argument(help="YAML deck file, relative to deck_dir when set.")
    ],
    review: Annotated[
        bool, typer.Option("--review", help="Only cards that are due for review.")
    ] = False,
    endless: Annotated[
        bool, typer.Option("--endless", help="Unlimited practice with adaptive requeueing.")
    ] = False,
    state_file: Annotated[
        Path | None,
        typer.Option(
            "--state",
            help="YAML file with schedules and XP; read before and written after the session.",
        ),
    ] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for reproducible card order.")] = None,
    tz: Annotated[str | None, typer.Option("--tz", help="IANA timezone.")] = None,
):
    """Study a deck in the terminal. Type ':q' to quit."""
    from cardquest.application.queue_builder import build_ordered_session
    from cardquest.application.review_service import ReviewService
    from cardquest.infrastructure.adapters import (
        InMemoryLearnerRepository,
        InMemoryScheduleRepository,
    )
    from cardquest.infrastructure.deck_loader import load_deck
    from cardquest.infrastructure.state_store import load_study_state

    try:
        config = resolve_config({"seed": seed, "default_timezone": tz})
        cards = load_deck(config.deck_path(deck_file))
        known, stats = load_study_state(state_file) if state_file else ({}, None)
    except (CardquestError, ValueError) as e:
        _fail(e)

    if not cards:
        typer.secho("No cards. Add cards to this deck before studying.", fg="yellow")
        raise typer.Exit()

    learner_id = "local"
    rng = random.Random(config.seed)
    schedules = InMemoryScheduleRepository(
        {(card_id, learner_id): s for card_id, s in known.items()}
    )
    learners = InMemoryLearnerRepository()
    if stats is not None:
        learners.save(learner_id, stats)
    service = ReviewService(schedules, learners, config)

    if endless:
        _run_endless(service, learner_id, cards, rng)
    else:
        now = datetime.now(timezone.utc)
        ordered = build_ordered_session(
            cards, schedules.all_for_learner(learner_id), due_only=review, now=now, rng=rng
        )
        if not ordered:
            typer.secho(
                "No cards are due for review right now. "
                "Run without --review to practise the full deck.",
                fg="yellow",
            )
            return
        _run_classic(service, learner_id, ordered, review)

    if state_file:
        _save_state(state_file, schedules, learners, learner_id)


def _save_state(state_file: Path, schedules, learners, learner_id: str) -> None:
    from cardquest.domain.models import LearnerStats
    from cardquest.infrastructure.state_store import save_study_state

    try:
        save_study_state(
            state_file,
            schedules.all_for_learner(learner_id),
            learners.get(learner_id) or LearnerStats(),
        )
    except CardquestError as e:
        _fail(e)
    logger.info(f"Saved study state to {state_file}")


def _run_classic(service, learner_id: str, cards, review_mode: bool) -> None:
    from cardquest.application.session_machine import SessionStateMachine
    from cardquest.domain.session import NextCard, Quit, SessionState, SubmitAnswer

    machine = SessionStateMachine.start(cards)
    xp_earned = 0

    while not machine.is_terminal:
        card = machine.current_card
        ctx = machine.context
        typer.echo(
            f"\n[{ctx.current_index + 1}/{len(ctx.cards)}]  lives {ctx.lives}  score {ctx.score}"
        )
        typed = typer.prompt(card.front)
        if typed.strip() == QUIT_WORD:
            machine.send(Quit())
            break

        outcome = service.submit(learner_id, card, typed, review_mode=review_mode)
        xp_earned += outcome.xp_earned
        state = machine.send(SubmitAnswer(correct=outcome.correct, perfect=outcome.perfect))

        if state is SessionState.FEEDBACK_CORRECT:
            typer.secho("Perfect!" if outcome.perfect else "Correct!", fg="green")
        else:
            typer.secho(f"Wrong. Answer: {card.back}", fg="red")

        if not machine.is_terminal:
            machine.send(NextCard())

    titles = {
        SessionState.COMPLETED: ("Deck Complete!", "green"),
        SessionState.GAME_OVER: ("Game Over. You ran out of lives!", "red"),
        SessionState.SESSION_OVER: ("Session Over. You ended the session early.", "yellow"),
    }
    title, color = titles[machine.state]
    ctx = machine.context
    typer.secho(f"\n{title}", fg=color, bold=True)
    typer.echo(
        f"Score: {ctx.score}  Correct: {ctx.correct_answers}  "
        f"Incorrect: {ctx.incorrect_answers}  XP: +{xp_earned}"
    )


def _run_endless(service, learner_id: str, cards, rng: random.Random) -> None:
    from cardquest.application.endless_session import EndlessSession

    session = EndlessSession.start(cards, rng)
    xp_earned = 0
    started = time.monotonic()

    while True:
        card = session.current_card
        typer.echo(f"\nscore {session.score}  seen {session.total_cards_seen}")
        typed = typer.prompt(card.front)
        session.tick(int(time.monotonic() - started) - session.elapsed_seconds)
        if typed.strip() == QUIT_WORD:
            session.finish()
            break

        outcome = service.submit(learner_id, card, typed, review_mode=False)
        xp_earned += outcome.xp_earned
        session.submit(outcome.correct, outcome.perfect)
        if outcome.correct:
            typer.secho("Perfect!" if outcome.perfect else "Correct!", fg="green")
        else:
            typer.secho(f"Wrong. Answer: {card.back}", fg="red")
        session.next_card()

    minutes, seconds = divmod(session.elapsed_seconds, 60)
    typer.secho("\nSession Over", fg="yellow", bold=True)
    typer.echo(
        f"Score: {session.score}  Correct: {session.correct_answers}  "
        f"Incorrect: {session.incorrect_answers}  Cards seen: {session.total_cards_seen}  "
        f"XP: +{xp_earned}  Time: {minutes}:{seconds:02d}"
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


if __name__ == "__main__":
    app()
