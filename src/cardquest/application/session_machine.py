"""
Classic-mode study session as an explicit state machine.

    question --submit--> feedback_correct | feedback_incorrect | game_over
    feedback_* --next--> question | completed | game_over
    any non-terminal --quit--> session_over
    terminal --restart--> question

`transition` is a pure function over (state, context, event). Events a state
does not handle are ignored. `SessionStateMachine` wraps it with the current
state and the save/resume logic.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from ulid import ULID

from cardquest.domain.constants import SCORE_CORRECT, SCORE_PERFECT, STARTING_LIVES
from cardquest.domain.errors import EmptyDeckError
from cardquest.domain.models import Card
from cardquest.domain.session import (
    NextCard,
    Quit,
    Restart,
    SessionContext,
    SessionEvent,
    SessionState,
    SubmitAnswer,
    game_status_for,
)

logger = logging.getLogger(__name__)


def initial_context(cards: Sequence[Card]) -> SessionContext:
    return SessionContext(cards=tuple(cards), lives=STARTING_LIVES)


def _enter(state: SessionState, context: SessionContext) -> tuple[SessionState, SessionContext]:
    return state, replace(context, game_status=game_status_for(state))


def _on_submit(context: SessionContext, event: SubmitAnswer) -> tuple[SessionState, SessionContext]:
    if event.correct:
        gained = SCORE_PERFECT if event.perfect else SCORE_CORRECT
        return _enter(
            SessionState.FEEDBACK_CORRECT,
            replace(
                context,
                score=context.score + gained,
                correct_answers=context.correct_answers + 1,
            ),
        )

    # The last life goes straight to game over, skipping feedback
    target = (
        SessionState.GAME_OVER if context.lives <= 1 else SessionState.FEEDBACK_INCORRECT
    )
    return _enter(
        target,
        replace(
            context,
            lives=max(0, context.lives - 1),
            incorrect_answers=context.incorrect_answers + 1,
        ),
    )


def _advance(context: SessionContext) -> tuple[SessionState, SessionContext]:
    return _enter(
        SessionState.QUESTION, replace(context, current_index=context.current_index + 1)
    )


def transition(
    state: SessionState, context: SessionContext, event: SessionEvent
) -> tuple[SessionState, SessionContext]:
    """
    Apply one event. Returns the new state and context; inputs are untouched.
    """
    if state.is_terminal:
        if isinstance(event, Restart):
            return _enter(SessionState.QUESTION, initial_context(context.cards))
        return state, context

    if isinstance(event, Quit):
        return _enter(SessionState.SESSION_OVER, context)

    if state is SessionState.QUESTION:
        if isinstance(event, SubmitAnswer):
            return _on_submit(context, event)
        return state, context

    if not isinstance(event, NextCard):
        return state, context

    if state is SessionState.FEEDBACK_CORRECT:
        if context.has_more_cards:
            return _advance(context)
        return _enter(SessionState.COMPLETED, context)

    # FEEDBACK_INCORRECT
    if context.lives > 0 and context.has_more_cards:
        return _advance(context)
    if context.lives > 0:
        return _enter(SessionState.COMPLETED, context)
    return _enter(SessionState.GAME_OVER, context)


class SessionSnapshot(BaseModel):
    """Serializable form of a session: state tag, counters and card order."""

    session_id: str
    state: SessionState
    current_index: int = Field(ge=0)
    lives: int = Field(ge=0)
    score: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    incorrect_answers: int = Field(ge=0)
    card_ids: list[str]


class SessionStateMachine:
    """
    A single classic-mode session: current state plus context.
    """

    def __init__(
        self,
        cards: Sequence[Card],
        state: SessionState = SessionState.QUESTION,
        context: SessionContext | None = None,
        session_id: str | None = None,
    ):
        if not cards:
            raise EmptyDeckError("Add cards to this deck before studying.")
        self.session_id = session_id or str(ULID())
        self.state = state
        self.context = context or initial_context(cards)

    @classmethod
    def start(cls, cards: Sequence[Card]) -> "SessionStateMachine":
        return cls(cards)

    @property
    def current_card(self) -> Card | None:
        return self.context.current_card

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def transition(
        self, context: SessionContext, event: SessionEvent
    ) -> tuple[SessionContext, SessionState]:
        """
        Apply `event` from the machine's current state with `context`,
        store the outcome and return (new_context, new_state).
        """
        self.state, self.context = transition(self.state, context, event)
        return self.context, self.state

    def send(self, event: SessionEvent) -> SessionState:
        self.transition(self.context, event)
        return self.state

    # ---------- Persistence ----------

    def snapshot(self) -> SessionSnapshot:
        ctx = self.context
        return SessionSnapshot(
            session_id=self.session_id,
            state=self.state,
            current_index=ctx.current_index,
            lives=ctx.lives,
            score=ctx.score,
            correct_answers=ctx.correct_answers,
            incorrect_answers=ctx.incorrect_answers,
            card_ids=[c.id for c in ctx.cards],
        )

    def to_json(self) -> str:
        return self.snapshot().model_dump_json()

    @classmethod
    def resume(
        cls, data: str | dict[str, Any] | SessionSnapshot, cards: Sequence[Card]
    ) -> "SessionStateMachine":
        """
        Rebuild a saved session over `cards`.

        The saved state is restored exactly when the payload is valid and the
        card set has the same size; otherwise a fresh session starts.
        """
        try:
            if isinstance(data, SessionSnapshot):
                snap = data
            elif isinstance(data, str):
                snap = SessionSnapshot.model_validate_json(data)
            else:
                snap = SessionSnapshot.model_validate(data)
        except (ValidationError, json.JSONDecodeError) as e:
            logger.warning(f"Discarding unreadable session snapshot: {e}")
            return cls.start(cards)

        if len(snap.card_ids) != len(cards):
            logger.info(
                f"Card set changed ({len(snap.card_ids)} -> {len(cards)} cards); "
                "starting a fresh session"
            )
            return cls.start(cards)

        if snap.current_index >= len(cards):
            logger.warning(f"Snapshot index {snap.current_index} out of range; starting fresh")
            return cls.start(cards)

        context = SessionContext(
            cards=tuple(cards),
            current_index=snap.current_index,
            lives=snap.lives,
            score=snap.score,
            correct_answers=snap.correct_answers,
            incorrect_answers=snap.incorrect_answers,
            game_status=game_status_for(snap.state),
        )
        return cls(cards, state=snap.state, context=context, session_id=snap.session_id)
