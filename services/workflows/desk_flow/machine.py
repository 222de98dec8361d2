"""Game state machine for the desk.

Every operation takes a `Desk` and returns a `Desk`. A call that arrives out of
sequence returns the very same object it was given, which lets callers tell a
rejected intent apart from an applied one with an identity check.
"""

import random
import logging
from typing import Optional

from margin_core.catalog import Catalog, get_catalog
from margin_core.generator import generate_form
from margin_core.models import Appraisal, Decision

from .resolution import resolve_round
from .state import (
    BeginBriefing,
    CompleteRound,
    Desk,
    GameState,
    Intent,
    NextBriefing,
    Pacing,
    SetAppraisal,
    Stage,
    StartNewGame,
    SubmitDecision,
)

logger = logging.getLogger("workflows.desk_flow.machine")


def _ignored(desk: Desk, intent: str) -> Desk:
    logger.debug(f"Ignoring {intent} in stage={desk.game.stage.value} in_flight={desk.in_flight}")
    return desk


def can_appraise(desk: Desk) -> bool:
    return desk.game.stage == Stage.PLAYING and desk.form is not None and not desk.in_flight


def can_decide(desk: Desk) -> bool:
    return can_appraise(desk) and desk.game.appraisal_made is not None


def begin_briefing(desk: Desk) -> Desk:
    if desk.game.stage != Stage.START:
        return _ignored(desk, "begin_briefing")
    return desk.model_copy(update={
        "game": desk.game.model_copy(update={"stage": Stage.TUTORIAL}),
        "briefing_step": 0,
    })


def start_new_game(desk: Desk, rng: Optional[random.Random] = None, catalog: Optional[Catalog] = None) -> Desk:
    form = generate_form(rng, catalog)
    logger.info(f"New game started, first form {form.id}")
    return Desk(
        game=GameState(stage=Stage.PLAYING),
        form=form,
        pending=None,
        briefing_step=desk.briefing_step,
    )


def next_briefing(desk: Desk, rng: Optional[random.Random] = None, catalog: Optional[Catalog] = None) -> Desk:
    if desk.game.stage != Stage.TUTORIAL:
        return _ignored(desk, "next_briefing")
    catalog = catalog or get_catalog()
    if desk.briefing_step + 1 < len(catalog.briefings):
        return desk.model_copy(update={"briefing_step": desk.briefing_step + 1})
    # Accepting the last briefing opens the desk
    return start_new_game(desk, rng, catalog)


def set_appraisal(desk: Desk, choice: Appraisal) -> Desk:
    if not can_appraise(desk):
        return _ignored(desk, "set_appraisal")
    return desk.model_copy(update={
        "game": desk.game.model_copy(update={"appraisal_made": choice}),
    })


def submit_decision(
    desk: Desk,
    decision: Decision,
    rng: Optional[random.Random] = None,
    catalog: Optional[Catalog] = None,
    pacing: Optional[Pacing] = None,
) -> Desk:
    if not can_decide(desk):
        return _ignored(desk, "submit_decision")
    return resolve_round(
        desk,
        decision,
        rng or random.Random(),
        catalog or get_catalog(),
        pacing or Pacing(),
    )


def complete_round(desk: Desk, rng: Optional[random.Random] = None, catalog: Optional[Catalog] = None) -> Desk:
    if not desk.in_flight:
        return _ignored(desk, "complete_round")
    if desk.game.stage == Stage.GAME_OVER:
        return desk.model_copy(update={"pending": None})
    return desk.model_copy(update={"pending": None, "form": generate_form(rng, catalog)})


def transition(
    desk: Desk,
    intent: Intent,
    rng: Optional[random.Random] = None,
    catalog: Optional[Catalog] = None,
    pacing: Optional[Pacing] = None,
) -> Desk:
    """Applies one intent to the desk."""
    if isinstance(intent, BeginBriefing):
        return begin_briefing(desk)
    if isinstance(intent, NextBriefing):
        return next_briefing(desk, rng, catalog)
    if isinstance(intent, StartNewGame):
        return start_new_game(desk, rng, catalog)
    if isinstance(intent, SetAppraisal):
        return set_appraisal(desk, intent.choice)
    if isinstance(intent, SubmitDecision):
        return submit_decision(desk, intent.decision, rng, catalog, pacing)
    if isinstance(intent, CompleteRound):
        return complete_round(desk, rng, catalog)
    raise TypeError(f"Unknown intent: {intent!r}")
