import random
import logging
from typing import Any, Dict

from margin_core.catalog import Catalog
from margin_core.evaluator import evaluate
from margin_core.models import Decision
from workflows.wayflow import Wayflow, WorkflowContext

from .state import Desk, FollowUp, GameState, Pacing, Stage

logger = logging.getLogger("workflows.desk_flow.resolution")

FOUNDATION_MAX = 100
FOUNDATION_REWARD = 4
FOUNDATION_PENALTY = 25
BASE_REWARD = 500
STREAK_BONUS = 100
POLICY_ROTATION = 5

SUCCESS_FEEDBACK = "SUSTAINABLE CHOICE"

# Steps

def step_evaluate(ctx: WorkflowContext):
    desk: Desk = ctx.payload["desk"]
    verdict = evaluate(
        desk.form,
        desk.game.appraisal_made,
        ctx.payload["decision"],
        desk.game.current_policy,
    )
    ctx.state["verdict"] = verdict
    return {"correct": verdict.correct, "reason_code": verdict.reason_code.value}


def step_settle(ctx: WorkflowContext):
    game: GameState = ctx.payload["desk"].game
    correct = ctx.state["verdict"].correct

    delta = FOUNDATION_REWARD if correct else -FOUNDATION_PENALTY
    foundation = min(FOUNDATION_MAX, max(0, game.foundation + delta))
    # Reward uses the streak from before this round
    reward = BASE_REWARD + game.streak * STREAK_BONUS if correct else 0

    ctx.state["game"] = game.model_copy(update={
        "foundation": foundation,
        "score": game.score + reward,
        "forms_processed": game.forms_processed + 1,
        "streak": game.streak + 1 if correct else 0,
        "stage": Stage.GAME_OVER if foundation <= 0 else Stage.PLAYING,
        "appraisal_made": None,
    })
    return {"foundation": foundation, "reward": reward}


def step_rotate_policy(ctx: WorkflowContext):
    game: GameState = ctx.state["game"]
    if game.forms_processed % POLICY_ROTATION != 0:
        return {"rotated": False}

    catalog: Catalog = ctx.payload["catalog"]
    rng: random.Random = ctx.payload["rng"]
    policy = rng.choice(catalog.policies)
    ctx.state["game"] = game.model_copy(update={"current_policy": policy})
    return {"rotated": True, "policy": policy.id}


def step_schedule_follow_up(ctx: WorkflowContext):
    verdict = ctx.state["verdict"]
    pacing: Pacing = ctx.payload["pacing"]

    follow_up = FollowUp(
        decision=ctx.payload["decision"],
        verdict=verdict,
        feedback=SUCCESS_FEEDBACK if verdict.correct else verdict.reason,
        delay_ms=pacing.follow_up_delay(verdict.correct),
        buzzer_ms=0 if verdict.correct else pacing.buzzer_ms,
    )
    ctx.state["follow_up"] = follow_up
    return {"delay_ms": follow_up.delay_ms}

# Workflow Construction

def create_round_workflow() -> Wayflow:
    wf = Wayflow("RoundResolution")
    wf.add_step("evaluate", step_evaluate)
    wf.add_step("settle", step_settle)
    wf.add_step("rotate_policy", step_rotate_policy)
    wf.add_step("schedule_follow_up", step_schedule_follow_up)
    return wf


def resolve_round(
    desk: Desk,
    decision: Decision,
    rng: random.Random,
    catalog: Catalog,
    pacing: Pacing,
) -> Desk:
    """
    Resolves the round on the desk in one atomic step.

    Args:
        desk: Desk with a form and an appraisal already made.
        decision: The stamp the player chose.
        rng: Random source for policy rotation.
        catalog: Content tables holding the policy memos.
        pacing: Follow-up timings.

    Returns:
        The settled desk, with the round in flight until its follow-up runs.
    """
    ctx = WorkflowContext(
        run_id=f"round_{desk.form.id}",
        payload={
            "desk": desk,
            "decision": decision,
            "rng": rng,
            "catalog": catalog,
            "pacing": pacing,
        },
    )
    result: Dict[str, Any] = create_round_workflow().run(ctx)
    state = result["final_state"]
    game: GameState = state["game"]

    logger.info(
        f"Resolved {ctx.run_id} decision={decision.value} "
        f"correct={state['verdict'].correct} foundation={game.foundation} "
        f"score={game.score} processed={game.forms_processed}"
    )
    if game.stage == Stage.GAME_OVER:
        logger.info(f"Foundation collapsed after {game.forms_processed} forms, score={game.score}")

    return desk.model_copy(update={"game": game, "pending": state["follow_up"]})
