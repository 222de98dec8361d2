from fastapi import FastAPI, Depends, Request, Body
from contextlib import asynccontextmanager
from typing import List, Optional
import logging

from margin_core.catalog import init_catalog
from workflows.desk_flow import (
    BeginBriefing,
    NextBriefing,
    SetAppraisal,
    Stage,
    StartNewGame,
    SubmitDecision,
    can_appraise,
    can_decide,
)

from .config import load_settings
from .controls import intent_for_key
from .models import (
    AppraisalRequest,
    BriefingPage,
    CreateDeskRequest,
    DecisionRequest,
    DeskSnapshot,
    FeedbackSlip,
    Handbook,
    KeyPressRequest,
    PolicyMemo,
)
from .session import DeskSession, SessionRegistry

settings = load_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("desk_api")

@asynccontextmanager
async def lifespan(app: FastAPI):
    catalog = init_catalog(settings.content_path)
    app.state.registry = SessionRegistry(
        catalog, settings.pacing, settings.max_desks, desk_ttl_s=settings.desk_ttl_s
    )
    yield
    logger.info(f"Shutting down with {len(app.state.registry)} open desks")

app = FastAPI(lifespan=lifespan, title="Margin Desk API")

# Dependencies
def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry

def get_session(desk_id: str, registry: SessionRegistry = Depends(get_registry)) -> DeskSession:
    return registry.get(desk_id)

# Helpers
def build_snapshot(session: DeskSession, accepted: bool = True) -> DeskSnapshot:
    with session.lock:
        desk = session.desk
        buzzer = session.buzzer_active()
    game = desk.game

    policy = None
    if game.current_policy:
        policy = PolicyMemo(
            id=game.current_policy.id,
            title=game.current_policy.title,
            description=game.current_policy.description,
        )

    feedback = None
    if desk.pending:
        feedback = FeedbackSlip(
            decision=desk.pending.decision,
            correct=desk.pending.verdict.correct,
            reason_code=desk.pending.verdict.reason_code,
            text=desk.pending.feedback,
            delay_ms=desk.pending.delay_ms,
            buzzer_ms=desk.pending.buzzer_ms,
        )

    briefing = None
    if game.stage == Stage.TUTORIAL:
        briefings = session.catalog.briefings
        briefing = BriefingPage(
            number=desk.briefing_step + 1,
            total=len(briefings),
            briefing=briefings[desk.briefing_step],
        )

    return DeskSnapshot(
        desk_id=session.desk_id,
        accepted=accepted,
        stage=game.stage,
        game=game,
        form=desk.form,
        policy=policy,
        feedback=feedback,
        buzzer=buzzer,
        briefing=briefing,
        can_appraise=can_appraise(desk),
        can_decide=can_decide(desk),
    )

def respond(session: DeskSession, intent) -> DeskSnapshot:
    # One lock span so the snapshot shows the desk this intent produced
    with session.lock:
        accepted = session.dispatch(intent)
        return build_snapshot(session, accepted)

# Routes

@app.post("/desks", response_model=DeskSnapshot, status_code=201)
def create_desk(
    body: Optional[CreateDeskRequest] = Body(None),
    registry: SessionRegistry = Depends(get_registry)
):
    session = registry.create(body.seed if body else None)
    return build_snapshot(session)

@app.get("/desks/{desk_id}", response_model=DeskSnapshot)
def get_desk(session: DeskSession = Depends(get_session)):
    with session.lock:
        session.poll()
        return build_snapshot(session)

@app.delete("/desks/{desk_id}", status_code=204)
def close_desk(desk_id: str, registry: SessionRegistry = Depends(get_registry)):
    registry.remove(desk_id)

@app.post("/desks/{desk_id}/briefing", response_model=DeskSnapshot)
def advance_briefing(session: DeskSession = Depends(get_session)):
    with session.lock:
        if session.desk.game.stage == Stage.START:
            return respond(session, BeginBriefing())
        return respond(session, NextBriefing())

@app.post("/desks/{desk_id}/start", response_model=DeskSnapshot)
def start_game(session: DeskSession = Depends(get_session)):
    return respond(session, StartNewGame())

@app.post("/desks/{desk_id}/appraisal", response_model=DeskSnapshot)
def appraise(body: AppraisalRequest, session: DeskSession = Depends(get_session)):
    return respond(session, SetAppraisal(body.choice))

@app.post("/desks/{desk_id}/decision", response_model=DeskSnapshot)
def decide(body: DecisionRequest, session: DeskSession = Depends(get_session)):
    return respond(session, SubmitDecision(body.decision))

@app.post("/desks/{desk_id}/advance", response_model=DeskSnapshot)
def advance_round(session: DeskSession = Depends(get_session)):
    with session.lock:
        accepted = session.advance()
        return build_snapshot(session, accepted)

@app.post("/desks/{desk_id}/keys", response_model=DeskSnapshot)
def press_key(body: KeyPressRequest, session: DeskSession = Depends(get_session)):
    with session.lock:
        session.poll()
        intent = intent_for_key(session.desk, body.key)
        if intent is None:
            logger.debug(f"Key {body.key!r} has no effect on desk {session.desk_id}")
            return build_snapshot(session, accepted=False)
        return respond(session, intent)

@app.get("/policies", response_model=List[PolicyMemo])
def list_policies(registry: SessionRegistry = Depends(get_registry)):
    return [
        PolicyMemo(id=p.id, title=p.title, description=p.description)
        for p in registry.catalog.policies
    ]

@app.get("/handbook", response_model=Handbook)
def get_handbook(registry: SessionRegistry = Depends(get_registry)):
    return Handbook(sections=registry.catalog.handbook)
