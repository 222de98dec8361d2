from .machine import (
    begin_briefing,
    can_appraise,
    can_decide,
    complete_round,
    next_briefing,
    set_appraisal,
    start_new_game,
    submit_decision,
    transition,
)
from .resolution import SUCCESS_FEEDBACK, create_round_workflow, resolve_round
from .state import (
    BeginBriefing,
    CompleteRound,
    Desk,
    FollowUp,
    GameState,
    Intent,
    NextBriefing,
    Pacing,
    SetAppraisal,
    Stage,
    StartNewGame,
    SubmitDecision,
)
