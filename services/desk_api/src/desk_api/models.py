from pydantic import BaseModel, Field
from typing import List, Optional

from margin_core.models import (
    Appraisal,
    Briefing,
    Decision,
    HandbookSection,
    LoanApplication,
    ReasonCode,
)
from workflows.desk_flow import GameState, Stage


class CreateDeskRequest(BaseModel):
    seed: Optional[int] = Field(None, description="Seed for a reproducible desk")


class AppraisalRequest(BaseModel):
    choice: Appraisal


class DecisionRequest(BaseModel):
    decision: Decision


class KeyPressRequest(BaseModel):
    key: str = Field(..., min_length=1, max_length=16)


class PolicyMemo(BaseModel):
    id: str
    title: str
    description: str


class FeedbackSlip(BaseModel):
    decision: Decision
    correct: bool
    reason_code: ReasonCode
    text: str
    delay_ms: int
    buzzer_ms: int


class BriefingPage(BaseModel):
    number: int
    total: int
    briefing: Briefing


class DeskSnapshot(BaseModel):
    desk_id: str
    accepted: bool = True
    stage: Stage
    game: GameState
    form: Optional[LoanApplication] = None
    policy: Optional[PolicyMemo] = None
    feedback: Optional[FeedbackSlip] = None
    buzzer: bool = Field(False, description="Failure buzzer still sounding")
    briefing: Optional[BriefingPage] = None
    can_appraise: bool = False
    can_decide: bool = False


class Handbook(BaseModel):
    sections: List[HandbookSection]
