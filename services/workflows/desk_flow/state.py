from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union

from margin_core.models import Appraisal, Decision, LoanApplication, Policy, Verdict


class Stage(str, Enum):
    START = "START"
    TUTORIAL = "TUTORIAL"
    PLAYING = "PLAYING"
    GAME_OVER = "GAMEOVER"


class GameState(BaseModel):
    model_config = ConfigDict(frozen=True)

    foundation: int = Field(100, ge=0, le=100)
    score: int = Field(0, ge=0)
    forms_processed: int = Field(0, ge=0)
    stage: Stage = Stage.START
    streak: int = Field(0, ge=0)
    current_policy: Optional[Policy] = None
    appraisal_made: Optional[Appraisal] = None


class FollowUp(BaseModel):
    """A resolved round waiting for its feedback to clear before the next form."""
    model_config = ConfigDict(frozen=True)

    decision: Decision
    verdict: Verdict
    feedback: str
    delay_ms: int = Field(..., ge=0)
    buzzer_ms: int = Field(0, ge=0)


class Desk(BaseModel):
    model_config = ConfigDict(frozen=True)

    game: GameState = Field(default_factory=GameState)
    form: Optional[LoanApplication] = None
    pending: Optional[FollowUp] = None
    briefing_step: int = Field(0, ge=0)

    @property
    def in_flight(self) -> bool:
        return self.pending is not None


@dataclass(frozen=True)
class Pacing:
    stamp_delay_ms: int = 250
    success_hold_ms: int = 800
    failure_hold_ms: int = 3500
    buzzer_ms: int = 600

    def follow_up_delay(self, correct: bool) -> int:
        hold = self.success_hold_ms if correct else self.failure_hold_ms
        return self.stamp_delay_ms + hold


# --- Intents ---

@dataclass(frozen=True)
class BeginBriefing:
    pass


@dataclass(frozen=True)
class NextBriefing:
    pass


@dataclass(frozen=True)
class StartNewGame:
    pass


@dataclass(frozen=True)
class SetAppraisal:
    choice: Appraisal


@dataclass(frozen=True)
class SubmitDecision:
    decision: Decision


@dataclass(frozen=True)
class CompleteRound:
    pass


Intent = Union[BeginBriefing, NextBriefing, StartNewGame, SetAppraisal, SubmitDecision, CompleteRound]
