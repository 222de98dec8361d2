from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class Appraisal(str, Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"


class Decision(str, Enum):
    APPROVE = "APPROVE"
    DENY = "DENY"


class PolicyKind(str, Enum):
    AUSTERITY = "austerity"
    STIMULUS = "stimulus"
    ASSET_BACKING = "asset_back"


class ReasonCode(str, Enum):
    SUSTAINABLE = "SUSTAINABLE"
    ASSET_MISSED = "ASSET_MISSED"
    LIABILITY_MISSED = "LIABILITY_MISSED"
    OVERLEVERAGED = "OVERLEVERAGED"
    POOR_CREDIT = "POOR_CREDIT"
    HIGH_RISK = "HIGH_RISK"
    PRODUCTIVE_DEBT_MISSED = "PRODUCTIVE_DEBT_MISSED"
    SAFE_LOAN_MISSED = "SAFE_LOAN_MISSED"


# --- Catalog entries ---

class CollateralItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: float = Field(..., gt=0)
    appreciating: bool = Field(..., description="True for an asset, False for a liability")


class Purpose(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    is_need: bool = Field(..., description="True for productive debt")
    fine_print: str = ""


class Policy(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: PolicyKind
    title: str
    description: str

    @property
    def id(self) -> str:
        return self.kind.value


class Briefing(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str


class HandbookSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading: str
    lines: List[str]


# --- Application form ---

class History(BaseModel):
    model_config = ConfigDict(frozen=True)

    late_payments: int = Field(0, ge=0, le=9)
    account_age_years: int = Field(0, ge=0, le=19)
    bankruptcies: int = Field(0, ge=0, le=1)


class LoanApplication(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    applicant_name: str
    credit_score: int = Field(..., ge=300, le=850)
    requested_amount: int = Field(..., ge=0)
    collateral: CollateralItem
    purpose: Purpose
    monthly_income: int = Field(..., ge=1200, le=9199)
    history: History = Field(default_factory=History)


# --- Evaluation results ---

class PolicyImpact(BaseModel):
    """Partial override returned by a policy rule; None leaves the baseline untouched."""
    model_config = ConfigDict(frozen=True)

    should_approve: Optional[bool] = None
    should_deny: Optional[bool] = None


class Eligibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    dti: float
    overleveraged: bool
    should_approve: bool
    should_deny: bool


class Verdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    correct: bool
    reason_code: ReasonCode
    reason: str = ""
