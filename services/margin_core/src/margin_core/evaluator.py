from typing import Optional

from .models import (
    Appraisal,
    Decision,
    Eligibility,
    LoanApplication,
    Policy,
    ReasonCode,
    Verdict,
)
from .policies import apply_policy

OVERLEVERAGED_DTI = 3.0
PRIME_SCORE = 650
NEED_SCORE = 550
POOR_SCORE = 450

REASONS = {
    ReasonCode.ASSET_MISSED: "That was an ASSET! It grows in value over time.",
    ReasonCode.LIABILITY_MISSED: "That was a LIABILITY! It loses value as soon as you buy it.",
    ReasonCode.OVERLEVERAGED: "Applicant is over-leveraged! Their debt is too high for their income.",
    ReasonCode.POOR_CREDIT: "Poor credit history indicates a high risk of default.",
    ReasonCode.HIGH_RISK: "High-risk application. Review the history and purpose carefully.",
    ReasonCode.PRODUCTIVE_DEBT_MISSED: "This was PRODUCTIVE debt (a Need). It builds long-term foundation!",
    ReasonCode.SAFE_LOAN_MISSED: "This was a safe, sustainable loan. We should have granted it.",
}


def debt_to_income(form: LoanApplication) -> float:
    return (form.requested_amount / 12) / form.monthly_income


def assess(form: LoanApplication, active_policy: Optional[Policy] = None) -> Eligibility:
    """
    Baseline eligibility for a form, with the active policy's override applied
    on top. Fields the policy does not return keep their baseline value.
    """
    dti = debt_to_income(form)
    overleveraged = dti > OVERLEVERAGED_DTI
    is_need = form.purpose.is_need

    should_approve = (
        form.credit_score > PRIME_SCORE or (is_need and form.credit_score > NEED_SCORE)
    ) and not overleveraged
    should_deny = (
        form.credit_score < POOR_SCORE
        or (overleveraged and not is_need)
        or form.history.bankruptcies > 0
    )

    impact = apply_policy(active_policy, form)
    if impact.should_approve is not None:
        should_approve = impact.should_approve
    if impact.should_deny is not None:
        should_deny = impact.should_deny

    return Eligibility(
        dti=dti,
        overleveraged=overleveraged,
        should_approve=should_approve,
        should_deny=should_deny,
    )


def appraisal_correct(form: LoanApplication, appraisal: Appraisal) -> bool:
    if appraisal == Appraisal.ASSET:
        return form.collateral.appreciating
    return not form.collateral.appreciating


def _fail(code: ReasonCode) -> Verdict:
    return Verdict(correct=False, reason_code=code, reason=REASONS[code])


def evaluate(
    form: LoanApplication,
    appraisal: Appraisal,
    decision: Decision,
    active_policy: Optional[Policy] = None,
) -> Verdict:
    """
    Scores one desk decision.

    A wrong appraisal fails the round whatever the decision. An APPROVE only
    consults should_deny and a DENY only consults should_approve, so when a
    policy leaves both flags set the denial wins on APPROVE and the approval
    wins on DENY.
    """
    if not appraisal_correct(form, appraisal):
        if form.collateral.appreciating:
            return _fail(ReasonCode.ASSET_MISSED)
        return _fail(ReasonCode.LIABILITY_MISSED)

    eligibility = assess(form, active_policy)

    if decision == Decision.APPROVE:
        if eligibility.should_deny:
            if eligibility.overleveraged:
                return _fail(ReasonCode.OVERLEVERAGED)
            if form.credit_score < POOR_SCORE:
                return _fail(ReasonCode.POOR_CREDIT)
            return _fail(ReasonCode.HIGH_RISK)
    elif eligibility.should_approve:
        if form.purpose.is_need:
            return _fail(ReasonCode.PRODUCTIVE_DEBT_MISSED)
        return _fail(ReasonCode.SAFE_LOAN_MISSED)

    return Verdict(correct=True, reason_code=ReasonCode.SUSTAINABLE)
