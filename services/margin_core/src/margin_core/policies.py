from typing import Callable, Dict, Optional

from .models import LoanApplication, Policy, PolicyImpact, PolicyKind

AUSTERITY_THRESHOLD = 750
STIMULUS_CEILING = 500
ASSET_BACKING_RATIO = 0.5


def austerity_rule(form: LoanApplication) -> PolicyImpact:
    return PolicyImpact(
        should_approve=form.credit_score >= AUSTERITY_THRESHOLD,
        should_deny=form.credit_score < AUSTERITY_THRESHOLD,
    )


def stimulus_rule(form: LoanApplication) -> PolicyImpact:
    if form.requested_amount < STIMULUS_CEILING:
        return PolicyImpact(should_approve=True)
    return PolicyImpact()


def asset_backing_rule(form: LoanApplication) -> PolicyImpact:
    if form.collateral.value < form.requested_amount * ASSET_BACKING_RATIO:
        return PolicyImpact(should_deny=True)
    return PolicyImpact()


RULES: Dict[PolicyKind, Callable[[LoanApplication], PolicyImpact]] = {
    PolicyKind.AUSTERITY: austerity_rule,
    PolicyKind.STIMULUS: stimulus_rule,
    PolicyKind.ASSET_BACKING: asset_backing_rule,
}


def apply_policy(policy: Optional[Policy], form: LoanApplication) -> PolicyImpact:
    """Runs the rule for the policy's kind. No policy means no override."""
    if policy is None:
        return PolicyImpact()
    return RULES[policy.kind](form)
