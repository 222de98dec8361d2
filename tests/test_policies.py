from conftest import RARE_FIREFLIES, build_form

from margin_core.models import PolicyImpact, PolicyKind
from margin_core.policies import RULES, apply_policy


def test_every_kind_has_a_rule():
    assert set(RULES) == set(PolicyKind)


def test_no_policy_means_no_override():
    assert apply_policy(None, build_form()) == PolicyImpact()


def test_austerity_sets_both_flags(catalog):
    austerity = catalog.policy(PolicyKind.AUSTERITY)
    assert apply_policy(austerity, build_form(credit_score=750)) == PolicyImpact(should_approve=True, should_deny=False)
    assert apply_policy(austerity, build_form(credit_score=749)) == PolicyImpact(should_approve=False, should_deny=True)


def test_stimulus_only_touches_small_loans(catalog):
    stimulus = catalog.policy(PolicyKind.STIMULUS)
    assert apply_policy(stimulus, build_form(requested_amount=499)) == PolicyImpact(should_approve=True)
    assert apply_policy(stimulus, build_form(requested_amount=500)) == PolicyImpact()


def test_asset_backing_denies_thin_collateral(catalog):
    backing = catalog.policy(PolicyKind.ASSET_BACKING)
    thin = build_form(collateral=RARE_FIREFLIES, requested_amount=51)
    exact = build_form(collateral=RARE_FIREFLIES, requested_amount=50)
    assert apply_policy(backing, thin) == PolicyImpact(should_deny=True)
    assert apply_policy(backing, exact) == PolicyImpact()
