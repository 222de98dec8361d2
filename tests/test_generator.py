import random

from margin_core.generator import ID_ALPHABET, ID_LENGTH, generate_form


def _sample(catalog, n=2000, seed=42):
    rng = random.Random(seed)
    return [generate_form(rng, catalog) for _ in range(n)]


def test_generated_fields_within_bounds(catalog):
    for form in _sample(catalog, n=500):
        assert 300 <= form.credit_score <= 850
        assert 1200 <= form.monthly_income <= 9199
        assert form.requested_amount >= 0
        assert form.history.bankruptcies in (0, 1)
        assert 0 <= form.history.late_payments <= 9
        assert 0 <= form.history.account_age_years <= 19
        assert form.collateral in catalog.collaterals
        assert form.purpose in catalog.purposes


def test_applicant_name_is_upper_cased_catalog_name(catalog):
    upper_names = {n.upper() for n in catalog.names}
    for form in _sample(catalog, n=100):
        assert form.applicant_name in upper_names


def test_form_id_shape(catalog):
    form = generate_form(random.Random(3), catalog)
    assert len(form.id) == ID_LENGTH
    assert set(form.id) <= set(ID_ALPHABET)


def test_ids_unique_within_a_session(catalog):
    ids = [f.id for f in _sample(catalog, n=1000)]
    assert len(set(ids)) == len(ids)


def test_same_seed_same_form(catalog):
    assert generate_form(random.Random(99), catalog) == generate_form(random.Random(99), catalog)


def test_requested_amount_tiers(catalog):
    amounts = [f.requested_amount for f in _sample(catalog)]
    extreme = [a for a in amounts if a >= 50000]

    # Extreme tier is always an exact power of ten between 10^6 and 10^10
    assert all(a in {10 ** k for k in range(6, 11)} for a in extreme)
    assert 0.07 < len(extreme) / len(amounts) < 0.13
    small = [a for a in amounts if a < 500]
    assert 0.45 < len(small) / len(amounts) < 0.56


def test_bankruptcy_rate(catalog):
    forms = _sample(catalog)
    rate = sum(f.history.bankruptcies for f in forms) / len(forms)
    assert 0.03 < rate < 0.07


def test_global_random_untouched(catalog):
    random.seed(5)
    state = random.getstate()
    generate_form(catalog=catalog)
    generate_form(random.Random(1), catalog)
    assert random.getstate() == state
