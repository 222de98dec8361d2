import random
import pytest
from fastapi.testclient import TestClient

from margin_core.catalog import Catalog, reset_catalog
from margin_core.models import Appraisal, CollateralItem, History, LoanApplication, Purpose
from workflows.desk_flow import Desk, GameState, Pacing, Stage
from desk_api.session import SessionRegistry

FAMILY_HOME = CollateralItem(name="Family Home", value=350000, appreciating=True)
RARE_FIREFLIES = CollateralItem(name="Rare Fireflies", value=25, appreciating=False)
GUMBALL_MACHINE = Purpose(label="New Gumball Machine", is_need=False, fine_print="Purely for entertainment purposes.")
MEDICAL_BILL = Purpose(label="Emergency Medical Bill", is_need=True, fine_print="Critical health necessity.")


def build_form(**overrides) -> LoanApplication:
    bankruptcies = overrides.pop("bankruptcies", 0)
    fields = dict(
        id="TESTFORM1",
        applicant_name="GUS 'THE GEAR' GRISSOM",
        credit_score=700,
        requested_amount=6000,
        collateral=FAMILY_HOME,
        purpose=GUMBALL_MACHINE,
        monthly_income=2000,
        history=History(late_payments=1, account_age_years=4, bankruptcies=bankruptcies),
    )
    fields.update(overrides)
    return LoanApplication(**fields)


def playing_desk(form: LoanApplication = None, appraisal: Appraisal = None, **game) -> Desk:
    state = GameState(stage=Stage.PLAYING, appraisal_made=appraisal, **game)
    return Desk(game=state, form=form or build_form())


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def catalog():
    return Catalog.load()

@pytest.fixture
def rng():
    return random.Random(1234)

@pytest.fixture
def pacing():
    return Pacing()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def registry(catalog, pacing, clock):
    return SessionRegistry(catalog, pacing, max_desks=3, clock=clock)

@pytest.fixture
def client(registry):
    from desk_api.main import app, get_registry

    app.dependency_overrides[get_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture(autouse=True)
def _fresh_catalog():
    yield
    reset_catalog()
