import random
import string
import logging
from typing import Optional

from .catalog import Catalog, get_catalog
from .models import History, LoanApplication

logger = logging.getLogger("margin_core.generator")

ID_ALPHABET = string.digits + string.ascii_uppercase
ID_LENGTH = 9

CREDIT_SCORE_RANGE = (300, 850)
MONTHLY_INCOME_RANGE = (1200, 9199)
BANKRUPTCY_CHANCE = 0.05


def _form_id(rng: random.Random) -> str:
    return "".join(rng.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def _requested_amount(rng: random.Random) -> int:
    # 10% extreme tier, 40% mid tier, 50% small tier
    tier = rng.random()
    if tier > 0.9:
        return 10 ** rng.randint(6, 10)
    if tier > 0.5:
        return rng.randrange(50000)
    return rng.randrange(500)


def generate_form(rng: Optional[random.Random] = None, catalog: Optional[Catalog] = None) -> LoanApplication:
    """
    Draws one loan application from the content tables.

    Args:
        rng: Random source. A freshly seeded one is used when omitted; the
            module-level generator in `random` is never touched.
        catalog: Content tables. Defaults to the packaged catalog.
    """
    rng = rng or random.Random()
    catalog = catalog or get_catalog()

    form = LoanApplication(
        id=_form_id(rng),
        applicant_name=rng.choice(catalog.names).upper(),
        credit_score=rng.randint(*CREDIT_SCORE_RANGE),
        requested_amount=_requested_amount(rng),
        collateral=rng.choice(catalog.collaterals),
        purpose=rng.choice(catalog.purposes),
        monthly_income=rng.randint(*MONTHLY_INCOME_RANGE),
        history=History(
            late_payments=rng.randrange(10),
            account_age_years=rng.randrange(20),
            bankruptcies=1 if rng.random() > 1 - BANKRUPTCY_CHANCE else 0,
        ),
    )
    logger.debug(f"Generated form {form.id} for {form.applicant_name}")
    return form
