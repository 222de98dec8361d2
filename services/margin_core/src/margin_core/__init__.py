from .catalog import Catalog, CatalogError, get_catalog, init_catalog, reset_catalog
from .evaluator import assess, evaluate
from .generator import generate_form
from .models import (
    Appraisal,
    CollateralItem,
    Decision,
    History,
    LoanApplication,
    Policy,
    PolicyImpact,
    PolicyKind,
    Purpose,
    ReasonCode,
    Verdict,
)
from .policies import apply_policy
