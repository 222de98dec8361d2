from typing import Dict, Optional

from margin_core.models import Appraisal, Decision
from workflows.desk_flow import Desk, Intent, SetAppraisal, Stage, SubmitDecision

KEY_BINDINGS: Dict[str, Intent] = {
    "1": SetAppraisal(Appraisal.ASSET),
    "2": SetAppraisal(Appraisal.LIABILITY),
    "a": SubmitDecision(Decision.APPROVE),
    "d": SubmitDecision(Decision.DENY),
}


def intent_for_key(desk: Desk, key: str) -> Optional[Intent]:
    """Keys only drive the desk while playing and no feedback slip is showing."""
    if desk.game.stage != Stage.PLAYING or desk.in_flight:
        return None
    return KEY_BINDINGS.get(key.lower())
