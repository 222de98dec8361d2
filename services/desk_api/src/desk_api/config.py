import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from workflows.desk_flow import Pacing

logger = logging.getLogger("desk_api.config")


@dataclass
class Settings:
    log_level: str = "INFO"
    content_path: Optional[str] = None
    max_desks: int = 1000
    desk_ttl_s: int = 1800
    pacing: Pacing = field(default_factory=Pacing)


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.error(f"{name} must be an integer, got {raw!r}")
        raise


def _log_level_env(name: str, default: str) -> str:
    level = (os.environ.get(name) or default).upper()
    # getLevelName maps known level names to their numeric value
    if not isinstance(logging.getLevelName(level), int):
        logger.error(f"{name} must be a logging level name, got {level!r}")
        raise ValueError(f"Unknown log level: {level}")
    return level


def load_settings() -> Settings:
    defaults = Pacing()
    return Settings(
        log_level=_log_level_env("LOG_LEVEL", "INFO"),
        content_path=os.environ.get("MARGIN_CONTENT_PATH") or None,
        max_desks=_int_env("MARGIN_MAX_DESKS", 1000),
        desk_ttl_s=_int_env("MARGIN_DESK_TTL_S", 1800),
        pacing=Pacing(
            stamp_delay_ms=_int_env("MARGIN_STAMP_DELAY_MS", defaults.stamp_delay_ms),
            success_hold_ms=_int_env("MARGIN_SUCCESS_HOLD_MS", defaults.success_hold_ms),
            failure_hold_ms=_int_env("MARGIN_FAILURE_HOLD_MS", defaults.failure_hold_ms),
            buzzer_ms=_int_env("MARGIN_BUZZER_MS", defaults.buzzer_ms),
        ),
    )
