"""
Runtime settings, read from the environment (and a local .env file).

    INQUIRYLAB_LESSON_PATH   lesson YAML to play (default: packaged lesson)
    INQUIRYLAB_TIME_SCALE    multiplier for auto-advance delays (default 1.0)
    INQUIRYLAB_LOG_LEVEL     logging level for hosts and scripts (default INFO)
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from inquirylab.classroom.loader import DEFAULT_LESSON_PATH

load_dotenv()

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return default
    if value < 0:
        logger.warning(f"Ignoring {name}={raw!r}: must be >= 0")
        return default
    return value


class Settings:
    def __init__(self):
        self.LESSON_PATH: Path = Path(os.getenv("INQUIRYLAB_LESSON_PATH") or DEFAULT_LESSON_PATH)
        self.TIME_SCALE: float = _env_float("INQUIRYLAB_TIME_SCALE", 1.0)
        self.LOG_LEVEL: str = os.getenv("INQUIRYLAB_LOG_LEVEL", "INFO").upper()

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging constant (INFO if unrecognized)."""
        level = logging.getLevelName(self.LOG_LEVEL)
        return level if isinstance(level, int) else logging.INFO


settings = Settings()
