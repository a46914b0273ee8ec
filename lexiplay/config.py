"""Configuration helpers for local app wiring."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

# Score-to-question conversion used by every achievement rule.
POINTS_PER_QUESTION = 10

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def db_path() -> Path:
    return Path(os.getenv("LEXIPLAY_DB_PATH", str(_project_root() / "lexiplay_state.db")))


def log_level() -> int:
    name = os.getenv("LEXIPLAY_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def points_per_correct_answer() -> int:
    try:
        value = int(os.getenv("LEXIPLAY_POINTS_PER_ANSWER", str(POINTS_PER_QUESTION)))
    except ValueError:
        return POINTS_PER_QUESTION
    return value if value > 0 else POINTS_PER_QUESTION


def admin_users() -> set[str]:
    raw = os.getenv("LEXIPLAY_ADMIN_USERS", "admin")
    return {name.strip() for name in raw.split(",") if name.strip()}


def configure_logging() -> None:
    """Install one stream handler on the root logger, once."""

    root = logging.getLogger()
    root.setLevel(log_level())
    if any(getattr(handler, "_lexiplay", False) for handler in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._lexiplay = True  # type: ignore[attr-defined]
    root.addHandler(handler)
