"""Score bookkeeping for correct answers and the achievement hook it drives."""

from __future__ import annotations

import logging

from . import achievement_tracker, storage
from .config import points_per_correct_answer
from .notifications import announce_unlocks
from .types import GAME_TYPES, ScoreEvent, ScoreOutcome, ScoreRecord


logger = logging.getLogger(__name__)


def ensure_scores(user_id: str) -> ScoreRecord:
    """Return the user's score record, creating an all-zero one at first use."""

    if not user_id:
        raise ValueError("A user id is required.")
    record = storage.load_scores(user_id)
    if record is None:
        record = ScoreRecord(user_id=user_id)
        storage.save_scores(record)
    return record


def record_score(user_id: str, game_type: str, points: int | None = None) -> ScoreOutcome:
    """Add points for one correct answer, then update achievements.

    The score write always stands on its own: a failing achievement update
    only means no badges are reported for this answer.
    """

    if game_type not in GAME_TYPES:
        raise ValueError(f"Unknown game type: {game_type}")
    points = points_per_correct_answer() if points is None else int(points)
    if points < 0:
        raise ValueError("Points must be non-negative.")

    record = ensure_scores(user_id)
    record.scores[game_type] = record.get(game_type) + points
    storage.save_scores(record)

    event = ScoreEvent(user_id=user_id, game_type=game_type, points=points, new_total_score=record.total)
    unlocked = achievement_tracker.handle_score_event(event)
    if not unlocked:
        return ScoreOutcome(record=record)

    try:
        definitions = storage.list_achievements()
    except achievement_tracker.TRACKER_ERRORS as exc:
        logger.warning("Could not load achievement titles: %s", exc)
        definitions = []
    titles = announce_unlocks(unlocked, definitions)
    return ScoreOutcome(record=record, newly_unlocked=unlocked, announced_titles=titles)
