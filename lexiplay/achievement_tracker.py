"""Incremental and from-scratch achievement progress updates for one user."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import List

from . import storage
from .achievement_engine import (
    incremental_progress,
    merge_unlocked,
    newly_unlocked,
    reconciled_progress,
    validate_definitions,
)
from .types import GAME_TYPES, ReconcileSummary, ScoreEvent, UserAchievementState


logger = logging.getLogger(__name__)

TRACKER_ERRORS = (sqlite3.Error, storage.StorageError)


def update_progress(user_id: str, game_type: str, points_delta: int, new_total_score: int) -> List[str]:
    """Apply one scoring event and return the ids unlocked by it.

    Any read or write failure leaves the stored state untouched and reports
    no unlocks; gameplay never depends on this succeeding.
    """

    if not user_id:
        logger.warning("Skipping achievement update without a user id.")
        return []
    if game_type not in GAME_TYPES:
        logger.warning("Skipping achievement update for unknown game type %r.", game_type)
        return []

    logger.debug(
        "Achievement update for %s: %s +%s points (total %s)", user_id, game_type, points_delta, new_total_score
    )
    try:
        with storage.transaction() as conn:
            state = storage.load_user_achievements(user_id, conn=conn) or UserAchievementState(user_id=user_id)
            definitions = storage.list_achievements(conn=conn)

            progress = incremental_progress(definitions, state.progress, game_type, new_total_score)
            unlocked = newly_unlocked(definitions, progress, state.unlocked_badges)

            storage.persist_user_achievements(
                UserAchievementState(
                    user_id=user_id,
                    progress=progress,
                    unlocked_badges=merge_unlocked(state.unlocked_badges, unlocked),
                    last_updated=datetime.utcnow().isoformat(),
                ),
                conn=conn,
            )
    except TRACKER_ERRORS:
        logger.exception("Error updating achievements for %s", user_id)
        return []
    return unlocked


def handle_score_event(event: ScoreEvent) -> List[str]:
    return update_progress(event.user_id, event.game_type, event.points, event.new_total_score)


def reconcile(user_id: str) -> ReconcileSummary | None:
    """Rebuild a user's progress from their score totals.

    Returns ``None`` when the user has no score record yet or when anything
    fails to load or save. Running it twice without a score change yields
    the same progress and no further unlocks.
    """

    try:
        with storage.transaction() as conn:
            scores = storage.load_scores(user_id, conn=conn)
            if scores is None:
                logger.info("No scores found for %s; nothing to reconcile.", user_id)
                return None

            definitions = storage.list_achievements(conn=conn)
            validate_definitions(definitions)
            state = storage.load_user_achievements(user_id, conn=conn) or UserAchievementState(user_id=user_id)

            progress = reconciled_progress(definitions, scores)
            unlocked = newly_unlocked(definitions, progress, state.unlocked_badges)
            final_unlocked = merge_unlocked(state.unlocked_badges, unlocked)

            storage.persist_user_achievements(
                UserAchievementState(
                    user_id=user_id,
                    progress=progress,
                    unlocked_badges=final_unlocked,
                    last_updated=datetime.utcnow().isoformat(),
                ),
                conn=conn,
            )
    except TRACKER_ERRORS:
        logger.exception("Error reconciling achievements for %s", user_id)
        return None

    previous = set(state.unlocked_badges)
    summary = ReconcileSummary(
        total_score=scores.total,
        unlocked_count=len(final_unlocked),
        progress=progress,
        newly_unlocked=[achievement_id for achievement_id in final_unlocked if achievement_id not in previous],
    )
    logger.info(
        "Reconciled achievements for %s: %s unlocked, %s new", user_id, summary.unlocked_count, len(summary.newly_unlocked)
    )
    return summary
