"""Progress rules that map score totals onto achievement thresholds.

Everything here is a pure function of its inputs: score totals, achievement
definitions, and a user's previously stored progress. Reads and writes live
in :mod:`lexiplay.achievement_tracker`.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence

from .config import POINTS_PER_QUESTION
from .types import ACHIEVEMENT_TYPES, GAME_TYPES, AchievementDefinition, ScoreRecord


logger = logging.getLogger(__name__)


def questions_from_points(points: int) -> int:
    return max(0, int(points)) // POINTS_PER_QUESTION


def questions_answered(scores: ScoreRecord) -> Dict[str, int]:
    """Derive question counts per dimension from authoritative score totals."""

    counts = {"total": questions_from_points(scores.total)}
    for game in GAME_TYPES:
        counts[game] = questions_from_points(scores.get(game))
    return counts


def incremental_progress(
    definitions: Iterable[AchievementDefinition],
    prior_progress: Mapping[str, int],
    game_type: str,
    total_score: int,
) -> Dict[str, int]:
    """Advance stored progress by one scoring event.

    Total-based types are replaced from ``total_score``. A per-game type gains
    one answered question when ``game_type`` matches and otherwise keeps its
    stored value. Ids the rules do not touch are carried over unchanged.
    """

    progress = dict(prior_progress)
    total_questions = questions_from_points(total_score)
    for definition in definitions:
        if definition.type == "total_score":
            progress[definition.id] = max(0, int(total_score))
        elif definition.type == "total":
            progress[definition.id] = total_questions
        elif definition.type in GAME_TYPES and definition.type == game_type:
            progress[definition.id] = progress.get(definition.id, 0) + 1
    return progress


def progress_for(definition: AchievementDefinition, scores: ScoreRecord, counts: Mapping[str, int] | None = None) -> int:
    counts = counts if counts is not None else questions_answered(scores)
    if definition.type == "total_score":
        return scores.total
    if definition.type == "total" or definition.type in GAME_TYPES:
        return counts[definition.type]
    return 0


def reconciled_progress(definitions: Iterable[AchievementDefinition], scores: ScoreRecord) -> Dict[str, int]:
    """Recompute every definition's progress from scratch."""

    counts = questions_answered(scores)
    return {definition.id: progress_for(definition, scores, counts) for definition in definitions}


def newly_unlocked(
    definitions: Iterable[AchievementDefinition],
    progress: Mapping[str, int],
    already_unlocked: Iterable[str],
) -> List[str]:
    """Ids that cross their target now, in definition order."""

    seen = set(already_unlocked)
    unlocked: List[str] = []
    for definition in definitions:
        if definition.id in seen or not definition.is_known_type:
            continue
        if progress.get(definition.id, 0) >= definition.target:
            unlocked.append(definition.id)
            seen.add(definition.id)
            logger.info(
                "Unlocked achievement %s (%s/%s)",
                definition.title or definition.id,
                progress.get(definition.id, 0),
                definition.target,
            )
    return unlocked


def merge_unlocked(previous: Sequence[str], new_ids: Iterable[str]) -> List[str]:
    merged = list(previous)
    for achievement_id in new_ids:
        if achievement_id not in merged:
            merged.append(achievement_id)
    return merged


def validate_definitions(definitions: Iterable[AchievementDefinition]) -> List[str]:
    """Return (and log) content problems that make a badge unreachable or ambiguous."""

    warnings: List[str] = []
    seen: set[str] = set()
    for definition in definitions:
        label = definition.id or definition.title or "<unnamed>"
        if definition.id in seen:
            warnings.append(f"Achievement {label}: duplicate id.")
        seen.add(definition.id)
        if definition.type not in ACHIEVEMENT_TYPES:
            warnings.append(
                f"Achievement {label}: unknown type '{definition.type}', progress stays 0 and it never unlocks."
            )
        if definition.target <= 0:
            warnings.append(f"Achievement {label}: target {definition.target} unlocks on any progress.")
    for message in warnings:
        logger.warning(message)
    return warnings
