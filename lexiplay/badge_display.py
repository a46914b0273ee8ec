"""View helpers for the achievements screen."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .types import AchievementDefinition, ReconcileSummary, UserAchievementState


def badge_progress(definition: AchievementDefinition, state: UserAchievementState) -> Tuple[int, float]:
    current = state.progress.get(definition.id, 0)
    if definition.target <= 0:
        return current, 0.0
    return current, min(current / definition.target * 100, 100.0)


def completion_ratio(state: UserAchievementState, definitions: Sequence[AchievementDefinition]) -> float:
    if not definitions:
        return 0.0
    known = {definition.id for definition in definitions}
    unlocked = sum(1 for achievement_id in state.unlocked_badges if achievement_id in known)
    return unlocked / len(definitions)


def build_badge_rows(
    definitions: Sequence[AchievementDefinition], state: UserAchievementState
) -> List[Dict[str, object]]:
    """One row per badge, easiest target first."""

    unlocked = set(state.unlocked_badges)
    rows: List[Dict[str, object]] = []
    for definition in sorted(definitions, key=lambda item: (item.target, item.id)):
        current, percentage = badge_progress(definition, state)
        rows.append(
            {
                "id": definition.id,
                "title": definition.title,
                "description": definition.description,
                "icon": definition.icon,
                "gradient": definition.gradient,
                "type": definition.type,
                "current": current,
                "target": definition.target,
                "percentage": percentage,
                "unlocked": definition.id in unlocked,
            }
        )
    return rows


def format_summary(summary: ReconcileSummary | None) -> str:
    if summary is None:
        return "No scores yet. Answer a question to start earning badges."
    text = f"Total score {summary.total_score} · {summary.unlocked_count} badges unlocked"
    if summary.newly_unlocked:
        text += f" · {len(summary.newly_unlocked)} new"
    return text
