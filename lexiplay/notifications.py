"""Unlock announcements for newly earned badges."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from .types import AchievementDefinition


logger = logging.getLogger(__name__)

Emitter = Callable[[str], object]

_emitter: Optional[Emitter] = None


def set_emitter(emitter: Optional[Emitter]) -> None:
    """Register the UI callback that shows an unlock (``None`` to log only)."""

    global _emitter
    _emitter = emitter


def notify(achievement_title: str) -> None:
    logger.info("New achievement unlocked: %s", achievement_title)
    if _emitter is None:
        return
    try:
        _emitter(f"New achievement unlocked: {achievement_title}")
    except Exception:
        logger.exception("Achievement notification failed for %s", achievement_title)


def announce_unlocks(unlocked_ids: Iterable[str], definitions: Iterable[AchievementDefinition]) -> List[str]:
    """Notify once per unlocked id, in the order given; return the titles shown."""

    titles = {definition.id: definition.title for definition in definitions}
    announced: List[str] = []
    for achievement_id in unlocked_ids:
        title = titles.get(achievement_id) or achievement_id
        notify(title)
        announced.append(title)
    return announced
