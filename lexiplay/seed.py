"""Stock achievement definitions and a loader for fresh databases."""

from __future__ import annotations

import logging
from typing import Dict, List

from . import storage
from .types import AchievementDefinition


logger = logging.getLogger(__name__)


DEFAULT_ACHIEVEMENTS: List[Dict[str, object]] = [
    {
        "title": "Beginner",
        "description": "Answer 50 questions of any kind",
        "icon": "trophy",
        "type": "total",
        "target": 50,
        "gradient": "from-yellow-400 to-orange-500",
    },
    {
        "title": "Language Lover",
        "description": "Answer 100 questions",
        "icon": "star",
        "type": "total",
        "target": 100,
        "gradient": "from-purple-400 to-pink-500",
    },
    {
        "title": "Advanced",
        "description": "Answer 150 questions",
        "icon": "target",
        "type": "total",
        "target": 150,
        "gradient": "from-blue-400 to-cyan-500",
    },
    {
        "title": "Legend",
        "description": "Answer 300 questions",
        "icon": "crown",
        "type": "total",
        "target": 300,
        "gradient": "from-red-500 to-rose-600",
    },
    {
        "title": "Translation Expert",
        "description": "Answer 100 translation questions",
        "icon": "award",
        "type": "translation",
        "target": 100,
    },
    {
        "title": "Translation King",
        "description": "Answer 200 translation questions",
        "icon": "crown",
        "type": "translation",
        "target": 200,
    },
    {
        "title": "Word Match Pro",
        "description": "Complete 100 word matching exercises",
        "icon": "zap",
        "type": "wordMatch",
        "target": 100,
    },
    {
        "title": "Golden Ear",
        "description": "Complete 50 listening exercises",
        "icon": "medal",
        "type": "audioListen",
        "target": 50,
    },
]


def seed_id(payload: Dict[str, object]) -> str:
    return f"{payload['type']}_{payload['target']}"


def seed_achievements(overwrite: bool = False) -> List[str]:
    """Write the stock badges under ``<type>_<target>`` ids and return the ids written."""

    existing = {definition.id for definition in storage.list_achievements()}
    written: List[str] = []
    for payload in DEFAULT_ACHIEVEMENTS:
        achievement_id = seed_id(payload)
        if achievement_id in existing and not overwrite:
            continue
        storage.save_achievement(AchievementDefinition.from_dict(payload, achievement_id=achievement_id))
        written.append(achievement_id)
        logger.info("Seeded achievement %s (%s)", payload["title"], achievement_id)
    return written
