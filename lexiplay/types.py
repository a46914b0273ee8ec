"""Data models used across the LexiPlay app."""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, List, Optional


GAME_TYPES = ("wordMatch", "fillBlank", "translation", "letterScramble", "audioListen")

ACHIEVEMENT_TYPES = ("total_score", "total") + GAME_TYPES


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


@dataclass
class AchievementDefinition:
    """One unlockable badge and the score dimension that feeds it."""

    id: str
    title: str
    description: str
    type: str
    target: int
    icon: str = "trophy"
    gradient: Optional[str] = None

    @property
    def is_known_type(self) -> bool:
        return self.type in ACHIEVEMENT_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], achievement_id: Optional[str] = None) -> "AchievementDefinition":
        payload = payload or {}
        return cls(
            id=str(achievement_id if achievement_id is not None else payload.get("id", "")),
            title=str(payload.get("title", "")),
            description=str(payload.get("description", "")),
            type=str(payload.get("type", "")),
            target=int(payload.get("target", 0)),
            icon=str(payload.get("icon", "trophy")),
            gradient=(str(payload["gradient"]) if payload.get("gradient") else None),
        )


@dataclass
class ScoreRecord:
    user_id: str
    scores: Dict[str, int] = field(default_factory=lambda: {game: 0 for game in GAME_TYPES})

    def get(self, game_type: str) -> int:
        return max(0, _to_int(self.scores.get(game_type, 0)))

    @property
    def total(self) -> int:
        return sum(self.get(game) for game in GAME_TYPES)

    def to_dict(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "scores": {game: self.get(game) for game in GAME_TYPES}}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ScoreRecord":
        payload = payload or {}
        raw = payload.get("scores", {}) or {}
        return cls(
            user_id=str(payload.get("user_id", "")),
            scores={game: max(0, _to_int(raw.get(game, 0))) for game in GAME_TYPES},
        )


@dataclass
class UserAchievementState:
    user_id: str
    progress: Dict[str, int] = field(default_factory=dict)
    unlocked_badges: List[str] = field(default_factory=list)
    last_updated: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "UserAchievementState":
        payload = payload or {}
        unlocked: List[str] = []
        for item in payload.get("unlocked_badges", []) or []:
            if str(item) not in unlocked:
                unlocked.append(str(item))
        return cls(
            user_id=str(payload.get("user_id", "")),
            progress={str(k): max(0, _to_int(v)) for k, v in (payload.get("progress", {}) or {}).items()},
            unlocked_badges=unlocked,
            last_updated=str(payload.get("last_updated", datetime.utcnow().isoformat())),
        )


@dataclass
class ReconcileSummary:
    total_score: int
    unlocked_count: int
    progress: Dict[str, int]
    newly_unlocked: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScoreEvent:
    """Command produced by a scoring event and consumed by the updater."""

    user_id: str
    game_type: str
    points: int
    new_total_score: int


@dataclass
class ScoreOutcome:
    record: ScoreRecord
    newly_unlocked: List[str] = field(default_factory=list)
    announced_titles: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.record.total
