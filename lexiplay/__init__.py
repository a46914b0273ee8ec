"""Core modules for the LexiPlay games and achievement tracking."""

from .types import (  # noqa: F401
    AchievementDefinition,
    ReconcileSummary,
    ScoreEvent,
    ScoreOutcome,
    ScoreRecord,
    UserAchievementState,
)
