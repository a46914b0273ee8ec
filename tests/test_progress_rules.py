from lexiplay.achievement_engine import (
    incremental_progress,
    merge_unlocked,
    newly_unlocked,
    questions_answered,
    reconciled_progress,
)
from lexiplay.config import POINTS_PER_QUESTION
from lexiplay.types import AchievementDefinition, ScoreRecord


def _definition(achievement_id: str, achievement_type: str, target: int) -> AchievementDefinition:
    return AchievementDefinition(
        id=achievement_id,
        title=achievement_id.replace("_", " ").title(),
        description="test badge",
        type=achievement_type,
        target=target,
    )


def _scores(**values) -> ScoreRecord:
    record = ScoreRecord(user_id="u1")
    record.scores.update(values)
    return record


def test_points_per_question_is_ten():
    assert POINTS_PER_QUESTION == 10


def test_questions_answered_floors_each_dimension():
    counts = questions_answered(_scores(wordMatch=95, translation=40, audioListen=9))

    assert counts == {
        "total": 14,
        "wordMatch": 9,
        "fillBlank": 0,
        "translation": 4,
        "letterScramble": 0,
        "audioListen": 0,
    }


def test_total_threshold_is_exact_at_ten_points_per_question():
    definitions = [_definition("total_50", "total", 50)]

    at_target = reconciled_progress(definitions, _scores(fillBlank=500))
    below_target = reconciled_progress(definitions, _scores(fillBlank=490))

    assert newly_unlocked(definitions, at_target, []) == ["total_50"]
    assert newly_unlocked(definitions, below_target, []) == []


def test_reconciled_progress_matches_mixed_definitions():
    definitions = [
        _definition("total_50", "total", 50),
        _definition("wordMatch_100", "wordMatch", 100),
        _definition("total_score_300", "total_score", 300),
    ]

    progress = reconciled_progress(definitions, _scores(wordMatch=500))

    assert progress == {"total_50": 50, "wordMatch_100": 50, "total_score_300": 500}
    assert newly_unlocked(definitions, progress, []) == ["total_50", "total_score_300"]


def test_incremental_progress_only_touches_matching_game():
    definitions = [
        _definition("translation_100", "translation", 100),
        _definition("wordMatch_100", "wordMatch", 100),
        _definition("total_50", "total", 50),
    ]
    prior = {"translation_100": 3, "wordMatch_100": 7, "total_50": 1}

    progress = incremental_progress(definitions, prior, "translation", 120)

    assert progress["translation_100"] == 4
    assert progress["wordMatch_100"] == 7
    assert progress["total_50"] == 12
    assert prior["translation_100"] == 3


def test_incremental_progress_keeps_unseen_game_ids_absent():
    definitions = [_definition("fillBlank_10", "fillBlank", 10)]

    progress = incremental_progress(definitions, {}, "wordMatch", 10)

    assert "fillBlank_10" not in progress


def test_unknown_type_never_progresses_or_unlocks():
    definitions = [_definition("streak_0", "streak", 0), _definition("daily_1", "daily", 1)]

    reconciled = reconciled_progress(definitions, _scores(wordMatch=10_000))
    incremental = incremental_progress(definitions, {"daily_1": 5}, "wordMatch", 10_000)

    assert reconciled == {"streak_0": 0, "daily_1": 0}
    assert newly_unlocked(definitions, reconciled, []) == []
    assert newly_unlocked(definitions, incremental, []) == []


def test_already_unlocked_ids_are_not_reported_again():
    definitions = [_definition("total_1", "total", 1), _definition("total_2", "total", 2)]
    progress = {"total_1": 5, "total_2": 5}

    assert newly_unlocked(definitions, progress, ["total_1"]) == ["total_2"]


def test_merge_unlocked_never_drops_ids():
    merged = merge_unlocked(["a", "b"], ["c", "a"])

    assert merged == ["a", "b", "c"]
    assert merge_unlocked(["a"], []) == ["a"]
