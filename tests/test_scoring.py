import sqlite3

import pytest

from lexiplay import notifications, scoring, storage
from lexiplay.types import AchievementDefinition


def _define(achievement_id: str, achievement_type: str, target: int, title: str) -> None:
    storage.save_achievement(
        AchievementDefinition(
            id=achievement_id, title=title, description="test badge", type=achievement_type, target=target
        )
    )


def test_ensure_scores_creates_zero_record_once(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))

    record = scoring.ensure_scores("u1")
    assert record.total == 0
    assert storage.load_scores("u1") is not None

    with pytest.raises(ValueError):
        scoring.ensure_scores("")


def test_record_score_updates_totals_and_announces_unlocks(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    _define("wordMatch_2", "wordMatch", 2, "Matcher")
    _define("total_score_30", "total_score", 30, "Thirty")
    shown = []
    monkeypatch.setattr(notifications, "_emitter", shown.append)

    first = scoring.record_score("u1", "wordMatch")
    second = scoring.record_score("u1", "wordMatch")
    third = scoring.record_score("u1", "fillBlank", points=10)

    assert first.newly_unlocked == []
    assert second.newly_unlocked == ["wordMatch_2"]
    assert second.announced_titles == ["Matcher"]
    assert third.newly_unlocked == ["total_score_30"]
    assert third.total == 30
    assert storage.load_scores("u1").get("wordMatch") == 20
    assert len(shown) == 2


def test_record_score_uses_configured_points(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    monkeypatch.setenv("LEXIPLAY_POINTS_PER_ANSWER", "25")

    outcome = scoring.record_score("u1", "translation")

    assert outcome.record.get("translation") == 25


def test_record_score_rejects_bad_input(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))

    with pytest.raises(ValueError):
        scoring.record_score("u1", "chess")
    with pytest.raises(ValueError):
        scoring.record_score("u1", "wordMatch", points=-10)


def test_achievement_failure_does_not_block_score(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    _define("total_1", "total", 1, "One")

    def _boom(conn=None):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(storage, "list_achievements", _boom)

    outcome = scoring.record_score("u1", "letterScramble")

    assert outcome.newly_unlocked == []
    assert storage.load_scores("u1").get("letterScramble") == 10
