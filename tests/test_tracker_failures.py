import sqlite3

from lexiplay import achievement_tracker, scoring, storage
from lexiplay.types import AchievementDefinition, ScoreRecord, UserAchievementState


def _seed(user_id: str) -> None:
    storage.save_achievement(
        AchievementDefinition(id="total_1", title="One", description="one question", type="total", target=1)
    )
    storage.save_scores(ScoreRecord(user_id=user_id, scores={"wordMatch": 20}))
    storage.persist_user_achievements(
        UserAchievementState(user_id=user_id, progress={"total_1": 0}, last_updated="2026-01-01T00:00:00")
    )


def test_read_failure_reports_no_unlocks(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    _seed("u1")

    def _boom(conn=None):
        raise sqlite3.OperationalError("database is unavailable")

    monkeypatch.setattr(storage, "list_achievements", _boom)

    assert achievement_tracker.update_progress("u1", "wordMatch", 10, 20) == []
    assert achievement_tracker.reconcile("u1") is None
    assert storage.load_user_achievements("u1").progress == {"total_1": 0}


def test_write_failure_discards_computed_unlocks(tmp_path, monkeypatch):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    _seed("u1")

    def _boom(state, conn=None):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(storage, "persist_user_achievements", _boom)

    assert achievement_tracker.update_progress("u1", "wordMatch", 10, 20) == []
    assert achievement_tracker.reconcile("u1") is None

    state = storage.load_user_achievements("u1")
    assert state.unlocked_badges == []
    assert state.last_updated == "2026-01-01T00:00:00"


def test_malformed_state_document_is_reported_not_raised(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    _seed("u1")
    conn = storage._connection()
    conn.execute("UPDATE user_achievements SET progress = '{not json' WHERE user_id = 'u1'")
    conn.commit()
    conn.close()

    assert achievement_tracker.reconcile("u1") is None
    assert achievement_tracker.update_progress("u1", "wordMatch", 10, 20) == []
    assert "Error" in caplog.text


def test_corrupt_definition_target_is_reported_not_raised(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("LEXIPLAY_DB_PATH", str(tmp_path / "lexiplay_state.db"))
    _seed("u1")
    conn = storage._connection()
    conn.execute(
        "INSERT OR REPLACE INTO achievements (id, document, updated_at) VALUES (?, ?, ?)",
        ("total_inf", '{"title": "Inf", "description": "x", "type": "total", "target": Infinity}', "2026-01-01"),
    )
    conn.commit()
    conn.close()

    assert achievement_tracker.reconcile("u1") is None
    assert achievement_tracker.update_progress("u1", "wordMatch", 10, 20) == []
    assert "Malformed achievement document" in caplog.text

    outcome = scoring.record_score("u1", "wordMatch")
    assert outcome.newly_unlocked == []
    assert storage.load_scores("u1").get("wordMatch") == 30
    assert storage.load_user_achievements("u1").unlocked_badges == []
