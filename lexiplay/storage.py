"""SQLite persistence for achievement definitions, score totals, and per-user badge state."""

from __future__ import annotations

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List

from .config import db_path
from .types import GAME_TYPES, AchievementDefinition, ScoreRecord, UserAchievementState


class StorageError(RuntimeError):
    """A stored document could not be decoded."""


def _connection(path=None):
    path = path or db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn=None):
    conn = conn or _connection()
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS achievements (
            id TEXT PRIMARY KEY,
            document TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS scores (
            user_id TEXT PRIMARY KEY,
            scores_json TEXT NOT NULL,
            updated_at TEXT
        );

        CREATE TABLE IF NOT EXISTS user_achievements (
            user_id TEXT PRIMARY KEY,
            progress TEXT NOT NULL,
            unlocked_badges TEXT NOT NULL,
            last_updated TEXT NOT NULL
        );
        """
    )
    conn.commit()


@contextmanager
def _session(conn=None) -> Iterator[sqlite3.Connection]:
    """Yield the caller's connection, or open, initialise, commit and close one."""

    if conn is not None:
        yield conn
        return
    own = _connection()
    try:
        init_db(own)
        yield own
        own.commit()
    finally:
        own.close()


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Run a read-check-write sequence under one write lock.

    ``BEGIN IMMEDIATE`` takes the database write lock up front, so a second
    writer waits instead of reading state that is about to be replaced.
    """

    conn = _connection()
    try:
        init_db(conn)
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    finally:
        conn.close()


def _load_json(raw: object, expected: type, label: str):
    if raw is None:
        return expected()
    try:
        value = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError as exc:
        raise StorageError(f"Malformed {label} document: {exc}") from exc
    if not isinstance(value, expected):
        raise StorageError(f"Malformed {label} document: expected {expected.__name__}")
    return value


def _decode(factory, payload: Dict[str, object], label: str, **kwargs):
    try:
        return factory(payload, **kwargs)
    except (TypeError, ValueError, OverflowError) as exc:
        raise StorageError(f"Malformed {label} document: {exc}") from exc


# Achievement definitions


def _new_achievement_id() -> str:
    return uuid.uuid4().hex[:20]


def list_achievements(conn=None) -> List[AchievementDefinition]:
    """Return every achievement definition ordered by id."""

    with _session(conn) as session:
        rows = session.execute("SELECT id, document FROM achievements ORDER BY id").fetchall()
    return [
        _decode(
            AchievementDefinition.from_dict,
            _load_json(row["document"], dict, "achievement"),
            "achievement",
            achievement_id=row["id"],
        )
        for row in rows
    ]


def get_achievement(achievement_id: str, conn=None) -> AchievementDefinition | None:
    with _session(conn) as session:
        row = session.execute(
            "SELECT id, document FROM achievements WHERE id = ?", (achievement_id,)
        ).fetchone()
    if row is None:
        return None
    return _decode(
        AchievementDefinition.from_dict,
        _load_json(row["document"], dict, "achievement"),
        "achievement",
        achievement_id=row["id"],
    )


def save_achievement(definition: AchievementDefinition, conn=None) -> AchievementDefinition:
    """Insert or replace one definition; a blank id gets a generated one."""

    if not definition.title.strip() or not definition.description.strip():
        raise ValueError("Achievement title and description are required.")
    if not definition.id:
        definition.id = _new_achievement_id()

    payload = definition.to_dict()
    payload.pop("id")
    now = datetime.utcnow().isoformat()
    with _session(conn) as session:
        session.execute(
            "INSERT INTO achievements (id, document, updated_at) VALUES (?, ?, ?)"
            " ON CONFLICT(id) DO UPDATE SET document=excluded.document, updated_at=excluded.updated_at",
            (definition.id, json.dumps(payload), now),
        )
    return definition


def delete_achievement(achievement_id: str, conn=None) -> bool:
    with _session(conn) as session:
        cursor = session.execute("DELETE FROM achievements WHERE id = ?", (achievement_id,))
    return bool(cursor.rowcount)


# Score totals


def load_scores(user_id: str, conn=None) -> ScoreRecord | None:
    """Load a user's per-game totals, or ``None`` when none exist yet."""

    with _session(conn) as session:
        row = session.execute("SELECT scores_json FROM scores WHERE user_id = ?", (user_id,)).fetchone()
    if row is None:
        return None
    return _decode(
        ScoreRecord.from_dict,
        {"user_id": user_id, "scores": _load_json(row["scores_json"], dict, "score")},
        "score",
    )


def save_scores(record: ScoreRecord, conn=None) -> None:
    scores = {game: record.get(game) for game in GAME_TYPES}
    now = datetime.utcnow().isoformat()
    with _session(conn) as session:
        session.execute(
            "INSERT INTO scores (user_id, scores_json, updated_at) VALUES (?, ?, ?)"
            " ON CONFLICT(user_id) DO UPDATE SET scores_json=excluded.scores_json, updated_at=excluded.updated_at",
            (record.user_id, json.dumps(scores), now),
        )


# Per-user achievement state


def load_user_achievements(user_id: str, conn=None) -> UserAchievementState | None:
    with _session(conn) as session:
        row = session.execute(
            "SELECT user_id, progress, unlocked_badges, last_updated FROM user_achievements WHERE user_id = ?",
            (user_id,),
        ).fetchone()
    if row is None:
        return None
    return _decode(
        UserAchievementState.from_dict,
        {
            "user_id": row["user_id"],
            "progress": _load_json(row["progress"], dict, "progress"),
            "unlocked_badges": _load_json(row["unlocked_badges"], list, "unlocked badges"),
            "last_updated": row["last_updated"],
        },
        "achievement state",
    )


def persist_user_achievements(state: UserAchievementState, conn=None) -> None:
    """Replace the user's whole achievement document."""

    with _session(conn) as session:
        session.execute(
            """
            INSERT INTO user_achievements (user_id, progress, unlocked_badges, last_updated)
            VALUES (:user_id, :progress, :unlocked_badges, :last_updated)
            ON CONFLICT(user_id) DO UPDATE SET
                progress = excluded.progress,
                unlocked_badges = excluded.unlocked_badges,
                last_updated = excluded.last_updated;
            """,
            {
                "user_id": state.user_id,
                "progress": json.dumps(state.progress),
                "unlocked_badges": json.dumps(state.unlocked_badges),
                "last_updated": state.last_updated,
            },
        )


def export_user_achievements(user_id: str) -> Dict[str, object]:
    """Compile badge state, score totals, and definitions into one export structure."""

    conn = _connection()
    try:
        init_db(conn)
        state = load_user_achievements(user_id, conn=conn) or UserAchievementState(user_id=user_id)
        scores = load_scores(user_id, conn=conn) or ScoreRecord(user_id=user_id)
        definitions = list_achievements(conn=conn)
    finally:
        conn.close()

    return {
        "exported_at": datetime.utcnow().isoformat(),
        "user_id": user_id,
        "scores": scores.to_dict()["scores"],
        "total_score": scores.total,
        "progress": state.progress,
        "unlocked_badges": state.unlocked_badges,
        "last_updated": state.last_updated,
        "achievements": [definition.to_dict() for definition in definitions],
    }
