"""Streamlit app for the LexiPlay word games and their achievement badges."""

from __future__ import annotations

import json
from typing import Dict, List

import plotly.graph_objects as go
import streamlit as st

from lexiplay import notifications, scoring, storage
from lexiplay.achievement_engine import validate_definitions
from lexiplay.achievement_tracker import reconcile
from lexiplay.badge_display import build_badge_rows, completion_ratio, format_summary
from lexiplay.config import admin_users, configure_logging
from lexiplay.seed import seed_achievements
from lexiplay.types import ACHIEVEMENT_TYPES, GAME_TYPES, AchievementDefinition, UserAchievementState


st.set_page_config(page_title="LexiPlay", page_icon="🏆", layout="wide")
configure_logging()
notifications.set_emitter(lambda message: st.toast(message, icon="🎉"))


GAME_LABELS = {
    "wordMatch": "Word Match",
    "fillBlank": "Fill in the Blank",
    "translation": "Translation",
    "letterScramble": "Letter Scramble",
    "audioListen": "Audio Listen",
}

ICONS = {
    "trophy": "🏆",
    "award": "🎖️",
    "star": "⭐",
    "target": "🎯",
    "zap": "⚡",
    "crown": "👑",
    "medal": "🏅",
}


def _build_score_chart(scores: Dict[str, int]) -> go.Figure:
    """Create a bar chart of per-game score totals."""

    labels = [GAME_LABELS[game] for game in GAME_TYPES]
    values = [scores.get(game, 0) for game in GAME_TYPES]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=values, name="Score"))
    fig.update_layout(
        title="Score by game",
        yaxis_title="Points",
        margin=dict(l=20, r=20, t=30, b=20),
    )
    return fig


def _render_play(user_id: str) -> None:
    """Render the scoring panel: one button per game for a correct answer."""

    st.subheader("Play")
    st.caption("Quiz screens report each correct answer here.")
    record = scoring.ensure_scores(user_id)
    st.metric("Total score", record.total)

    columns = st.columns(len(GAME_TYPES))
    for column, game in zip(columns, GAME_TYPES):
        with column:
            st.metric(GAME_LABELS[game], record.get(game))
            if st.button("Correct answer", key=f"score_{game}", use_container_width=True):
                scoring.record_score(user_id, game)
                st.rerun()


def _render_badge_grid(definitions: List[AchievementDefinition], state: UserAchievementState) -> None:
    """Render badges in rows of three with progress bars."""

    rows = build_badge_rows(definitions, state)
    if not rows:
        st.info("No achievements available yet.")
        return

    for start in range(0, len(rows), 3):
        columns = st.columns(3)
        for column, row in zip(columns, rows[start:start + 3]):
            with column:
                icon = ICONS.get(str(row["icon"]), "🏆") if row["unlocked"] else "🔒"
                st.markdown(f"### {icon} {row['title']}")
                st.caption(str(row["description"]))
                st.progress(float(row["percentage"]) / 100)
                st.write(f"{row['current']} / {row['target']}")


def _render_achievements(user_id: str) -> None:
    """Render the achievements tab; reconciles on load and on refresh."""

    st.subheader("Achievements and badges")
    refresh = st.button("Refresh achievements")
    if refresh or st.session_state.get("reconciled_for") != user_id:
        with st.spinner("Syncing achievements..."):
            summary = reconcile(user_id)
        st.session_state["reconciled_for"] = user_id
        st.session_state["last_summary"] = summary
        if summary and summary.newly_unlocked:
            notifications.announce_unlocks(summary.newly_unlocked, storage.list_achievements())

    st.caption(format_summary(st.session_state.get("last_summary")))

    definitions = storage.list_achievements()
    state = storage.load_user_achievements(user_id) or UserAchievementState(user_id=user_id)
    st.write(f"Unlocked {len(state.unlocked_badges)} of {len(definitions)} badges")
    st.progress(completion_ratio(state, definitions))
    _render_badge_grid(definitions, state)

    scores = storage.load_scores(user_id)
    if scores is not None:
        st.plotly_chart(_build_score_chart(scores.scores), use_container_width=True)

    st.download_button(
        "Download achievements JSON",
        data=json.dumps(storage.export_user_achievements(user_id), indent=2),
        file_name=f"lexiplay_achievements_{user_id}.json",
        mime="application/json",
    )


def _achievement_form(existing: AchievementDefinition | None) -> None:
    """Render the add/edit form for one achievement definition."""

    key = existing.id if existing else "new"
    with st.form(key=f"achievement_form_{key}"):
        title = st.text_input("Title", value=existing.title if existing else "")
        description = st.text_input("Description", value=existing.description if existing else "")
        icon = st.selectbox(
            "Icon",
            options=list(ICONS),
            index=list(ICONS).index(existing.icon) if existing and existing.icon in ICONS else 0,
        )
        type_options = list(ACHIEVEMENT_TYPES)
        if existing and existing.type not in type_options:
            type_options.append(existing.type)
        achievement_type = st.selectbox(
            "Type",
            options=type_options,
            index=type_options.index(existing.type) if existing else 1,
        )
        target = st.number_input("Target", min_value=0, step=1, value=max(0, existing.target) if existing else 0)
        gradient = st.text_input("Gradient", value=(existing.gradient or "") if existing else "")
        submitted = st.form_submit_button("Save")

    if submitted:
        definition = AchievementDefinition(
            id=existing.id if existing else "",
            title=title,
            description=description,
            type=achievement_type,
            target=int(target),
            icon=icon,
            gradient=gradient or None,
        )
        try:
            storage.save_achievement(definition)
        except ValueError as exc:
            st.error(str(exc))
            return
        st.success(f"Saved {definition.title}.")
        st.rerun()


def _render_admin() -> None:
    """Render the achievement definition console."""

    st.subheader("Manage achievements")
    if st.button("Seed stock achievements"):
        written = seed_achievements()
        st.success(f"Seeded {len(written)} achievements.")

    definitions = storage.list_achievements()
    for warning in validate_definitions(definitions):
        st.warning(warning)

    if definitions:
        st.dataframe(
            [definition.to_dict() for definition in sorted(definitions, key=lambda item: item.target)],
            use_container_width=True,
        )

    st.markdown("### Add achievement")
    _achievement_form(None)

    if not definitions:
        return
    st.markdown("### Edit or delete")
    lookup = {definition.id: definition for definition in definitions}
    selected_id = st.selectbox(
        "Achievement",
        options=list(lookup),
        format_func=lambda value: f"{lookup[value].title} ({value})",
    )
    _achievement_form(lookup[selected_id])
    if st.button("Delete achievement"):
        storage.delete_achievement(selected_id)
        st.success("Deleted.")
        st.rerun()


def main() -> None:
    """Render the main game interface."""

    st.title("LexiPlay")
    user_id = st.sidebar.text_input("Player name", value=st.session_state.get("user_id", "")).strip()
    if not user_id:
        st.info("Enter a player name in the sidebar to start.")
        return
    st.session_state["user_id"] = user_id

    tab_names = ["Play", "Achievements"]
    if user_id in admin_users():
        tab_names.append("Admin")
    tabs = st.tabs(tab_names)

    with tabs[0]:
        _render_play(user_id)

    with tabs[1]:
        _render_achievements(user_id)

    if len(tabs) > 2:
        with tabs[2]:
            _render_admin()


if __name__ == "__main__":
    main()
