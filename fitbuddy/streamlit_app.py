from __future__ import annotations

# Ensure the repository root is on sys.path so that absolute imports like `fitbuddy.*` work
# when Streamlit runs this file from within the package directory on cloud runtimes.
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import logging

import streamlit as st

from fitbuddy.auth import current_user_id, require_login, sign_out
from fitbuddy.config import configure_logging, get_settings
from fitbuddy.errors import FitBuddyError
from fitbuddy.functions import GENERATE_EXERCISE_ROUTINE, call
from fitbuddy.agents.graph import generation_input_for
from fitbuddy.models import Exercise, ExerciseRoutine, GenerateRoutineOutput
from fitbuddy.services import (
    add_exercise,
    completion_level,
    date_key,
    get_profile_store,
    get_routine_store,
    log_set,
    remove_exercise,
    set_completed_sets,
)
import fitbuddy.llm.groq_client as groq_debug

st.set_page_config(page_title="FitBuddy", page_icon="🏋️", layout="wide")
configure_logging()
settings = get_settings()
require_login()

logger = logging.getLogger("fitbuddy.ui.routine")

LEVEL_BADGE = {"incomplete": "⬜", "partial": "🟨", "complete": "✅"}

user_id = current_user_id()
today = date_key()
profiles = get_profile_store()
routines = get_routine_store()

with st.sidebar:
    st.header("FitBuddy")
    st.caption(f"Signed in as {st.session_state['user'].get('name', 'User')}")
    if st.button("Sign out", use_container_width=True):
        sign_out()
        st.rerun()

profile = profiles.load(user_id)
if profile is None:
    st.warning("No profile found. Complete your profile before generating a routine.")
    st.switch_page("pages/1_Profile.py")

st.title(f"Today's routine · {today}")

if "routine_version" not in st.session_state:
    st.session_state["routine_version"] = 0


def _bump_version() -> None:
    # Exercise widgets are keyed by version; a saved change must not inherit old widget state
    st.session_state["routine_version"] += 1


def _persist(updated: ExerciseRoutine, done_msg: str, fail_msg: str) -> None:
    try:
        routines.save(user_id, today, updated)
        _bump_version()
        st.toast(done_msg)
    except FitBuddyError as e:
        logger.error("%s: %s", fail_msg, e)
        st.error(f"{fail_msg} {e}")


try:
    routine = routines.load(user_id, today)
except FitBuddyError as e:
    logger.error("Error loading routine for today: %s", e)
    st.error("Failed to load today's routine.")
    st.stop()

label = "🔁 Regenerate routine" if routine else "✨ Generate today's routine"
if st.button(label, type="primary"):
    with st.spinner("Generating routine…"):
        try:
            req = generation_input_for(user_id, profile, available_minutes=settings.DEFAULT_AVAILABLE_MINUTES)
            result = call(GENERATE_EXERCISE_ROUTINE, req.model_dump(mode="json", by_alias=True), routines=routines)
            generated = GenerateRoutineOutput.model_validate(result).to_routine()
            routines.save(user_id, today, generated)
            routine = generated
            _bump_version()
            st.toast("Routine generated.")
        except FitBuddyError as e:
            logger.error("Error generating routine: %s", e)
            st.error(str(e) or "An unknown error occurred while generating the routine.")

if routine is None:
    st.info("No routine for today yet. Generate one to get started.")
    st.stop()

version = st.session_state["routine_version"]
for idx, ex in enumerate(routine.routine):
    with st.container(border=True):
        left, mid, log_col, right = st.columns([6, 3, 1, 1])
        with left:
            st.markdown(f"**{LEVEL_BADGE[completion_level(ex)]} {ex.name}**")
            st.caption(f"{ex.sets} sets × {ex.reps} reps · rest {ex.rest_time}")
        with mid:
            done = st.number_input(
                "Sets done",
                min_value=0,
                max_value=ex.sets,
                value=ex.completed,
                step=1,
                key=f"done-{today}-{version}-{idx}",
            )
            if done != ex.completed:
                _persist(set_completed_sets(routine, idx, int(done)),
                         "Progress saved.", "Failed to save exercise completion status.")
                st.rerun()
        with log_col:
            if st.button("➕", key=f"log-{today}-{version}-{idx}", help="Log one set",
                         disabled=ex.completed >= ex.sets):
                _persist(log_set(routine, idx),
                         "Set logged.", "Failed to save exercise completion status.")
                st.rerun()
        with right:
            if st.button("🗑️", key=f"remove-{today}-{version}-{idx}", help="Remove exercise"):
                _persist(remove_exercise(routine, idx),
                         "Exercise removed.", "Failed to save routine after removing exercise.")
                st.rerun()

if routine.notes:
    st.markdown("**Notes**")
    st.info(routine.notes)

with st.expander("➕ Add exercise"):
    with st.form("add-exercise", clear_on_submit=True):
        name = st.text_input("Exercise name")
        c1, c2, c3 = st.columns(3)
        sets = c1.number_input("Sets", min_value=1, max_value=20, value=3, step=1)
        reps = c2.text_input("Reps", value="8-12")
        rest = c3.text_input("Rest time", value="60s")
        if st.form_submit_button("Add"):
            if not name.strip() or not reps.strip() or not rest.strip():
                st.error("Name, reps and rest time are required.")
            else:
                new_ex = Exercise(name=name.strip(), sets=int(sets), reps=reps.strip(), rest_time=rest.strip())
                _persist(add_exercise(routine, new_ex),
                         "Exercise added.", "Failed to save routine after adding exercise.")
                st.rerun()

if groq_debug.LAST_REQUEST:
    with st.expander("AI Insight", expanded=False):
        st.markdown(f"**Model:** `{groq_debug.LAST_USED_MODEL or 'unknown'}`")
        st.markdown("**Prompt:**")
        st.code(groq_debug.LAST_REQUEST.get("user", ""))
