from __future__ import annotations

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import logging

import streamlit as st

from fitbuddy.auth import current_user_id, require_login
from fitbuddy.config import configure_logging
from fitbuddy.errors import FitBuddyError
from fitbuddy.services import (
    completion_level,
    completion_status,
    get_profile_store,
    get_routine_store,
    to_csv,
    to_markdown,
    to_pdf,
)

st.set_page_config(page_title="History", page_icon="📅")
configure_logging()
require_login()

logger = logging.getLogger("fitbuddy.ui.history")

LEVEL_COLOR = {"incomplete": "red", "partial": "orange", "complete": "green"}

st.title("History")

user_id = current_user_id()
if get_profile_store().load(user_id) is None:
    st.switch_page("pages/1_Profile.py")

try:
    with st.spinner("Loading past routines…"):
        past = get_routine_store().list_all(user_id)
except FitBuddyError as e:
    logger.error("Error loading history: %s", e)
    st.error(f"Failed to load past routines. {e}")
    st.stop()

if not past:
    st.info("No past routines yet.")
    st.stop()

with st.popover("⬇️ Export"):
    st.download_button("📄 CSV", data=to_csv(past), file_name="workout_history.csv", mime="text/csv",
                       use_container_width=True)
    st.download_button("📝 Markdown", data=to_markdown(past), file_name="workout_history.md",
                       mime="text/markdown", use_container_width=True)
    st.download_button("📘 PDF", data=to_pdf(past), file_name="workout_history.pdf", mime="application/pdf",
                       use_container_width=True)

for dated in past:
    with st.expander(dated.date):
        for ex in dated.routine.routine:
            color = LEVEL_COLOR[completion_level(ex)]
            st.markdown(f"**{ex.name}** · {ex.sets} × {ex.reps}, rest {ex.rest_time} · "
                        f":{color}[{completion_status(ex)}]")
        if dated.routine.notes:
            st.caption(dated.routine.notes)
