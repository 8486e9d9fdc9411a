from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import streamlit as st

from fitbuddy.auth import current_user_id, require_login
from fitbuddy.config import configure_logging
from fitbuddy.errors import FitBuddyError
from fitbuddy.models.profile import ActivityLevel, AgeRelatedCondition, ExerciseGoal, Gender
from fitbuddy.services import calculate_age, get_profile_store

st.set_page_config(page_title="Profile", page_icon="👤")
configure_logging()
require_login()

ACTIVITY_LABELS = {
    "sedentary": "Sedentary",
    "lightlyActive": "Lightly Active",
    "moderatelyActive": "Moderately Active",
    "veryActive": "Very Active",
    "extraActive": "Extra Active",
}


def pretty_text(s: str) -> str:
    return s.replace("_", " ").title()


def _index(options: list, value, default: int = 0) -> int:
    return options.index(value) if value in options else default


st.title("User Profile")

user_id = current_user_id()
profiles = get_profile_store()
existing = profiles.load(user_id)

genders = list(Gender.__args__)  # type: ignore[attr-defined]
levels = list(ActivityLevel.__args__)  # type: ignore[attr-defined]
goals = list(ExerciseGoal.__args__)  # type: ignore[attr-defined]
conditions_all = list(AgeRelatedCondition.__args__)  # type: ignore[attr-defined]

dob = st.date_input(
    "Date of birth",
    value=existing.date_of_birth if existing else date(1990, 1, 1),
    min_value=date(1900, 1, 1),
    max_value=date.today(),
)
c1, c2 = st.columns(2)
weight = c1.number_input("Weight (kg)", min_value=1.0, value=float(existing.weight_kg) if existing else 70.0)
height = c2.number_input("Height (cm)", min_value=1.0, value=float(existing.height_cm) if existing else 175.0)
gender = st.selectbox("Gender", genders, index=_index(genders, existing.gender if existing else None),
                      format_func=str.title)
activity = st.selectbox("Activity level", levels,
                        index=_index(levels, existing.activity_level if existing else None, 2),
                        format_func=lambda v: ACTIVITY_LABELS[v])
goal = st.selectbox("Exercise goal", goals, index=_index(goals, existing.exercise_goal if existing else None, 2),
                    format_func=pretty_text)

conditions: list = []
if gender == "female":
    conditions = st.multiselect(
        "Optional: select any applicable conditions",
        conditions_all,
        default=existing.age_related_conditions if existing else [],
        format_func=str.title,
    )

if calculate_age(dob) <= 0:
    st.warning("Please enter a date of birth in the past.")

if st.button("Save profile", type="primary"):
    try:
        profiles.save(user_id, {
            "dob": dob.isoformat(),
            "weightKg": weight,
            "heightCm": height,
            "gender": gender,
            "activityLevel": activity,
            "exerciseGoal": goal,
            "ageRelatedConditions": conditions,
        })
        st.success("Profile saved.")
    except FitBuddyError as e:
        st.error(str(e))
