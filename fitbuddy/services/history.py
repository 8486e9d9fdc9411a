from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List

from fitbuddy.models.routine import DatedRoutine, ExerciseHistoryEntry

logger = logging.getLogger(__name__)


def days_ago_label(days: int) -> str:
    return f"{days} day{'' if days == 1 else 's'} ago"


def build_history(routines: Iterable[DatedRoutine], today: date) -> List[ExerciseHistoryEntry]:
    """Flatten dated routines into history entries, keeping routine and exercise order."""
    history: List[ExerciseHistoryEntry] = []
    for dated in routines:
        try:
            day = date.fromisoformat(dated.date)
        except ValueError:
            logger.warning("Skipping routine with invalid date key: %s", dated.date)
            continue
        label = days_ago_label(abs((today - day).days))
        for ex in dated.routine.routine:
            history.append(ExerciseHistoryEntry(exercise_name=ex.name, sets=ex.sets, reps=ex.reps, days_ago=label))
    return history
