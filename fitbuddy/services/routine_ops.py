from __future__ import annotations

from typing import Literal

from fitbuddy.errors import InputValidationError
from fitbuddy.models.routine import Exercise, ExerciseRoutine

CompletionLevel = Literal["incomplete", "partial", "complete"]


def _check_index(routine: ExerciseRoutine, index: int) -> None:
    if not 0 <= index < len(routine.routine):
        raise InputValidationError(f"No exercise at position {index} (routine has {len(routine.routine)}).")


def _replace_at(routine: ExerciseRoutine, index: int, exercise: Exercise) -> ExerciseRoutine:
    exercises = list(routine.routine)
    exercises[index] = exercise
    return routine.model_copy(update={"routine": exercises})


def set_completed_sets(routine: ExerciseRoutine, index: int, count: int) -> ExerciseRoutine:
    _check_index(routine, index)
    ex = routine.routine[index]
    count = max(0, min(int(count), ex.sets))
    return _replace_at(routine, index, ex.model_copy(update={"completed": count}))


def toggle_completion(routine: ExerciseRoutine, index: int, completed: bool) -> ExerciseRoutine:
    """Mark every set of one exercise done, or none of them."""
    _check_index(routine, index)
    ex = routine.routine[index]
    return set_completed_sets(routine, index, ex.sets if completed else 0)


def log_set(routine: ExerciseRoutine, index: int) -> ExerciseRoutine:
    _check_index(routine, index)
    return set_completed_sets(routine, index, routine.routine[index].completed + 1)


def add_exercise(routine: ExerciseRoutine, exercise: Exercise) -> ExerciseRoutine:
    new_ex = exercise.model_copy(update={"completed": 0})
    return routine.model_copy(update={"routine": [*routine.routine, new_ex]})


def remove_exercise(routine: ExerciseRoutine, index: int) -> ExerciseRoutine:
    _check_index(routine, index)
    exercises = [ex for i, ex in enumerate(routine.routine) if i != index]
    return routine.model_copy(update={"routine": exercises})


def completion_status(exercise: Exercise) -> str:
    return f"{exercise.completed} out of {exercise.sets}"


def completion_level(exercise: Exercise) -> CompletionLevel:
    if exercise.completed == 0:
        return "incomplete"
    if exercise.completed < exercise.sets:
        return "partial"
    return "complete"
