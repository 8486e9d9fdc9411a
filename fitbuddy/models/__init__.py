from .profile import UserProfile, Gender, ActivityLevel, ExerciseGoal, AgeRelatedCondition
from .routine import Exercise, ExerciseRoutine, DatedRoutine, ExerciseHistoryEntry
from .llm_io import GenerateRoutineInput, GenerateRoutineOutput

__all__ = [
    "UserProfile",
    "Gender",
    "ActivityLevel",
    "ExerciseGoal",
    "AgeRelatedCondition",
    "Exercise",
    "ExerciseRoutine",
    "DatedRoutine",
    "ExerciseHistoryEntry",
    "GenerateRoutineInput",
    "GenerateRoutineOutput",
]
