from __future__ import annotations

import pytest

from fitbuddy.models import Exercise, ExerciseRoutine, UserProfile
from fitbuddy.services import MemoryDocumentStore, ProfileStore, RoutineStore


@pytest.fixture
def doc_store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def routines(doc_store: MemoryDocumentStore) -> RoutineStore:
    return RoutineStore(doc_store)


@pytest.fixture
def profiles(doc_store: MemoryDocumentStore) -> ProfileStore:
    return ProfileStore(doc_store)


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile.model_validate({
        "dob": "1990-01-01",
        "weightKg": 70,
        "heightCm": 175,
        "gender": "male",
        "activityLevel": "moderatelyActive",
        "exerciseGoal": "general_fitness",
    })


@pytest.fixture
def routine() -> ExerciseRoutine:
    return ExerciseRoutine(
        routine=[
            Exercise(name="Goblet Squat", sets=3, reps="8-12", rest_time="60 seconds"),
            Exercise(name="Push-up", sets=4, reps="10", rest_time="45 seconds", completed=1),
            Exercise(name="Romanian Deadlift", sets=3, reps="8", rest_time="90 seconds"),
            Exercise(name="Plank", sets=2, reps="45s", rest_time="30 seconds"),
        ],
        notes="Warm up for five minutes first.",
    )
