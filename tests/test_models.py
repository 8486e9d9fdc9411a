from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from fitbuddy.models import Exercise, ExerciseRoutine, GenerateRoutineInput, GenerateRoutineOutput, UserProfile


def base_profile(**overrides) -> dict:
    data = {
        "dob": "1985-03-14",
        "weightKg": 62.5,
        "heightCm": 168,
        "gender": "female",
        "activityLevel": "lightlyActive",
        "exerciseGoal": "strength_training",
    }
    data.update(overrides)
    return data


def test_profile_reads_wire_names_and_dumps_them_back() -> None:
    p = UserProfile.model_validate(base_profile())
    assert p.date_of_birth == date(1985, 3, 14)
    assert p.activity_level == "lightlyActive"
    doc = p.to_document()
    assert doc["dob"] == "1985-03-14"
    assert doc["weightKg"] == 62.5
    assert doc["exerciseGoal"] == "strength_training"
    assert doc["ageRelatedConditions"] == []


@pytest.mark.parametrize("field,value", [
    ("weightKg", 0),
    ("heightCm", -3),
    ("gender", "unknown"),
    ("activityLevel", "Moderately Active"),
    ("exerciseGoal", "flexibility"),
    ("dob", "not-a-date"),
])
def test_profile_rejects_bad_values(field: str, value) -> None:
    with pytest.raises(ValidationError):
        UserProfile.model_validate(base_profile(**{field: value}))


def test_age_related_conditions_only_for_female() -> None:
    p = UserProfile.model_validate(base_profile(ageRelatedConditions=["pregnancy", "menopause", "pregnancy"]))
    assert p.age_related_conditions == ["menopause", "pregnancy"], "conditions behave as a set"

    with pytest.raises(ValidationError):
        UserProfile.model_validate(base_profile(gender="male", ageRelatedConditions=["postpartum"]))

    # empty conditions are fine for any gender
    assert UserProfile.model_validate(base_profile(gender="other", ageRelatedConditions=[])).gender == "other"


def test_exercise_completed_cannot_exceed_sets() -> None:
    with pytest.raises(ValidationError):
        Exercise(name="Row", sets=3, reps="10", rest_time="60s", completed=4)
    with pytest.raises(ValidationError):
        Exercise(name="Row", sets=3, reps="10", rest_time="60s", completed=-1)
    with pytest.raises(ValidationError):
        Exercise(name="Row", sets=0, reps="10", rest_time="60s")


def test_exercise_defaults_and_legacy_boolean_flag() -> None:
    ex = Exercise.model_validate({"exerciseName": "Lunge", "sets": 3, "reps": "12", "restTime": "60 seconds"})
    assert ex.completed == 0

    done = Exercise.model_validate(
        {"exerciseName": "Lunge", "sets": 3, "reps": "12", "restTime": "60 seconds", "completed": True}
    )
    assert done.completed == 3
    not_done = Exercise.model_validate(
        {"exerciseName": "Lunge", "sets": 3, "reps": "12", "restTime": "60 seconds", "completed": False}
    )
    assert not_done.completed == 0


def test_routine_document_omits_missing_notes() -> None:
    r = ExerciseRoutine(routine=[Exercise(name="Dip", sets=2, reps="8", rest_time="60s")])
    doc = r.to_document()
    assert "notes" not in doc
    assert doc["routine"][0] == {"exerciseName": "Dip", "sets": 2, "reps": "8", "restTime": "60s", "completed": 0}


def test_generation_input_requires_positive_age() -> None:
    data = {
        "fitnessGoal": "general_fitness",
        "availableTime": 60,
        "age": 0,
        "gender": "male",
        "activityLevel": "moderatelyActive",
        "userId": "u1",
    }
    with pytest.raises(ValidationError):
        GenerateRoutineInput.model_validate(data)
    data["age"] = 34
    assert GenerateRoutineInput.model_validate(data).available_time == 60


def test_generation_output_schema_and_reset_of_completed() -> None:
    schema = GenerateRoutineOutput.model_json_schema(by_alias=True)
    assert set(schema["properties"]) == {"routine", "notes"}

    with pytest.raises(ValidationError):
        GenerateRoutineOutput.model_validate({"routine": []})

    out = GenerateRoutineOutput.model_validate({
        "routine": [{"exerciseName": "Burpee", "sets": 3, "reps": "10", "restTime": "30 seconds", "completed": 2}],
    })
    routine = out.to_routine()
    assert [ex.completed for ex in routine.routine] == [0]
    assert routine.notes is None
