from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

import pytest

import fitbuddy.agents.nodes as nodes
from fitbuddy.agents.graph import RoutineGraph, generation_input_for
from fitbuddy.errors import (
    AuthorizationError,
    GenerationError,
    InputValidationError,
    RoutineSchemaError,
    StoreError,
)
from fitbuddy.llm import LLMError
from fitbuddy.models import ExerciseRoutine, UserProfile
from fitbuddy.services import MemoryDocumentStore, RoutineStore
from fitbuddy.services.document_store import routine_path

TODAY = date(2024, 6, 1)

GOOD_OUTPUT: Dict[str, Any] = {
    "routine": [
        {"exerciseName": "Goblet Squat", "sets": 3, "reps": "8-12", "restTime": "60 seconds"},
        {"exerciseName": "Push-up", "sets": 3, "reps": "10-15", "restTime": "45 seconds", "completed": 0},
        {"exerciseName": "Zone 2 Bike", "sets": 1, "reps": "20 min", "restTime": "0 seconds"},
    ],
    "notes": "Keep the bike at a conversational pace.",
}


def install_llm(monkeypatch: pytest.MonkeyPatch, response: Any) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def fake_chat_json(*, schema, system, user, temperature=None):
        calls.append({"schema": schema, "system": system, "user": user})
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(nodes, "chat_json", fake_chat_json)
    return calls


def test_profile_scenario_yields_valid_routine(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                               profile: UserProfile) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)

    req = generation_input_for("u1", profile, TODAY)
    assert req.model_dump(by_alias=True) == {
        "fitnessGoal": "general_fitness",
        "availableTime": 60,
        "age": 34,
        "gender": "male",
        "activityLevel": "moderatelyActive",
        "userId": "u1",
    }

    result = RoutineGraph(routines).generate(req, today=TODAY)
    assert isinstance(result, ExerciseRoutine)
    assert len(result.routine) >= 1
    assert all(ex.completed == 0 for ex in result.routine)
    assert result.notes == GOOD_OUTPUT["notes"]
    assert len(calls) == 1


def test_prompt_embeds_inputs_and_recent_history(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                                 profile: UserProfile, routine: ExerciseRoutine) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)
    routines.save("u1", "2024-05-30", routine)
    routines.save("u1", "2024-05-31", routine)
    routines.save("someone-else", "2024-05-31", ExerciseRoutine())

    state = RoutineGraph(routines).invoke(generation_input_for("u1", profile, TODAY), today=TODAY)

    assert len(state["history"]) == 2 * len(routine.routine)
    prompt = calls[0]["user"]
    assert "Fitness Goal: general_fitness" in prompt
    assert "Available Time: 60 minutes" in prompt
    assert "Age: 34" in prompt
    assert "Gender: male" in prompt
    assert "Activity Level: moderatelyActive" in prompt
    assert "- Goblet Squat (3 sets, 8-12 reps, 1 day ago)" in prompt
    assert "- Plank (2 sets, 45s reps, 2 days ago)" in prompt
    assert "routine" in calls[0]["schema"]["properties"]


def test_history_is_capped_by_setting(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                      profile: UserProfile, routine: ExerciseRoutine) -> None:
    install_llm(monkeypatch, GOOD_OUTPUT)
    for d in range(1, 32):
        routines.save("u1", f"2024-05-{d:02d}", routine)
    graph = RoutineGraph(routines)
    state = graph.invoke(generation_input_for("u1", profile, TODAY), today=TODAY)
    assert len(state["history"]) == graph.settings.HISTORY_LIMIT * len(routine.routine)
    assert state["history"][-1].days_ago == "30 days ago", "oldest routine (May 1st) is left out"


def test_no_history_still_generates(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                    profile: UserProfile) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)
    RoutineGraph(routines).generate_for_profile("u1", profile, TODAY)
    assert "No exercises recorded yet" in calls[0]["user"]


@pytest.mark.parametrize("dob", ["2030-01-01", "2024-06-01"])
def test_non_positive_age_fails_before_remote_call(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                                   profile: UserProfile, dob: str) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)
    bad = profile.model_copy(update={"date_of_birth": date.fromisoformat(dob)})
    with pytest.raises(InputValidationError):
        RoutineGraph(routines).generate_for_profile("u1", bad, TODAY)
    assert calls == [], "no model call for an invalid birth date"


def test_missing_user_is_authorization_error(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                             profile: UserProfile) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)
    with pytest.raises(AuthorizationError):
        RoutineGraph(routines).generate_for_profile(None, profile, TODAY)
    assert calls == []


def test_model_failure_becomes_generation_error(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                                profile: UserProfile) -> None:
    install_llm(monkeypatch, LLMError("LLM call failed (model='x'): 503 Service Unavailable"))
    with pytest.raises(GenerationError) as exc_info:
        RoutineGraph(routines).generate_for_profile("u1", profile, TODAY)
    assert not isinstance(exc_info.value, RoutineSchemaError)
    assert "503 Service Unavailable" in str(exc_info.value)


@pytest.mark.parametrize("bad_output", [
    {"routine": []},
    {"notes": "forgot the routine"},
    {"routine": [{"exerciseName": "Squat", "sets": "lots", "reps": "5", "restTime": "90s"}]},
    {"routine": [{"exerciseName": "Squat", "sets": 3, "reps": "5"}]},
    {"routine": [{"exerciseName": "Squat", "sets": 3, "reps": "5", "restTime": "90s", "completed": 9}]},
])
def test_schema_mismatch_is_distinct_error(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                           profile: UserProfile, bad_output: Dict[str, Any]) -> None:
    install_llm(monkeypatch, bad_output)
    with pytest.raises(RoutineSchemaError):
        RoutineGraph(routines).generate_for_profile("u1", profile, TODAY)


def test_generation_does_not_persist(monkeypatch: pytest.MonkeyPatch, routines: RoutineStore,
                                     profile: UserProfile) -> None:
    install_llm(monkeypatch, GOOD_OUTPUT)
    RoutineGraph(routines).generate_for_profile("u1", profile, TODAY)
    assert routines.list_all("u1") == []


def test_malformed_history_document_is_skipped(monkeypatch: pytest.MonkeyPatch, doc_store: MemoryDocumentStore,
                                               routines: RoutineStore, profile: UserProfile,
                                               routine: ExerciseRoutine) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)
    routines.save("u1", "2024-05-31", routine)
    doc_store.set(routine_path("u1", "2024-05-01"), {"routine": [{"exerciseName": "Squat", "sets": 3, "reps": 5}]})

    result = RoutineGraph(routines).generate_for_profile("u1", profile, TODAY)

    assert len(result.routine) == len(GOOD_OUTPUT["routine"])
    assert "- Goblet Squat (3 sets, 8-12 reps, 1 day ago)" in calls[0]["user"]
    assert "- Squat" not in calls[0]["user"], "undecodable routine must not reach the prompt"


def test_history_backend_failure_generates_without_history(monkeypatch: pytest.MonkeyPatch,
                                                           routines: RoutineStore, profile: UserProfile) -> None:
    calls = install_llm(monkeypatch, GOOD_OUTPUT)

    def unavailable(user_id, limit):
        raise StoreError("Firestore unavailable")

    monkeypatch.setattr(routines, "recent", unavailable)
    result = RoutineGraph(routines).generate_for_profile("u1", profile, TODAY)

    assert len(result.routine) == len(GOOD_OUTPUT["routine"])
    assert "No exercises recorded yet" in calls[0]["user"]
