from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from fitbuddy.config import get_settings
from fitbuddy.errors import AuthorizationError, InputValidationError
from fitbuddy.models import (
    ExerciseHistoryEntry,
    ExerciseRoutine,
    GenerateRoutineInput,
    GenerateRoutineOutput,
    UserProfile,
)
from fitbuddy.services.age import calculate_age
from fitbuddy.services.routine_store import RoutineStore
from .nodes import history_node, prompt_node, generate_node, validate_node


@dataclass
class GraphState:
    request: GenerateRoutineInput | None = None
    history: List[ExerciseHistoryEntry] = field(default_factory=list)
    system_prompt: str = ""
    user_prompt: str = ""
    raw_output: Dict[str, Any] | None = None
    output: GenerateRoutineOutput | None = None


def generation_input_for(user_id: Optional[str], profile: UserProfile, today: date | None = None,
                         available_minutes: float | None = None) -> GenerateRoutineInput:
    """Derive the generation request from a stored profile. Rejects invalid birth dates."""
    if not user_id:
        raise AuthorizationError("Please sign in before generating a routine.")
    age = calculate_age(profile.date_of_birth, today)
    if age <= 0:
        raise InputValidationError("Invalid Date of Birth in profile.")
    minutes = available_minutes or get_settings().DEFAULT_AVAILABLE_MINUTES
    return GenerateRoutineInput(
        fitness_goal=profile.exercise_goal,
        available_time=minutes,
        age=age,
        gender=profile.gender,
        activity_level=profile.activity_level,
        user_id=user_id,
    )


class RoutineGraph:
    """history -> prompt -> generate -> validate. Failures are terminal; nothing is retried."""

    def __init__(self, routines: RoutineStore) -> None:
        self.settings = get_settings()
        self.routines = routines

    def invoke(self, req: GenerateRoutineInput, today: date | None = None) -> Dict[str, Any]:
        if req.age <= 0:
            raise InputValidationError("Invalid Date of Birth in profile.")
        if not req.user_id:
            raise AuthorizationError("Please sign in before generating a routine.")
        today = today or date.today()
        state = GraphState(request=req)
        state.history = history_node(req, self.routines, today, self.settings.HISTORY_LIMIT)
        state.system_prompt, state.user_prompt = prompt_node(req, state.history)
        state.raw_output = generate_node(state.system_prompt, state.user_prompt)
        state.output = validate_node(state.raw_output)
        return state.__dict__

    def generate(self, req: GenerateRoutineInput, today: date | None = None) -> ExerciseRoutine:
        state = self.invoke(req, today=today)
        return state["output"].to_routine()

    def generate_for_profile(self, user_id: Optional[str], profile: UserProfile, today: date | None = None,
                             available_minutes: float | None = None) -> ExerciseRoutine:
        req = generation_input_for(user_id, profile, today, available_minutes)
        return self.generate(req, today=today)
