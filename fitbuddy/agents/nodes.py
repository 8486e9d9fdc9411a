from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from pydantic import ValidationError

from fitbuddy.errors import GenerationError, RoutineSchemaError, StoreError
from fitbuddy.llm import chat_json, LLMError
from fitbuddy.models import ExerciseHistoryEntry, GenerateRoutineInput, GenerateRoutineOutput
from fitbuddy.services.history import build_history
from fitbuddy.services.routine_store import RoutineStore

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts" / "jobs"

logger = logging.getLogger(__name__)


def _load_prompt(name: str) -> str:
    path = PROMPTS_DIR / name
    return path.read_text(encoding="utf-8")


def history_node(req: GenerateRoutineInput, routines: RoutineStore, today: date, limit: int) -> List[ExerciseHistoryEntry]:
    try:
        recent = routines.recent(req.user_id, limit)
    except StoreError as e:
        # History only adds context; generate without it
        logger.warning("Could not fetch routine history for user %s: %s", req.user_id, e)
        return []
    history = build_history(recent, today)
    logger.info("Fetched %d exercises from the last %d routines for user %s", len(history), len(recent), req.user_id)
    return history


def _format_history(history: Sequence[ExerciseHistoryEntry]) -> str:
    if not history:
        return "- No exercises recorded yet."
    return "\n".join(f"- {h.exercise_name} ({h.sets} sets, {h.reps} reps, {h.days_ago})" for h in history)


def prompt_node(req: GenerateRoutineInput, history: Sequence[ExerciseHistoryEntry]) -> Tuple[str, str]:
    """Return the (system, user) messages for the generation call."""
    system = _load_prompt("generate_routine_system.md")
    user = _load_prompt("generate_routine.md").format(
        fitness_goal=req.fitness_goal,
        available_time=f"{req.available_time:g}",
        history=_format_history(history),
        age=req.age,
        gender=req.gender,
        activity_level=req.activity_level,
    )
    return system, user


def generate_node(system: str, user: str, temperature: float | None = None) -> Dict[str, Any]:
    try:
        return chat_json(
            schema=GenerateRoutineOutput.model_json_schema(by_alias=True),
            system=system,
            user=user,
            temperature=temperature,
        )
    except LLMError as e:
        logger.error("Routine generation failed: %s", e)
        raise GenerationError(f"Failed to generate exercise routine: {e}") from e


def validate_node(raw: Dict[str, Any]) -> GenerateRoutineOutput:
    try:
        return GenerateRoutineOutput.model_validate(raw)
    except ValidationError as e:
        logger.error("Model output did not match the routine schema: %s", e)
        raise RoutineSchemaError(f"The AI returned a routine in an unexpected format: {e.error_count()} problem(s), "
                                 f"first: {e.errors()[0]['msg']}") from e
