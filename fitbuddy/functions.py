"""Named callables exposed to the UI, mirroring a serverless "callable function" boundary.

Handlers take and return plain JSON-compatible dicts using the camelCase wire schema.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from fitbuddy.agents.graph import RoutineGraph
from fitbuddy.errors import InputValidationError, UnknownFunctionError
from fitbuddy.models import GenerateRoutineInput, GenerateRoutineOutput
from fitbuddy.services.routine_store import RoutineStore, get_routine_store

GENERATE_EXERCISE_ROUTINE = "generateExerciseRoutine"

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any], RoutineStore], Dict[str, Any]]


def _generate_exercise_routine(data: Mapping[str, Any], routines: RoutineStore) -> Dict[str, Any]:
    try:
        req = GenerateRoutineInput.model_validate(dict(data))
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ()))
        raise InputValidationError(f"Invalid generation input ({field}): {err['msg']}") from e
    routine = RoutineGraph(routines).generate(req)
    out = GenerateRoutineOutput(routine=routine.routine, notes=routine.notes)
    return out.model_dump(mode="json", by_alias=True, exclude_none=True)


CALLABLES: Dict[str, Handler] = {
    GENERATE_EXERCISE_ROUTINE: _generate_exercise_routine,
}


def call(name: str, data: Mapping[str, Any], routines: Optional[RoutineStore] = None) -> Dict[str, Any]:
    handler = CALLABLES.get(name)
    if handler is None:
        raise UnknownFunctionError(f"No callable named '{name}'")
    logger.info("Calling %s", name)
    return handler(data, routines or get_routine_store())
