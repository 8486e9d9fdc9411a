from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable, List, Optional

from pydantic import ValidationError

from fitbuddy.errors import AuthorizationError, InputValidationError, StoreError
from fitbuddy.models.routine import DatedRoutine, ExerciseRoutine
from .document_store import DocumentStore, get_document_store, routine_path, routines_path

logger = logging.getLogger(__name__)

_DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def date_key(day: date | None = None) -> str:
    """YYYY-MM-DD key for a calendar day (today by default)."""
    return (day or date.today()).isoformat()


def check_date_key(value: str) -> str:
    if not isinstance(value, str) or not _DATE_KEY.match(value):
        raise InputValidationError(f"Date must be in YYYY-MM-DD form, got {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise InputValidationError(f"Not a calendar date: {value!r}") from e
    return value


def _require_user(user_id: Optional[str], action: str) -> str:
    if not user_id:
        raise AuthorizationError(f"User must be logged in to {action}.")
    return user_id


def _parse(path: str, data: dict) -> ExerciseRoutine:
    try:
        return ExerciseRoutine.model_validate(data)
    except ValidationError as e:
        raise StoreError(f"Stored routine at {path} is malformed: {e}") from e


class RoutineStore:
    """Routine documents keyed by (user, YYYY-MM-DD). Every write replaces the whole document."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def save(self, user_id: Optional[str], day: str, routine: ExerciseRoutine) -> None:
        uid = _require_user(user_id, "save a routine")
        path = routine_path(uid, check_date_key(day))
        logger.info("Saving routine for user %s on %s (%d exercises)", uid, day, len(routine.routine))
        self.store.set(path, routine.to_document())

    def load(self, user_id: Optional[str], day: str) -> Optional[ExerciseRoutine]:
        uid = _require_user(user_id, "load a routine")
        path = routine_path(uid, check_date_key(day))
        data = self.store.get(path)
        if data is None:
            logger.debug("No routine found for user %s on %s", uid, day)
            return None
        return _parse(path, data)

    def list_all(self, user_id: Optional[str], limit: int | None = None) -> List[DatedRoutine]:
        uid = _require_user(user_id, "list routines")
        docs = self.store.list_collection(routines_path(uid), descending=True, limit=limit)
        out = [DatedRoutine(date=doc_id, routine=_parse(doc_id, data)) for doc_id, data in docs]
        logger.debug("Found %d routines for user %s", len(out), uid)
        return out

    def recent(self, user_id: Optional[str], limit: int) -> List[DatedRoutine]:
        """Most recent `limit` routines, skipping documents that no longer parse."""
        uid = _require_user(user_id, "list routines")
        out: List[DatedRoutine] = []
        for doc_id, data in self.store.list_collection(routines_path(uid), descending=True, limit=limit):
            try:
                out.append(DatedRoutine(date=doc_id, routine=_parse(doc_id, data)))
            except StoreError as e:
                logger.warning("Skipping routine for user %s: %s", uid, e)
        return out

    def update(self, user_id: Optional[str], day: str,
               mutate: Callable[[ExerciseRoutine], ExerciseRoutine]) -> ExerciseRoutine:
        """Read the whole document, apply `mutate`, write the whole document back."""
        current = self.load(user_id, day)
        if current is None:
            raise InputValidationError(f"No routine saved for {day}.")
        updated = mutate(current)
        self.save(user_id, day, updated)
        return updated


def get_routine_store() -> RoutineStore:
    return RoutineStore(get_document_store())
