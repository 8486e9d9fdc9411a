from .document_store import (
    DocumentStore,
    MemoryDocumentStore,
    FirestoreDocumentStore,
    get_document_store,
)
from .profile_store import ProfileStore, get_profile_store, parse_profile
from .routine_store import RoutineStore, get_routine_store, date_key
from .routine_ops import (
    toggle_completion,
    set_completed_sets,
    log_set,
    add_exercise,
    remove_exercise,
    completion_status,
    completion_level,
)
from .history import build_history, days_ago_label
from .age import calculate_age
from .export import to_csv, to_markdown, to_pdf

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "FirestoreDocumentStore",
    "get_document_store",
    "ProfileStore",
    "get_profile_store",
    "parse_profile",
    "RoutineStore",
    "get_routine_store",
    "date_key",
    "toggle_completion",
    "set_completed_sets",
    "log_set",
    "add_exercise",
    "remove_exercise",
    "completion_status",
    "completion_level",
    "build_history",
    "days_ago_label",
    "calculate_age",
    "to_csv",
    "to_markdown",
    "to_pdf",
]
