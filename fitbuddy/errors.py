from __future__ import annotations


class FitBuddyError(RuntimeError):
    """Base class for errors scoped to a single user action."""


class AuthorizationError(FitBuddyError):
    pass


class InputValidationError(FitBuddyError, ValueError):
    pass


class GenerationError(FitBuddyError):
    pass


class RoutineSchemaError(GenerationError):
    """The model answered, but not with a routine matching the output schema."""


class StoreError(FitBuddyError):
    pass


class UnknownFunctionError(FitBuddyError, KeyError):
    pass
