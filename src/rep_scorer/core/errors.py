"""
Error codes and user-facing messages.

describe_error() is a pure lookup: callers pass the table they want, so
different screens (plan import, workout summary, ...) can word the same
code differently without any shared mutable state.
"""

from typing import Mapping

DEFAULT_ERROR_MESSAGE = "Operation failed"

NO_VALID_PLAN_ITEMS = "NO_VALID_PLAN_ITEMS"
INVALID_PLAN_JSON = "INVALID_PLAN_JSON"
INVALID_RECORD = "INVALID_RECORD"
MISSING_IDENTITY = "MISSING_IDENTITY"
WORKOUT_NOT_FOUND = "WORKOUT_NOT_FOUND"

PLAN_ERROR_MESSAGES: Mapping[str, str] = {
    NO_VALID_PLAN_ITEMS: "Invalid plan: no valid items found",
    INVALID_PLAN_JSON: "Invalid plan: not valid JSON",
    INVALID_RECORD: "Invalid template record",
}

STORE_ERROR_MESSAGES: Mapping[str, str] = {
    INVALID_RECORD: "Stored record is corrupt",
    MISSING_IDENTITY: "Stored record is missing its id fields",
    WORKOUT_NOT_FOUND: "No workout with that id",
}


def describe_error(
    code: str | None,
    messages: Mapping[str, str],
    default: str = DEFAULT_ERROR_MESSAGE,
) -> str:
    """
    Map an error code to a message.

    Args:
        code: Machine error code (may be None)
        messages: Code → message table
        default: Returned when the code is None or not in the table

    Returns:
        The message for the code
    """
    if code is None:
        return default
    return messages.get(code, default)
