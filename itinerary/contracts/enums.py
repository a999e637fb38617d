"""Enumerations shared across itinerary contracts."""

from enum import Enum


class ErrorCode(str, Enum):
    """Failure kinds reported by the leg manager."""
    VALIDATION = "validation"
    LOCKED = "locked"
    NOT_AUTHENTICATED = "not_authenticated"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"


class StatusLevel(str, Enum):
    """Severity of the message shown in the session status slot."""
    INFO = "info"
    ERROR = "error"
