"""Result types for rule steps and action processing.

Result objects replace exceptions for control flow: every step either
succeeds or fails with a rejection code and a human-readable message.
"""

from dataclasses import dataclass, field
from enum import Enum

from .events import AnyGameEvent


class RejectionCode(str, Enum):
    NOT_CURRENT_PLAYER = "NOT_CURRENT_PLAYER"
    INVALID_ALLOWANCE = "INVALID_ALLOWANCE"
    INSUFFICIENT_RESOURCES = "INSUFFICIENT_RESOURCES"
    INVALID_BUILD_SPOT = "INVALID_BUILD_SPOT"
    INVALID_MOVE = "INVALID_MOVE"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass
class ProcessResult:
    """Result of dispatching an action.

    On success ``events`` is the commit set. On failure it is always empty
    and ``error_code``/``error_message`` say why.
    """

    events: list[AnyGameEvent] = field(default_factory=list)
    success: bool = True
    error_code: RejectionCode | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls, events: list[AnyGameEvent] | None = None) -> "ProcessResult":
        """Create a successful result carrying the commit set."""
        return cls(events=events or [], success=True)

    @classmethod
    def failure(cls, code: RejectionCode, message: str) -> "ProcessResult":
        """Create a failure result with error details."""
        return cls(
            events=[],
            success=False,
            error_code=code,
            error_message=message,
        )


@dataclass
class StepResult:
    """Outcome of a single rule step."""

    is_valid: bool = True
    error_code: RejectionCode | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "StepResult":
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: RejectionCode, message: str) -> "StepResult":
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )
