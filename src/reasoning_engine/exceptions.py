"""Custom exceptions for the reasoning engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reasoning_engine.models.session import SessionStatus


class ReasoningError(Exception):
    """Base class for reasoning engine errors."""


class GenerationFailure(ReasoningError):
    """Raised when the step generator fails, times out or is cancelled."""

    def __init__(self, step_number: int, reason: str) -> None:
        self.step_number = step_number
        self.reason = reason
        super().__init__(f"Step generation failed at step {step_number}: {reason}")


class UnknownReasoningType(ReasoningError):
    """Raised when a session is configured with an unsupported reasoning type."""

    def __init__(self, reasoning_type: str) -> None:
        self.reasoning_type = reasoning_type
        super().__init__(f"Unknown reasoning type: {reasoning_type}")


class InvalidTransition(ReasoningError):
    """Raised when the session state machine is driven out of order."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid session transition: {current} -> {target}")


class SessionFailure(ReasoningError):
    """Raised once per failed session, wrapping whatever went wrong.

    The original exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        phase: str,
        message: str,
        status: SessionStatus | None = None,
    ) -> None:
        self.phase = phase
        self.message = message
        self.status = status
        super().__init__(f"Reasoning session failed during {phase}: {message}")
