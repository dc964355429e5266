"""Reasoning Engine - sequential, planning and hybrid reasoning sessions."""

__version__ = "0.1.0"

from reasoning_engine.exceptions import (
    GenerationFailure,
    ReasoningError,
    SessionFailure,
    UnknownReasoningType,
)

__all__ = [
    "__version__",
    "GenerationFailure",
    "ReasoningError",
    "SessionFailure",
    "UnknownReasoningType",
]
