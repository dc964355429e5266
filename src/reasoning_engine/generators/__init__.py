"""Step generators that produce thoughts for the orchestrator."""

from reasoning_engine.generators.base import StepGenerator, StepRequest
from reasoning_engine.generators.claude import ClaudeStepGenerator
from reasoning_engine.generators.continuation import ContinuationStepGenerator

__all__ = [
    "ClaudeStepGenerator",
    "ContinuationStepGenerator",
    "StepGenerator",
    "StepRequest",
]
