"""Reasoning core: step history, planner, metrics and orchestration."""

from reasoning_engine.engine.thought_sequence import ThoughtSequence
from reasoning_engine.engine.planner import Planner, default_plan_input
from reasoning_engine.engine.metrics import hypothesis_confidence, reasoning_efficiency
from reasoning_engine.engine.formatting import format_reasoning_output
from reasoning_engine.engine.orchestrator import Orchestrator, ReasoningSession

__all__ = [
    "Orchestrator",
    "Planner",
    "ReasoningSession",
    "ThoughtSequence",
    "default_plan_input",
    "format_reasoning_output",
    "hypothesis_confidence",
    "reasoning_efficiency",
]
