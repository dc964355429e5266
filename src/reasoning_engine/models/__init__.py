"""Pydantic models for the reasoning engine - the contracts."""

from reasoning_engine.models.plan import (
    Alternative,
    Plan,
    PlanInput,
    PlanMetadata,
    PlanStep,
    Resources,
    RiskAssessment,
    ValidationWarning,
)
from reasoning_engine.models.result import (
    ExecutionMetadata,
    HypothesisResult,
    ReasoningResult,
)
from reasoning_engine.models.session import (
    ReasoningConfig,
    ReasoningRun,
    ReasoningType,
    SessionState,
    SessionStatus,
)
from reasoning_engine.models.thought import (
    ContextUpdate,
    HypothesisVerification,
    ThoughtStep,
    ToolPlanEntry,
)

__all__ = [
    "Alternative",
    "ContextUpdate",
    "ExecutionMetadata",
    "HypothesisResult",
    "HypothesisVerification",
    "Plan",
    "PlanInput",
    "PlanMetadata",
    "PlanStep",
    "ReasoningConfig",
    "ReasoningResult",
    "ReasoningRun",
    "ReasoningType",
    "Resources",
    "RiskAssessment",
    "SessionState",
    "SessionStatus",
    "ThoughtStep",
    "ToolPlanEntry",
    "ValidationWarning",
]
