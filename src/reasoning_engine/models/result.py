"""Reasoning result models - the engine's external contract."""

from typing import Literal

from pydantic import BaseModel, Field

from reasoning_engine.models.plan import Plan
from reasoning_engine.models.thought import ThoughtStep, ToolPlanEntry


class HypothesisResult(BaseModel):
    """A verified hypothesis with its derived confidence."""

    hypothesis: str
    evidence: list[str] = Field(default_factory=list)
    conclusion: Literal["supported", "refuted", "needs_more_data", "inconclusive"]
    confidence: float = Field(ge=0.0, le=1.0)


class ExecutionMetadata(BaseModel):
    """Metadata about how a reasoning session ran."""

    total_steps: int = 0
    branches_explored: int = 0
    hypotheses_tested: int = 0
    tools_planned: int = 0
    execution_time_ms: int = 0
    reasoning_efficiency: float = Field(default=0.0, ge=0.0, le=1.0)


class ReasoningResult(BaseModel):
    """Aggregated output of a reasoning session."""

    thoughts: list[ThoughtStep] = Field(default_factory=list)
    plan: Plan | None = None
    conclusions: list[str] = Field(default_factory=list)
    hypotheses: list[HypothesisResult] = Field(default_factory=list)
    tool_plans: list[ToolPlanEntry] = Field(default_factory=list)
    execution_metadata: ExecutionMetadata = Field(default_factory=ExecutionMetadata)
