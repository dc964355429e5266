"""Plan models produced by the planner."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Approach = Literal["analytical", "experimental", "creative", "systematic", "hybrid"]
ComplexityLevel = Literal["low", "medium", "high", "very-high"]


class PlanStep(BaseModel):
    """A single step of a dependency-ordered plan."""

    model_config = ConfigDict(frozen=True)

    step_number: int
    description: str
    reasoning: str
    expected_output: str
    success_criteria: str
    tools: list[str] = Field(default_factory=list)
    dependencies: list[int] = Field(
        default_factory=list,
        description="Step numbers this step depends on (should be smaller)",
    )
    estimated_time: str | None = None


class Alternative(BaseModel):
    """An alternative approach to the primary plan."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    use_when: str = ""


class RiskAssessment(BaseModel):
    """Risks that could derail the plan and how to handle them."""

    model_config = ConfigDict(frozen=True)

    major_risks: list[str] = Field(default_factory=list)
    mitigations: list[str] = Field(default_factory=list)
    fallback_plans: list[str] = Field(default_factory=list)


class Resources(BaseModel):
    """Resource requirements for executing a plan."""

    model_config = ConfigDict(frozen=True)

    tools_required: list[str] = Field(default_factory=list)
    data_required: list[str] = Field(default_factory=list)
    time_estimate: str = ""
    skills_required: list[str] = Field(default_factory=list)


class ValidationWarning(BaseModel):
    """A non-fatal plan-shape issue found during validation."""

    kind: Literal["missing_dependency", "forward_dependency", "duplicate_step"]
    step_number: int
    dependency: int | None = None
    message: str


class PlanMetadata(BaseModel):
    """Derived scheduling metrics attached to a plan by the planner."""

    plan_id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    complexity_score: float
    estimated_complexity: ComplexityLevel
    critical_path: list[int] = Field(default_factory=list)
    parallel_groups: list[list[int]] = Field(default_factory=list)
    tool_dependencies: dict[str, list[str]] = Field(default_factory=dict)
    validation_warnings: list[ValidationWarning] = Field(default_factory=list)


class PlanInput(BaseModel):
    """What the planner is given to build a plan from."""

    problem: str
    approach: Approach = "systematic"
    steps: list[PlanStep] = Field(default_factory=list)
    alternatives: list[Alternative] = Field(default_factory=list)
    risk_assessment: RiskAssessment | None = None
    resources: Resources | None = None
    success_metrics: list[str] = Field(default_factory=list)
    next_actions: list[str] = Field(default_factory=list)


class Plan(BaseModel):
    """A structured, dependency-ordered problem-solving plan.

    Core fields are fixed once the planner builds the plan. The planner
    attaches ``metadata``, ``status`` and ``execution_tips`` through
    ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    problem: str
    approach: Approach
    steps: list[PlanStep] = Field(default_factory=list)
    alternatives: list[Alternative] = Field(default_factory=list)
    risk_assessment: RiskAssessment | None = None
    resources: Resources | None = None
    success_metrics: list[str] = Field(default_factory=list)
    next_actions: list[str] = Field(default_factory=list)

    # Enrichment
    metadata: PlanMetadata | None = None
    status: Literal["draft", "planned"] = "draft"
    execution_tips: list[str] = Field(default_factory=list)
