"""Thought step models recorded by a reasoning session."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator


class HypothesisVerification(BaseModel):
    """Structured verification of a previously generated hypothesis."""

    hypothesis: str
    evidence: list[str] = Field(default_factory=list)
    conclusion: Literal["supported", "refuted", "needs_more_data"]


class ToolPlanEntry(BaseModel):
    """A planned use of an external tool."""

    tool_name: str
    purpose: str
    expected_output: str = ""
    dependencies: list[str] = Field(
        default_factory=list,
        description="Tools that must run before this one",
    )


class ContextUpdate(BaseModel):
    """A write to the session's scratch context."""

    key: str
    value: str
    reasoning: str = ""


class ThoughtStep(BaseModel):
    """One recorded unit of reasoning output.

    Step 0 is reserved for the seed step synthesized from an initial
    prompt; generated steps are numbered from 1.
    """

    step_number: int = Field(ge=0)
    thought: str
    next_needed: bool
    total_estimate: int = Field(ge=1)

    # Revision
    is_revision: bool | None = None
    revises_step: int | None = None

    # Branching
    branch_origin: int | None = None
    branch_id: str | None = None

    needs_more_steps: bool | None = None

    # Hypothesis testing
    hypothesis: str | None = Field(
        default=None,
        description="Hypothesis generated at this step",
    )
    hypothesis_verification: HypothesisVerification | None = None

    tool_plan: list[ToolPlanEntry] | None = None
    context_update: ContextUpdate | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def _first_step_is_not_a_revision(self) -> "ThoughtStep":
        if self.is_revision and self.step_number <= 1:
            raise ValueError("The first step cannot be a revision")
        return self
