"""Session configuration and lifecycle models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from reasoning_engine.config import get_settings
from reasoning_engine.models.result import ReasoningResult


class ReasoningType(str, Enum):
    """Reasoning modes the orchestrator can drive."""

    SEQUENTIAL = "sequential"
    PLANNING = "planning"
    HYBRID = "hybrid"


class SessionState(str, Enum):
    """State of a reasoning session.

    INITIALIZING: Fresh session, nothing recorded yet
    PLANNING: Building a plan
    THINKING: Requesting and recording sequential steps
    COMPLETED: Result aggregated
    FAILED: Terminated by an error, no result
    """

    INITIALIZING = "initializing"
    PLANNING = "planning"
    THINKING = "thinking"
    COMPLETED = "completed"
    FAILED = "failed"


OutputFormat = Literal["thoughts", "plan", "summary", "conclusions", "full"]


class ReasoningConfig(BaseModel):
    """Configuration for a single reasoning session.

    ``reasoning_type`` is a plain string so that unsupported values reach
    the orchestrator and fail the session instead of failing parsing.
    """

    reasoning_type: str = ReasoningType.SEQUENTIAL.value
    max_steps: int = Field(
        default_factory=lambda: get_settings().reasoning_max_steps,
        ge=1,
    )
    allow_branching: bool = True
    allow_revision: bool = True
    enable_hypothesis_testing: bool = True
    enable_tool_planning: bool = True
    initial_prompt: str | None = None
    output_format: OutputFormat = "full"
    timeout: float | None = Field(
        default_factory=lambda: get_settings().reasoning_step_timeout_seconds,
        gt=0,
        description="Seconds allowed for each step generation call",
    )


class SessionStatus(BaseModel):
    """Lifecycle snapshot of a reasoning session."""

    session_id: str = Field(default_factory=lambda: str(uuid4()))
    state: SessionState = SessionState.INITIALIZING
    reasoning_type: str
    total_steps: int
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    execution_time_ms: int | None = None
    error: str | None = None


@dataclass
class ReasoningRun:
    """Everything a completed session hands back to its caller."""

    result: ReasoningResult
    output: dict[str, Any]
    status: SessionStatus
