"""FastAPI routes for reasoning sessions and plan analysis."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from reasoning_engine import __version__
from reasoning_engine.config import get_settings
from reasoning_engine.engine.orchestrator import Orchestrator
from reasoning_engine.engine.planner import Planner
from reasoning_engine.exceptions import SessionFailure, UnknownReasoningType
from reasoning_engine.generators.base import StepGenerator
from reasoning_engine.generators.claude import ClaudeStepGenerator
from reasoning_engine.generators.continuation import ContinuationStepGenerator
from reasoning_engine.models.plan import Plan, PlanInput
from reasoning_engine.models.result import ExecutionMetadata
from reasoning_engine.models.session import ReasoningConfig, SessionStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependency injection
_orchestrator: Orchestrator | None = None
_planner: Planner | None = None


class ReasoningResponse(BaseModel):
    """Response for a completed reasoning session."""

    output: dict[str, Any]
    execution_metadata: ExecutionMetadata
    session: SessionStatus


def _build_generator() -> StepGenerator:
    """Create the step generator selected in settings.

    Without an Anthropic API key the continuation generator is used so the
    service still starts.
    """
    settings = get_settings()
    if settings.step_generator == "continuation":
        return ContinuationStepGenerator()
    if not settings.anthropic_api_key:
        logger.warning(
            "ANTHROPIC_API_KEY is not set; falling back to the continuation step generator"
        )
        return ContinuationStepGenerator()
    return ClaudeStepGenerator()


def get_planner() -> Planner:
    """Get or create planner instance."""
    global _planner
    if _planner is None:
        _planner = Planner()
    return _planner


def get_orchestrator() -> Orchestrator:
    """Get or create orchestrator instance.

    The orchestrator holds no session state, so a single instance is
    shared across requests.
    """
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = Orchestrator(generator=_build_generator(), planner=get_planner())
    return _orchestrator


@router.get("/health")
async def health(
    orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)],
) -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__,
        "step_generator": orchestrator.generator.name,
    }


@router.post("/reasoning", response_model=ReasoningResponse)
async def run_reasoning(
    config: ReasoningConfig,
    orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)],
) -> ReasoningResponse:
    """Run a reasoning session and return the requested view of its result."""
    try:
        run = await orchestrator.run(config)
    except SessionFailure as e:
        if isinstance(e.__cause__, UnknownReasoningType):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    return ReasoningResponse(
        output=run.output,
        execution_metadata=run.result.execution_metadata,
        session=run.status,
    )


@router.post("/plans", response_model=Plan)
async def create_plan(
    plan_input: PlanInput,
    planner: Annotated[Planner, Depends(get_planner)],
) -> Plan:
    """Build a plan and attach its scheduling metrics."""
    return planner.create_plan(plan_input)
