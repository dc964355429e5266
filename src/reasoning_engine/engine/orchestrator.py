"""Orchestrator - drives reasoning sessions through an explicit state machine.

Each call to ``Orchestrator.run`` builds a fresh ``ReasoningSession`` with
its own ThoughtSequence, so one orchestrator can serve many sessions
without sharing state between them.

Session states:
    initializing -> thinking                -> completed   (sequential)
    initializing -> planning                -> completed   (planning)
    initializing -> planning -> thinking    -> completed   (hybrid)
    any non-terminal state                  -> failed
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from pydantic import ValidationError

from reasoning_engine.engine.formatting import format_reasoning_output
from reasoning_engine.engine.metrics import (
    PLANNING_EFFICIENCY,
    hypothesis_confidence,
    reasoning_efficiency,
)
from reasoning_engine.engine.planner import Planner, default_plan_input
from reasoning_engine.engine.thought_sequence import ThoughtSequence
from reasoning_engine.exceptions import (
    GenerationFailure,
    InvalidTransition,
    SessionFailure,
    UnknownReasoningType,
)
from reasoning_engine.generators.base import StepGenerator, StepRequest
from reasoning_engine.generators.continuation import ContinuationStepGenerator
from reasoning_engine.models.plan import Plan, PlanStep
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
from reasoning_engine.models.thought import ThoughtStep, ToolPlanEntry

logger = logging.getLogger(__name__)

CheckpointFn = Callable[[ThoughtStep, ThoughtSequence], Awaitable[None]]

_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.INITIALIZING: frozenset(
        {SessionState.THINKING, SessionState.PLANNING, SessionState.FAILED}
    ),
    SessionState.PLANNING: frozenset(
        {SessionState.THINKING, SessionState.COMPLETED, SessionState.FAILED}
    ),
    SessionState.THINKING: frozenset({SessionState.COMPLETED, SessionState.FAILED}),
    SessionState.COMPLETED: frozenset(),
    SessionState.FAILED: frozenset(),
}

# Step fields that are dropped when the matching capability is disabled
_CAPABILITY_FIELDS: dict[str, tuple[str, ...]] = {
    "allow_branching": ("branch_id", "branch_origin"),
    "allow_revision": ("is_revision", "revises_step"),
    "enable_hypothesis_testing": ("hypothesis", "hypothesis_verification"),
    "enable_tool_planning": ("tool_plan",),
}


class ReasoningSession:
    """The mutable state of one reasoning session."""

    def __init__(self, config: ReasoningConfig) -> None:
        self.config = config
        self.sequence = ThoughtSequence()
        self.status = SessionStatus(
            reasoning_type=config.reasoning_type,
            total_steps=config.max_steps,
        )
        self._started = time.monotonic()

    @property
    def state(self) -> SessionState:
        return self.status.state

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._started) * 1000)

    def transition(self, target: SessionState) -> None:
        """Move to ``target``, refusing moves the state machine does not allow."""
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(self.state.value, target.value)

        logger.debug(
            f"Session {self.status.session_id}: "
            f"{self.state.value} -> {target.value}"
        )
        self.status.state = target

        if target in (SessionState.COMPLETED, SessionState.FAILED):
            self.status.completed_at = datetime.now(UTC)
            self.status.execution_time_ms = self.elapsed_ms()

    def fail(self, error: str) -> None:
        self.status.error = error
        if self.state is not SessionState.FAILED:
            self.transition(SessionState.FAILED)


class Orchestrator:
    """Runs sequential, planning and hybrid reasoning sessions.

    The step generator is the only call that can suspend. Each call is
    bounded by ``config.timeout`` and by an optional cancellation event;
    either one fails the session without retrying.
    """

    def __init__(
        self,
        generator: StepGenerator | None = None,
        planner: Planner | None = None,
    ) -> None:
        self.generator = generator or ContinuationStepGenerator()
        self.planner = planner or Planner()

    async def run(
        self,
        config: ReasoningConfig,
        *,
        cancel_event: asyncio.Event | None = None,
        checkpoint_fn: CheckpointFn | None = None,
    ) -> ReasoningRun:
        """Run one reasoning session to completion.

        Args:
            config: Session configuration
            cancel_event: Optional token; setting it cancels the pending
                generator call and fails the session
            checkpoint_fn: Optional coroutine called after each recorded
                sequential step

        Returns:
            ReasoningRun with the aggregated result, the formatted output
            and the final session status

        Raises:
            SessionFailure: If anything goes wrong during the session
        """
        session = ReasoningSession(config)
        logger.info(
            f"Session {session.status.session_id} starting: "
            f"type={config.reasoning_type}, max_steps={config.max_steps}"
        )

        try:
            result = await self._dispatch(session, cancel_event, checkpoint_fn)
        except asyncio.CancelledError:
            session.fail("Session cancelled")
            logger.warning(f"Session {session.status.session_id} cancelled")
            raise
        except Exception as e:
            phase = session.state.value
            session.fail(str(e))
            logger.error(
                f"Session {session.status.session_id} failed during {phase}: {e}"
            )
            raise SessionFailure(phase, str(e), status=session.status) from e

        session.transition(SessionState.COMPLETED)
        metadata = result.execution_metadata
        logger.info(
            f"Session {session.status.session_id} completed: "
            f"{metadata.total_steps} steps, "
            f"efficiency={metadata.reasoning_efficiency:.2f}, "
            f"{session.status.execution_time_ms}ms"
        )

        return ReasoningRun(
            result=result,
            output=format_reasoning_output(result, config.output_format),
            status=session.status,
        )

    async def _dispatch(
        self,
        session: ReasoningSession,
        cancel_event: asyncio.Event | None,
        checkpoint_fn: CheckpointFn | None,
    ) -> ReasoningResult:
        try:
            reasoning_type = ReasoningType(session.config.reasoning_type)
        except ValueError:
            raise UnknownReasoningType(session.config.reasoning_type) from None

        if reasoning_type is ReasoningType.SEQUENTIAL:
            session.transition(SessionState.THINKING)
            return await self._run_sequential(session, cancel_event, checkpoint_fn)

        session.transition(SessionState.PLANNING)
        planning = self._run_planning(session)
        if reasoning_type is ReasoningType.PLANNING:
            return planning

        session.transition(SessionState.THINKING)
        sequential = await self._run_sequential(session, cancel_event, checkpoint_fn)
        return _combine_hybrid(planning, sequential, session.elapsed_ms())

    # ------------------------------------------------------------------
    # Sequential mode
    # ------------------------------------------------------------------

    async def _run_sequential(
        self,
        session: ReasoningSession,
        cancel_event: asyncio.Event | None,
        checkpoint_fn: CheckpointFn | None,
    ) -> ReasoningResult:
        config = session.config
        sequence = session.sequence
        thoughts: list[ThoughtStep] = []

        async def record(step: ThoughtStep) -> None:
            sequence.add_step(step)
            thoughts.append(step)
            if checkpoint_fn is not None:
                await checkpoint_fn(step, sequence)

        if config.initial_prompt:
            await record(
                ThoughtStep(
                    step_number=0,
                    thought=f"Starting reasoning process: {config.initial_prompt}",
                    next_needed=True,
                    total_estimate=config.max_steps,
                )
            )

        step_number = 1
        continue_thinking = True

        while continue_thinking and step_number <= config.max_steps:
            step = await self._generate_step(session, step_number, cancel_event)
            step = _apply_capabilities(step, config)
            await record(step)

            logger.debug(
                f"Step {step_number}/{config.max_steps} recorded "
                f"(next_needed={step.next_needed})"
            )
            continue_thinking = step.next_needed

            if config.allow_branching and step.branch_id:
                _explore_branch(step, sequence)

            step_number += 1

        total_steps = step_number - 1
        hypotheses = [
            HypothesisResult(
                hypothesis=verification.hypothesis,
                evidence=list(verification.evidence),
                conclusion=verification.conclusion,
                confidence=hypothesis_confidence(verification),
            )
            for _, verification in sequence.get_verified_hypotheses()
        ]
        tool_plans = sequence.get_planned_tools()

        return ReasoningResult(
            thoughts=thoughts,
            conclusions=[step.thought for step in thoughts if not step.next_needed],
            hypotheses=hypotheses,
            tool_plans=tool_plans,
            execution_metadata=ExecutionMetadata(
                total_steps=total_steps,
                branches_explored=len(sequence.get_all_branches()),
                hypotheses_tested=len(hypotheses),
                tools_planned=len(tool_plans),
                execution_time_ms=session.elapsed_ms(),
                reasoning_efficiency=reasoning_efficiency(thoughts, total_steps),
            ),
        )

    async def _generate_step(
        self,
        session: ReasoningSession,
        step_number: int,
        cancel_event: asyncio.Event | None,
    ) -> ThoughtStep:
        """Request one step, bounded by the timeout and the cancel event."""
        config = session.config
        request = StepRequest(
            step_number=step_number,
            max_steps=config.max_steps,
            initial_prompt=config.initial_prompt,
            allow_branching=config.allow_branching,
            allow_revision=config.allow_revision,
            enable_hypothesis_testing=config.enable_hypothesis_testing,
            enable_tool_planning=config.enable_tool_planning,
        )

        if cancel_event is not None and cancel_event.is_set():
            raise GenerationFailure(step_number, "cancelled")

        call = asyncio.ensure_future(
            self.generator.generate_step(session.sequence, request)
        )
        waiters: set[asyncio.Future] = {call}
        if cancel_event is not None:
            waiters.add(asyncio.ensure_future(cancel_event.wait()))

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=config.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()

        # Cancellation wins over a call that finished in the same round
        cancelled = cancel_event is not None and cancel_event.is_set()
        if cancelled or call not in done:
            await asyncio.gather(call, return_exceptions=True)
            if cancelled:
                raise GenerationFailure(step_number, "cancelled")
            raise GenerationFailure(step_number, f"timed out after {config.timeout}s")

        error = call.exception()
        if error is not None:
            raise GenerationFailure(step_number, f"{type(error).__name__}: {error}") from error

        payload = call.result()
        if isinstance(payload, ThoughtStep):
            if payload.step_number == step_number:
                return payload
            payload = payload.model_dump()

        if isinstance(payload, dict) and payload.get("step_number") != step_number:
            logger.warning(
                f"Generator returned step {payload.get('step_number')} when asked for "
                f"step {step_number}; renumbering"
            )
            payload = {**payload, "step_number": step_number}

        try:
            return ThoughtStep.model_validate(payload)
        except ValidationError as e:
            raise GenerationFailure(step_number, f"invalid step payload: {e}") from e

    # ------------------------------------------------------------------
    # Planning mode
    # ------------------------------------------------------------------

    def _run_planning(self, session: ReasoningSession) -> ReasoningResult:
        plan = self.planner.create_plan(default_plan_input(session.config.initial_prompt))
        step_count = len(plan.steps)

        thoughts = [
            _project_plan_step(step, index, step_count)
            for index, step in enumerate(plan.steps)
        ]
        tool_plans = _tool_plans_from_plan(plan)

        return ReasoningResult(
            thoughts=thoughts,
            plan=plan,
            conclusions=list(plan.success_metrics),
            tool_plans=tool_plans,
            execution_metadata=ExecutionMetadata(
                total_steps=step_count,
                branches_explored=len(plan.alternatives),
                hypotheses_tested=0,
                tools_planned=len(tool_plans),
                execution_time_ms=session.elapsed_ms(),
                reasoning_efficiency=PLANNING_EFFICIENCY,
            ),
        )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _apply_capabilities(step: ThoughtStep, config: ReasoningConfig) -> ThoughtStep:
    """Drop the step fields of every capability the session disabled."""
    update: dict[str, None] = {}
    for flag, fields in _CAPABILITY_FIELDS.items():
        if getattr(config, flag):
            continue
        for name in fields:
            if getattr(step, name) is not None:
                update[name] = None

    if not update:
        return step

    logger.debug(f"Step {step.step_number}: dropping disabled fields {sorted(update)}")
    return step.model_copy(update=update)


def _explore_branch(step: ThoughtStep, sequence: ThoughtSequence) -> None:
    """Note a branch. Branches are recorded only, never re-run."""
    logger.info(
        f"Exploring branch '{step.branch_id}' from step {step.branch_origin}: "
        f"{len(sequence.get_branch(step.branch_id))} steps recorded"
    )


def _project_plan_step(step: PlanStep, index: int, step_count: int) -> ThoughtStep:
    """Express a plan step as a thought so every mode formats the same way."""
    tool_plan = [
        ToolPlanEntry(
            tool_name=tool,
            purpose=step.description,
            expected_output=step.expected_output,
        )
        for tool in step.tools
    ]
    return ThoughtStep(
        step_number=index + 1,
        thought=f"Step {step.step_number}: {step.description} - {step.reasoning}",
        next_needed=index < step_count - 1,
        total_estimate=step_count,
        tool_plan=tool_plan or None,
    )


def _tool_plans_from_plan(plan: Plan) -> list[ToolPlanEntry]:
    """Tool plans for every tool a plan step names, one per tool name."""
    unique: dict[str, ToolPlanEntry] = {}
    for step in plan.steps:
        for tool in step.tools:
            unique[tool] = ToolPlanEntry(
                tool_name=tool,
                purpose=step.description,
                expected_output=step.expected_output,
            )
    return list(unique.values())


def _combine_hybrid(
    planning: ReasoningResult,
    sequential: ReasoningResult,
    execution_time_ms: int,
) -> ReasoningResult:
    """Merge a planning pass and a sequential pass, planning first."""
    plan_meta = planning.execution_metadata
    seq_meta = sequential.execution_metadata

    return ReasoningResult(
        thoughts=planning.thoughts + sequential.thoughts,
        plan=planning.plan,
        conclusions=planning.conclusions + sequential.conclusions,
        hypotheses=sequential.hypotheses,
        tool_plans=planning.tool_plans + sequential.tool_plans,
        execution_metadata=ExecutionMetadata(
            total_steps=plan_meta.total_steps + seq_meta.total_steps,
            branches_explored=max(plan_meta.branches_explored, seq_meta.branches_explored),
            hypotheses_tested=seq_meta.hypotheses_tested,
            tools_planned=plan_meta.tools_planned + seq_meta.tools_planned,
            execution_time_ms=execution_time_ms,
            reasoning_efficiency=(
                plan_meta.reasoning_efficiency + seq_meta.reasoning_efficiency
            ) / 2,
        ),
    )
