"""Tests for model validation rules."""

import pytest
from pydantic import ValidationError

from reasoning_engine.models.plan import PlanInput
from reasoning_engine.models.session import ReasoningConfig, SessionState, SessionStatus
from reasoning_engine.models.thought import HypothesisVerification, ThoughtStep


class TestThoughtStep:
    """Tests for ThoughtStep validation."""

    def test_first_step_cannot_be_revision(self):
        with pytest.raises(ValidationError, match="first step cannot be a revision"):
            ThoughtStep(
                step_number=1,
                thought="Reconsider",
                next_needed=True,
                total_estimate=3,
                is_revision=True,
            )

    def test_later_step_can_be_revision(self):
        step = ThoughtStep(
            step_number=2,
            thought="Reconsider step 1",
            next_needed=True,
            total_estimate=3,
            is_revision=True,
            revises_step=1,
        )

        assert step.is_revision is True
        assert step.revises_step == 1

    def test_seed_step_number_zero_allowed(self):
        step = ThoughtStep(step_number=0, thought="Seed", next_needed=True, total_estimate=1)

        assert step.step_number == 0

    def test_negative_step_number_rejected(self):
        with pytest.raises(ValidationError):
            ThoughtStep(step_number=-1, thought="x", next_needed=True, total_estimate=1)

    def test_total_estimate_must_be_positive(self):
        with pytest.raises(ValidationError):
            ThoughtStep(step_number=1, thought="x", next_needed=True, total_estimate=0)

    def test_optional_fields_default_to_none(self):
        step = ThoughtStep(step_number=1, thought="x", next_needed=False, total_estimate=1)

        assert step.branch_id is None
        assert step.hypothesis is None
        assert step.tool_plan is None
        assert step.context_update is None
        assert step.timestamp is not None


class TestHypothesisVerification:
    def test_rejects_unknown_conclusion(self):
        with pytest.raises(ValidationError):
            HypothesisVerification(hypothesis="H", conclusion="maybe")


class TestReasoningConfig:
    """Tests for ReasoningConfig defaults."""

    def test_defaults(self):
        config = ReasoningConfig()

        assert config.reasoning_type == "sequential"
        assert config.max_steps == 20
        assert config.allow_branching is True
        assert config.allow_revision is True
        assert config.enable_hypothesis_testing is True
        assert config.enable_tool_planning is True
        assert config.initial_prompt is None
        assert config.output_format == "full"
        assert config.timeout == 30.0

    def test_unknown_reasoning_type_accepted_at_parse_time(self):
        """Unsupported types are rejected by the orchestrator, not the model."""
        assert ReasoningConfig(reasoning_type="quantum").reasoning_type == "quantum"

    def test_max_steps_must_be_positive(self):
        with pytest.raises(ValidationError):
            ReasoningConfig(max_steps=0)

    def test_rejects_unknown_output_format(self):
        with pytest.raises(ValidationError):
            ReasoningConfig(output_format="verbose")


class TestSessionStatus:
    def test_new_status(self):
        status = SessionStatus(reasoning_type="sequential", total_steps=5)

        assert status.state is SessionState.INITIALIZING
        assert status.session_id
        assert status.completed_at is None
        assert status.error is None


class TestPlanInput:
    def test_defaults(self):
        plan_input = PlanInput(problem="P")

        assert plan_input.approach == "systematic"
        assert plan_input.steps == []
        assert plan_input.alternatives == []
        assert plan_input.risk_assessment is None

    def test_rejects_unknown_approach(self):
        with pytest.raises(ValidationError):
            PlanInput(problem="P", approach="random")
