"""Tests for the Planner."""

import logging

import pytest

from reasoning_engine.engine.planner import (
    DEFAULT_PROBLEM,
    DEFAULT_SUCCESS_METRICS,
    Planner,
    default_plan_input,
)
from reasoning_engine.models.plan import Alternative, Plan, PlanInput, PlanStep


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _step(number, deps=None, tools=None):
    """Build a PlanStep for testing."""
    return PlanStep(
        step_number=number,
        description=f"Step {number}",
        reasoning="Needed",
        expected_output="Output",
        success_criteria="Done",
        dependencies=deps or [],
        tools=tools or [],
    )


def _plan(steps, approach="systematic", alternatives=None):
    """Build a Plan for testing."""
    return Plan(
        problem="Test problem",
        approach=approach,
        steps=steps,
        alternatives=alternatives or [],
    )


def _alternative(name="alt"):
    return Alternative(name=name, description="Another way")


@pytest.fixture
def planner():
    return Planner()


# ---------------------------------------------------------------------------
# TestValidation
# ---------------------------------------------------------------------------

class TestValidation:
    """Verify lenient dependency validation."""

    def test_clean_plan_has_no_warnings(self, planner):
        """A well-formed plan validates cleanly."""
        plan = _plan([_step(1), _step(2, [1]), _step(3, [1, 2])])

        assert planner.validate(plan) == []

    def test_missing_dependency_logged_not_raised(self, planner, caplog):
        """A dependency on a non-existent step is a warning, and the plan survives."""
        plan_input = PlanInput(problem="Test", steps=[_step(1), _step(2, [5])])

        with caplog.at_level(logging.WARNING):
            plan = planner.create_plan(plan_input)

        assert len(plan.steps) == 2
        kinds = [w.kind for w in plan.metadata.validation_warnings]
        assert "missing_dependency" in kinds
        assert "non-existent step 5" in caplog.text

    def test_forward_dependency(self, planner):
        """Depending on a later step is flagged."""
        warnings = planner.validate(_plan([_step(1, [2]), _step(2)]))

        assert [(w.kind, w.step_number, w.dependency) for w in warnings] == [
            ("forward_dependency", 1, 2)
        ]

    def test_self_dependency(self, planner):
        """A step depending on itself is caught by the forward rule."""
        warnings = planner.validate(_plan([_step(1, [1])]))

        assert [w.kind for w in warnings] == ["forward_dependency"]

    def test_missing_and_forward_both_reported(self, planner):
        """A missing, larger dependency produces both issues."""
        warnings = planner.validate(_plan([_step(1), _step(2, [5])]))

        assert sorted(w.kind for w in warnings) == [
            "forward_dependency",
            "missing_dependency",
        ]

    def test_duplicate_step_numbers(self, planner):
        """Duplicate step numbers are flagged once per number."""
        warnings = planner.validate(_plan([_step(1), _step(1), _step(2)]))

        assert [(w.kind, w.step_number) for w in warnings] == [("duplicate_step", 1)]


# ---------------------------------------------------------------------------
# TestComplexity
# ---------------------------------------------------------------------------

class TestComplexity:
    """Verify complexity scoring and buckets."""

    def test_empty_plan_scores_zero(self, planner):
        """No steps means zero score and low complexity."""
        plan = _plan([])

        assert planner.complexity_score(plan) == 0
        assert planner.complexity(plan) == "low"

    def test_score_formula(self, planner):
        """Steps + dependencies + 2 x distinct tools + 0.5 x alternatives."""
        plan = _plan(
            [
                _step(1, tools=["search"]),
                _step(2, [1], tools=["search", "sql"]),
                _step(3, [1, 2]),
            ],
            alternatives=[_alternative("a"), _alternative("b"), _alternative("c")],
        )

        # 3 steps + 3 deps + 2 * 2 tools + 0.5 * 3 alternatives
        assert planner.complexity_score(plan) == 11.5
        assert planner.complexity(plan) == "medium"

    @pytest.mark.parametrize(
        "step_count,expected",
        [(5, "low"), (6, "medium"), (15, "medium"), (16, "high"), (30, "high"), (31, "very-high")],
    )
    def test_bucket_boundaries(self, planner, step_count, expected):
        """Bucket upper bounds are inclusive."""
        plan = _plan([_step(n) for n in range(1, step_count + 1)])

        assert planner.complexity(plan) == expected

    def test_monotonic_in_step_count(self, planner):
        """Adding steps never lowers the score."""
        scores = [
            planner.complexity_score(_plan([_step(n) for n in range(1, count + 1)]))
            for count in range(0, 12)
        ]

        assert scores == sorted(scores)


# ---------------------------------------------------------------------------
# TestScheduling
# ---------------------------------------------------------------------------

class TestScheduling:
    """Verify critical path and parallel groups."""

    def test_fan_out(self, planner):
        """Two steps depending on step 1 form one parallel group."""
        steps = [_step(1), _step(2, [1]), _step(3, [1])]

        assert planner.parallel_groups(steps) == [[2, 3]]
        assert planner.critical_path(steps) == [1, 2, 3]

    def test_chain_has_no_parallel_groups(self, planner):
        """A strict chain has nothing to parallelize."""
        steps = [_step(1), _step(2, [1]), _step(3, [2])]

        assert planner.parallel_groups(steps) == []
        assert planner.critical_path(steps) == [1, 2, 3]

    def test_waits_for_all_dependencies(self, planner):
        """A join step is placed only after every dependency is visited."""
        steps = [_step(1), _step(2), _step(3, [1]), _step(4, [2, 3])]

        assert planner.parallel_groups(steps) == [[1, 2]]
        assert planner.critical_path(steps) == [1, 2, 3, 4]

    def test_groups_in_discovery_order(self, planner):
        """Groups come out level by level."""
        steps = [
            _step(1),
            _step(2),
            _step(3, [1]),
            _step(4, [2]),
            _step(5, [3, 4]),
        ]

        assert planner.parallel_groups(steps) == [[1, 2], [3, 4]]

    def test_critical_path_contains_every_step_once(self, planner):
        """Without dependency issues the path is strictly ascending and complete."""
        steps = [_step(4, [2]), _step(1), _step(3, [1]), _step(2, [1]), _step(5, [3, 4])]

        path = planner.critical_path(steps)

        assert path == [1, 2, 3, 4, 5]
        assert all(a < b for a, b in zip(path, path[1:]))

    def test_unreachable_steps_left_out(self, planner):
        """Steps with missing dependencies degrade out of the path."""
        steps = [_step(1), _step(2, [5])]

        assert planner.critical_path(steps) == [1]

    def test_empty_steps(self, planner):
        """No steps means an empty path and no groups."""
        assert planner.critical_path([]) == []
        assert planner.parallel_groups([]) == []


# ---------------------------------------------------------------------------
# TestToolDependencies
# ---------------------------------------------------------------------------

class TestToolDependencies:
    """Verify predecessor tool mapping."""

    def test_predecessor_tools(self, planner):
        """Each tool lists the tools of its step's dependencies."""
        steps = [
            _step(1, tools=["search"]),
            _step(2, tools=["sql"]),
            _step(3, [1, 2], tools=["chart"]),
        ]

        deps = planner.tool_dependencies(steps)

        assert deps == {"search": [], "sql": [], "chart": ["search", "sql"]}

    def test_not_deduplicated(self, planner):
        """Predecessor tools are concatenated as found."""
        steps = [
            _step(1, tools=["search"]),
            _step(2, tools=["search"]),
            _step(3, [1, 2], tools=["chart"]),
        ]

        assert planner.tool_dependencies(steps)["chart"] == ["search", "search"]

    def test_missing_dependency_contributes_nothing(self, planner):
        """Unknown dependency steps are skipped."""
        steps = [_step(1, [9], tools=["chart"])]

        assert planner.tool_dependencies(steps) == {"chart": []}


# ---------------------------------------------------------------------------
# TestExecutionTips
# ---------------------------------------------------------------------------

class TestExecutionTips:
    """Verify advisory tips."""

    def test_approach_tips(self, planner):
        """Each approach contributes its own tips."""
        tips = planner.execution_tips(_plan([_step(1)], approach="experimental"))

        assert tips == [
            "Be prepared to iterate and adjust based on results",
            "Keep track of what works and what doesn't",
        ]

    def test_high_complexity_tips(self, planner):
        """High complexity suggests breaking the problem down."""
        plan = _plan([_step(n) for n in range(1, 20)])

        tips = planner.execution_tips(plan)

        assert "Consider breaking this into smaller sub-problems" in tips

    def test_dense_dependency_tips(self, planner):
        """More than two dependencies on one step adds dependency tips."""
        plan = _plan([_step(1), _step(2), _step(3), _step(4, [1, 2, 3])])

        assert "Pay careful attention to step dependencies" in planner.execution_tips(plan)

    def test_alternative_tips(self, planner):
        """Alternatives add fallback tips."""
        plan = _plan([_step(1)], alternatives=[_alternative()])

        assert "Evaluate alternatives at key decision points" in planner.execution_tips(plan)


# ---------------------------------------------------------------------------
# TestCreatePlan
# ---------------------------------------------------------------------------

class TestCreatePlan:
    """Verify end-to-end plan creation."""

    def test_enriches_without_touching_core_fields(self, planner):
        """Metadata, status and tips are attached; core fields are unchanged."""
        plan_input = PlanInput(
            problem="Ship the release",
            approach="analytical",
            steps=[_step(1, tools=["ci"]), _step(2, [1]), _step(3, [1])],
            success_metrics=["Release is live"],
            next_actions=["Tag the build"],
        )

        plan = planner.create_plan(plan_input)

        assert plan.status == "planned"
        assert plan.problem == "Ship the release"
        assert plan.steps == plan_input.steps
        assert plan.success_metrics == ["Release is live"]
        assert plan.metadata.plan_id.startswith("plan-")
        assert plan.metadata.critical_path == [1, 2, 3]
        assert plan.metadata.parallel_groups == [[2, 3]]
        assert plan.metadata.tool_dependencies == {"ci": []}
        assert plan.metadata.estimated_complexity == "medium"
        assert plan.execution_tips[0] == "Focus on logical reasoning and evidence-based decisions"

    def test_empty_steps_still_valid(self, planner):
        """An empty step list yields a structurally valid plan with degraded metrics."""
        plan = planner.create_plan(PlanInput(problem="Nothing yet"))

        assert plan.steps == []
        assert plan.metadata.critical_path == []
        assert plan.metadata.parallel_groups == []
        assert plan.metadata.complexity_score == 0
        assert plan.metadata.estimated_complexity == "low"

    def test_plan_is_frozen(self, planner):
        """Core fields cannot be reassigned."""
        plan = planner.create_plan(PlanInput(problem="Frozen"))

        with pytest.raises(Exception):
            plan.problem = "Changed"


# ---------------------------------------------------------------------------
# TestDefaultPlanInput
# ---------------------------------------------------------------------------

class TestDefaultPlanInput:
    """Verify the planning-mode default input."""

    def test_defaults(self):
        """One analysis step, systematic approach, default metrics."""
        plan_input = default_plan_input()

        assert plan_input.problem == DEFAULT_PROBLEM
        assert plan_input.approach == "systematic"
        assert [s.description for s in plan_input.steps] == ["Analyze the problem"]
        assert plan_input.success_metrics == DEFAULT_SUCCESS_METRICS
        assert plan_input.next_actions == ["Begin plan execution"]

    def test_uses_given_problem(self):
        """A given problem replaces the default."""
        assert default_plan_input("Reduce churn").problem == "Reduce churn"
