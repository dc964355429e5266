"""Planner - builds validated plans and derives scheduling metrics.

The planner is deliberately lenient: malformed dependencies are logged
and reported in the plan metadata, but a plan is always returned.
Metrics degrade to best-effort values instead of raising.
"""

import logging
from collections import Counter
from uuid import uuid4

from reasoning_engine.models.plan import (
    ComplexityLevel,
    Plan,
    PlanInput,
    PlanMetadata,
    PlanStep,
    ValidationWarning,
)

logger = logging.getLogger(__name__)

DEFAULT_PROBLEM = "Create a plan for the given task"

DEFAULT_SUCCESS_METRICS = [
    "Plan is comprehensive",
    "Steps are actionable",
    "Timeline is realistic",
]

# Upper bounds (inclusive) of each complexity bucket
COMPLEXITY_BUCKETS: list[tuple[float, ComplexityLevel]] = [
    (5, "low"),
    (15, "medium"),
    (30, "high"),
]

APPROACH_TIPS: dict[str, list[str]] = {
    "analytical": [
        "Focus on logical reasoning and evidence-based decisions",
        "Document your reasoning at each step for review",
    ],
    "experimental": [
        "Be prepared to iterate and adjust based on results",
        "Keep track of what works and what doesn't",
    ],
    "creative": [
        "Don't be afraid to try unconventional approaches",
        "Consider multiple perspectives and ideas",
    ],
    "systematic": [
        "Follow the steps in order for best results",
        "Complete each step thoroughly before moving on",
    ],
    "hybrid": [
        "Be flexible and adapt your approach as needed",
        "Combine the best aspects of different methods",
    ],
}

# A step with more dependencies than this counts as densely connected
DENSE_DEPENDENCY_THRESHOLD = 2


def default_plan_input(problem: str | None = None) -> PlanInput:
    """Planning-mode input: a single analysis step to build on."""
    return PlanInput(
        problem=problem or DEFAULT_PROBLEM,
        approach="systematic",
        steps=[
            PlanStep(
                step_number=1,
                description="Analyze the problem",
                reasoning="Understanding the problem is crucial for effective planning",
                expected_output="Clear problem definition and requirements",
                success_criteria="Problem is well-defined and understood",
            )
        ],
        success_metrics=list(DEFAULT_SUCCESS_METRICS),
        next_actions=["Begin plan execution"],
    )


def _dependency_levels(steps: list[PlanStep]) -> list[list[int]]:
    """Group step numbers by the level at which their dependencies are met.

    Level 0 holds the dependency-free steps. Each following level holds
    the steps whose dependencies are all in earlier levels. Steps whose
    dependencies can never be met (missing, self or cyclic) are left out.
    """
    visited: set[int] = set()
    levels: list[list[int]] = []

    while True:
        level: list[int] = []
        for step in steps:
            number = step.step_number
            if number in visited or number in level:
                continue
            if all(dep in visited for dep in step.dependencies):
                level.append(number)

        if not level:
            break

        levels.append(level)
        visited.update(level)

    return levels


class Planner:
    """Builds plans and computes their derived metrics."""

    def create_plan(self, plan_input: PlanInput) -> Plan:
        """Build a plan and enrich it with metadata and execution tips.

        Args:
            plan_input: Problem, approach and initial steps

        Returns:
            A planned Plan. Validation issues are recorded in
            ``metadata.validation_warnings``, never raised.
        """
        plan = Plan(**plan_input.model_dump())

        warnings = self.validate(plan)
        score = self.complexity_score(plan)
        metadata = PlanMetadata(
            plan_id=f"plan-{uuid4().hex[:12]}",
            complexity_score=score,
            estimated_complexity=self.complexity(plan),
            critical_path=self.critical_path(plan.steps),
            parallel_groups=self.parallel_groups(plan.steps),
            tool_dependencies=self.tool_dependencies(plan.steps),
            validation_warnings=warnings,
        )

        logger.info(
            f"Planned '{plan.problem[:50]}': {len(plan.steps)} steps, "
            f"complexity={metadata.estimated_complexity} ({score})"
        )

        return plan.model_copy(
            update={
                "metadata": metadata,
                "status": "planned",
                "execution_tips": self.execution_tips(plan),
            }
        )

    def validate(self, plan: Plan) -> list[ValidationWarning]:
        """Check step dependencies and numbering.

        Returns every issue found; each is also logged as a warning.
        """
        warnings: list[ValidationWarning] = []
        known = {step.step_number for step in plan.steps}

        for step in plan.steps:
            for dep in step.dependencies:
                if dep not in known:
                    warnings.append(
                        ValidationWarning(
                            kind="missing_dependency",
                            step_number=step.step_number,
                            dependency=dep,
                            message=(
                                f"Step {step.step_number} depends on "
                                f"non-existent step {dep}"
                            ),
                        )
                    )
                if dep >= step.step_number:
                    warnings.append(
                        ValidationWarning(
                            kind="forward_dependency",
                            step_number=step.step_number,
                            dependency=dep,
                            message=(
                                f"Step {step.step_number} has a forward or "
                                f"self dependency on step {dep}"
                            ),
                        )
                    )

        counts = Counter(step.step_number for step in plan.steps)
        for number, count in counts.items():
            if count > 1:
                warnings.append(
                    ValidationWarning(
                        kind="duplicate_step",
                        step_number=number,
                        message=f"Duplicate step number {number} ({count} occurrences)",
                    )
                )

        for warning in warnings:
            logger.warning(f"Plan validation: {warning.message}")

        return warnings

    def complexity_score(self, plan: Plan) -> float:
        """Weighted count of steps, dependencies, distinct tools and alternatives."""
        step_count = len(plan.steps)
        dependency_count = sum(len(step.dependencies) for step in plan.steps)
        distinct_tools = {tool for step in plan.steps for tool in step.tools}
        return (
            step_count
            + dependency_count
            + 2 * len(distinct_tools)
            + 0.5 * len(plan.alternatives)
        )

    def complexity(self, plan: Plan) -> ComplexityLevel:
        score = self.complexity_score(plan)
        for upper, level in COMPLEXITY_BUCKETS:
            if score <= upper:
                return level
        return "very-high"

    def critical_path(self, steps: list[PlanStep]) -> list[int]:
        """Every step reachable by level-by-level expansion, ascending.

        This is a breadth-level approximation of the longest dependency
        chain, not a weighted longest path.
        """
        reached = {number for level in _dependency_levels(steps) for number in level}
        return sorted(reached)

    def parallel_groups(self, steps: list[PlanStep]) -> list[list[int]]:
        """Levels with more than one step, in discovery order."""
        return [level for level in _dependency_levels(steps) if len(level) > 1]

    def tool_dependencies(self, steps: list[PlanStep]) -> dict[str, list[str]]:
        """Map each tool to the tools used by its step's dependency steps.

        Predecessor tools are concatenated as found, without deduplication.
        """
        by_number: dict[int, PlanStep] = {}
        for step in steps:
            by_number.setdefault(step.step_number, step)

        dependencies: dict[str, list[str]] = {}
        for step in steps:
            for tool in step.tools:
                predecessors = dependencies.setdefault(tool, [])
                for dep in step.dependencies:
                    dep_step = by_number.get(dep)
                    if dep_step is not None:
                        predecessors.extend(dep_step.tools)
        return dependencies

    def execution_tips(self, plan: Plan) -> list[str]:
        """Advisory tips based on approach, complexity and dependency density."""
        tips = list(APPROACH_TIPS.get(plan.approach, []))

        if self.complexity(plan) in ("high", "very-high"):
            tips.append("Consider breaking this into smaller sub-problems")
            tips.append("Regular check-ins and progress reviews are recommended")

        if any(len(step.dependencies) > DENSE_DEPENDENCY_THRESHOLD for step in plan.steps):
            tips.append("Pay careful attention to step dependencies")
            tips.append("Consider using a project management tool to track progress")

        if plan.alternatives:
            tips.append(
                "Keep alternative approaches in mind if the primary plan hits obstacles"
            )
            tips.append("Evaluate alternatives at key decision points")

        return tips
