"""In-memory step history for a single reasoning session."""

import logging

from reasoning_engine.models.thought import (
    HypothesisVerification,
    ThoughtStep,
    ToolPlanEntry,
)

logger = logging.getLogger(__name__)


class ThoughtSequence:
    """Ordered history of thinking steps with branch and context bookkeeping.

    One sequence belongs to one session and is only written by the
    orchestrator that created it. Reads return copies so callers cannot
    reorder the history.
    """

    def __init__(self) -> None:
        self._history: list[ThoughtStep] = []
        self._branches: dict[str, list[ThoughtStep]] = {}
        self._scratch: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._history)

    def add_step(self, step: ThoughtStep) -> None:
        """Record a step in the main history and in its branch, if any."""
        if self._history and step.step_number <= self._history[-1].step_number:
            logger.warning(
                f"Step {step.step_number} recorded after step "
                f"{self._history[-1].step_number}; numbering is not increasing"
            )

        self._history.append(step)

        if step.branch_id:
            self._branches.setdefault(step.branch_id, []).append(step)

        if step.context_update:
            self._scratch[step.context_update.key] = step.context_update.value

    def get_history(self) -> tuple[ThoughtStep, ...]:
        return tuple(self._history)

    def get_branch(self, branch_id: str) -> list[ThoughtStep]:
        return list(self._branches.get(branch_id, []))

    def get_all_branches(self) -> dict[str, list[ThoughtStep]]:
        return {branch_id: list(steps) for branch_id, steps in self._branches.items()}

    def get_revisions(self) -> list[ThoughtStep]:
        return [step for step in self._history if step.is_revision]

    def get_hypotheses(self) -> list[tuple[ThoughtStep, str]]:
        return [(step, step.hypothesis) for step in self._history if step.hypothesis]

    def get_verified_hypotheses(self) -> list[tuple[ThoughtStep, HypothesisVerification]]:
        return [
            (step, step.hypothesis_verification)
            for step in self._history
            if step.hypothesis_verification is not None
        ]

    def get_planned_tools(self) -> list[ToolPlanEntry]:
        """Planned tools deduplicated by name.

        A later entry for the same tool replaces the earlier one outright;
        dependency lists are not merged. The first-seen position is kept.
        """
        unique: dict[str, ToolPlanEntry] = {}
        for step in self._history:
            for entry in step.tool_plan or []:
                unique[entry.tool_name] = entry
        return list(unique.values())

    def get_context(self, key: str) -> str | None:
        return self._scratch.get(key)

    @property
    def context(self) -> dict[str, str]:
        """Snapshot of the scratch context."""
        return dict(self._scratch)
