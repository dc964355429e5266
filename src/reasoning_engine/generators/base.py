"""Step generator protocol - the engine's only suspending collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reasoning_engine.engine.thought_sequence import ThoughtSequence
    from reasoning_engine.models.thought import ThoughtStep


@dataclass(frozen=True)
class StepRequest:
    """What a generator is asked to produce.

    Attributes:
        step_number: Number the generated step should carry (1-indexed).
        max_steps: Upper bound on generated steps for the session.
        initial_prompt: The problem statement, if one was given.
        allow_branching: Whether branch fields will be kept.
        allow_revision: Whether revision fields will be kept.
        enable_hypothesis_testing: Whether hypothesis fields will be kept.
        enable_tool_planning: Whether tool plans will be kept.
    """

    step_number: int
    max_steps: int
    initial_prompt: str | None = None
    allow_branching: bool = True
    allow_revision: bool = True
    enable_hypothesis_testing: bool = True
    enable_tool_planning: bool = True


@runtime_checkable
class StepGenerator(Protocol):
    """Protocol every step generator must satisfy.

    Generators read the sequence but never write to it; the orchestrator
    records whatever they return. A dict return value is validated into
    a ThoughtStep.
    """

    @property
    def name(self) -> str: ...

    async def generate_step(
        self,
        sequence: ThoughtSequence,
        request: StepRequest,
    ) -> ThoughtStep | dict[str, Any]: ...
