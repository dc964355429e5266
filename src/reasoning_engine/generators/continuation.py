"""Deterministic step generator that needs no model access."""

from reasoning_engine.engine.thought_sequence import ThoughtSequence
from reasoning_engine.generators.base import StepRequest
from reasoning_engine.models.thought import ThoughtStep

PREVIEW_LENGTH = 50


class ContinuationStepGenerator:
    """Continues from the last recorded thought until ``max_steps``.

    Useful for tests, dry runs and deployments without an API key.
    """

    name: str = "continuation"

    async def generate_step(
        self,
        sequence: ThoughtSequence,
        request: StepRequest,
    ) -> ThoughtStep:
        history = sequence.get_history()
        previous = history[-1].thought[:PREVIEW_LENGTH] if history else ""

        return ThoughtStep(
            step_number=request.step_number,
            thought=f"Continuing reasoning from previous step: {previous}...",
            next_needed=request.step_number < request.max_steps,
            total_estimate=request.max_steps,
        )
