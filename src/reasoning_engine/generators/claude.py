"""Claude-backed step generator."""

import json
import logging

from pydantic import ValidationError

from reasoning_engine.engine.thought_sequence import ThoughtSequence
from reasoning_engine.generators.base import StepRequest
from reasoning_engine.models.thought import ThoughtStep
from reasoning_engine.tools.claude import ClaudeClient

logger = logging.getLogger(__name__)

# How many recent steps are shown to the model
HISTORY_WINDOW = 8

STEP_SYSTEM_PROMPT = (
    "You are a careful step-by-step reasoner. You produce exactly one "
    "reasoning step at a time as a JSON object. Output only valid JSON."
)

STEP_PROMPT = """Problem:
{problem}

## Reasoning so far

{history}

## Working context

{context}

## Your task

Write reasoning step {step_number} of at most {max_steps}.
Set "next_needed" to false once the reasoning has reached a conclusion.

Respond with a JSON object:
{{
    "thought": "Your reasoning for this step",
    "next_needed": true | false,
    "total_estimate": <current estimate of total steps>{optional_fields}
}}

Respond ONLY with the JSON object, no other text."""

_OPTIONAL_FIELDS = {
    "allow_revision": (
        '"is_revision": true | false,\n'
        '    "revises_step": <step number being reconsidered, if revising>'
    ),
    "allow_branching": (
        '"branch_id": "<name of an alternative line of reasoning, if branching>",\n'
        '    "branch_origin": <step number the branch starts from>'
    ),
    "enable_hypothesis_testing": (
        '"hypothesis": "<a testable claim, if you are stating one>",\n'
        '    "hypothesis_verification": {"hypothesis": "...", "evidence": ["..."], '
        '"conclusion": "supported" | "refuted" | "needs_more_data"}'
    ),
    "enable_tool_planning": (
        '"tool_plan": [{"tool_name": "...", "purpose": "...", '
        '"expected_output": "...", "dependencies": ["..."]}]'
    ),
}


class ClaudeStepGenerator:
    """Asks Claude for the next reasoning step as JSON.

    Replies that are not a JSON step are recorded as a plain, final
    thought rather than failing the session.
    """

    name: str = "claude"

    def __init__(self, claude: ClaudeClient | None = None) -> None:
        self.claude = claude or ClaudeClient()

    def _build_prompt(self, sequence: ThoughtSequence, request: StepRequest) -> str:
        history = sequence.get_history()[-HISTORY_WINDOW:]
        history_text = "\n".join(
            f"{step.step_number}. {step.thought}" for step in history
        ) or "No steps yet."

        context = sequence.context
        context_text = "\n".join(
            f"- {key}: {value}" for key, value in context.items()
        ) or "Empty."

        optional = [
            text
            for flag, text in _OPTIONAL_FIELDS.items()
            if getattr(request, flag)
        ]
        optional_fields = "".join(f",\n    {text}" for text in optional)

        return STEP_PROMPT.format(
            problem=request.initial_prompt or "Reason about the task at hand.",
            history=history_text,
            context=context_text,
            step_number=request.step_number,
            max_steps=request.max_steps,
            optional_fields=optional_fields,
        )

    async def generate_step(
        self,
        sequence: ThoughtSequence,
        request: StepRequest,
    ) -> ThoughtStep:
        prompt = self._build_prompt(sequence, request)
        data, response = await self.claude.complete_json(
            prompt=prompt, system=STEP_SYSTEM_PROMPT
        )
        if data is not None:
            data["step_number"] = request.step_number
            data.setdefault("total_estimate", request.max_steps)
            try:
                return ThoughtStep.model_validate(data)
            except ValidationError as e:
                logger.warning(
                    f"Step {request.step_number} payload did not validate: {e}"
                )
                thought = data.get("thought")
                if isinstance(thought, str) and thought:
                    return self._plain_step(thought, request)
                return self._plain_step(json.dumps(data), request)

        logger.warning(
            f"Step {request.step_number}: no JSON in response, "
            f"recording as a final thought"
        )
        return self._plain_step(response.strip(), request)

    @staticmethod
    def _plain_step(thought: str, request: StepRequest) -> ThoughtStep:
        return ThoughtStep(
            step_number=request.step_number,
            thought=thought,
            next_needed=False,
            total_estimate=request.max_steps,
        )
