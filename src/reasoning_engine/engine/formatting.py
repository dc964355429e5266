"""Output formatting - slices an aggregated result for the caller."""

from typing import Any

from reasoning_engine.models.result import ReasoningResult

_FORMAT_FIELDS: dict[str, tuple[str, ...]] = {
    "thoughts": ("thoughts",),
    "plan": ("plan",),
    "summary": ("conclusions", "hypotheses", "tool_plans"),
    "conclusions": ("conclusions",),
}


def format_reasoning_output(result: ReasoningResult, output_format: str) -> dict[str, Any]:
    """Select the fields of ``result`` that ``output_format`` asks for.

    Nothing is recomputed or copied: values are the result's own objects.
    ``"full"`` and unrecognized formats return every field.
    """
    fields = _FORMAT_FIELDS.get(output_format)
    if fields is None:
        return dict(result)
    return {name: getattr(result, name) for name in fields}
