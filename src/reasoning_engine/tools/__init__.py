"""External integrations and API wrappers."""

from reasoning_engine.tools.claude import ClaudeClient

__all__ = ["ClaudeClient"]
