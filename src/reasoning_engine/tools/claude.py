"""Anthropic Claude API wrapper with retry logic."""

import asyncio
import json
import logging
import re

from anthropic import APIError, AsyncAnthropic, RateLimitError

from reasoning_engine.config import get_settings

logger = logging.getLogger(__name__)


class ClaudeClient:
    """Wrapper for Anthropic Claude API with retry logic."""

    def __init__(self) -> None:
        settings = get_settings()
        self.client = AsyncAnthropic(api_key=settings.anthropic_api_key)
        self.model = settings.claude_model
        self.max_tokens = settings.claude_max_tokens
        self.max_retries = 3
        self.base_delay = 1.0

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a completion from Claude.

        Args:
            prompt: The user prompt
            system: Optional system prompt
            max_tokens: Override default max tokens

        Returns:
            The generated text response

        Raises:
            APIError: If the API request fails after retries
        """
        messages = [{"role": "user", "content": prompt}]

        for attempt in range(self.max_retries):
            try:
                response = await self.client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens or self.max_tokens,
                    system=system or "",
                    messages=messages,
                )
                return response.content[0].text

            except RateLimitError as e:
                if attempt == self.max_retries - 1:
                    raise
                delay = self.base_delay * (2**attempt)
                logger.warning(f"Rate limited, retrying in {delay}s: {e}")
                await asyncio.sleep(delay)

            except APIError as e:
                if attempt == self.max_retries - 1:
                    raise
                status_code = getattr(e, "status_code", None)
                if status_code and status_code >= 500:
                    delay = self.base_delay * (2**attempt)
                    logger.warning(f"Server error, retrying in {delay}s: {e}")
                    await asyncio.sleep(delay)
                else:
                    raise

        raise RuntimeError("Max retries exceeded")

    async def complete_json(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int | None = None,
    ) -> tuple[dict | None, str]:
        """Generate a completion and extract a JSON object from it.

        Returns:
            Tuple of (parsed object or None, raw response text)
        """
        response = await self.complete(prompt=prompt, system=system, max_tokens=max_tokens)
        return self._parse_json_response(response), response

    @staticmethod
    def _parse_json_response(text: str) -> dict | None:
        """Extract and parse a JSON object from a Claude response.

        Handles JSON wrapped in markdown code blocks or returned as plain text.
        Returns None if no JSON object can be extracted.
        """
        try:
            parsed = json.loads(text.strip())
            return parsed if isinstance(parsed, dict) else None
        except (json.JSONDecodeError, ValueError):
            pass

        code_block_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?\s*```", text, re.DOTALL)
        if code_block_match:
            try:
                parsed = json.loads(code_block_match.group(1).strip())
                return parsed if isinstance(parsed, dict) else None
            except (json.JSONDecodeError, ValueError):
                pass

        return None
