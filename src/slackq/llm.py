"""Chat-completion client and response parsing helpers.

Every decision point in the query pipeline is a single prompt sent through
an ``LLMClient``. Components depend on the Protocol rather than on Groq so
tests can substitute a fake.
"""

import json
import logging
import time
from typing import Any, Protocol

from groq import AsyncGroq

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"


class LLMClient(Protocol):
    """Anything that can complete a prompt into text."""

    async def complete(self, prompt: str, system: str | None = None) -> str: ...


class GroqLLMClient:
    """Single-turn Groq completions for the query pipeline.

    Each pipeline step sends one system prompt (its instructions) and one
    user prompt (its data); no conversation state is kept between calls.
    """

    def __init__(self, client: AsyncGroq, model: str = DEFAULT_MODEL) -> None:
        self._client = client
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, prompt: str, system: str | None = None) -> str:
        """Return the model's text for ``prompt``, or "" when it sent none."""
        messages: list[dict[str, Any]] = [{"role": "user", "content": prompt}]
        if system:
            messages.insert(0, {"role": "system", "content": system})

        started = time.monotonic()
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
        )
        logger.debug(
            f"{self._model} completed {len(prompt)}-char prompt "
            f"in {(time.monotonic() - started) * 1000:.0f}ms"
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def strip_code_fence(content: str) -> str:
    """Remove a surrounding Markdown code block, if any."""
    text = content.strip()
    if not text.startswith("```"):
        return text

    lines = text.split("\n")[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_json_response(content: str) -> Any:
    """Parse a model response that is supposed to be bare JSON.

    Models sometimes wrap JSON in a code block despite being told not to,
    so the fence is stripped before parsing.

    Raises:
        ValueError: If the content is not valid JSON.
    """
    try:
        return json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in model response: {e}") from e
