"""Slack read operations executed through the Composio tool broker."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

LIST_CHANNELS_TOOL = "SLACK_LIST_ALL_CHANNELS"
FETCH_HISTORY_TOOL = "SLACK_FETCH_CONVERSATION_HISTORY"


class ToolExecutionError(Exception):
    """A broker tool call failed in transport or reported failure."""


class SlackReader(Protocol):
    """Read-only access to a Slack workspace."""

    async def list_channels(self, limit: int = 100) -> list[dict[str, Any]]: ...

    async def fetch_history(
        self,
        channel_id: str,
        oldest: int,
        latest: int,
        limit: int,
    ) -> list[dict[str, Any]]: ...


@dataclass
class BrokerConfig:
    """Configuration for the Composio tool broker."""

    api_key: str | None = None
    base_url: str = "https://backend.composio.dev/api/v3"
    user_id: str = "dog"
    timeout: float = 30.0


class ComposioSlackReader:
    """SlackReader that executes Composio Slack tools over HTTP.

    Each call is attempted once; failures raise ToolExecutionError.
    """

    def __init__(
        self,
        config: BrokerConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or BrokerConfig()
        self._client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

    async def execute(self, tool_slug: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Execute a broker tool and return its ``data`` payload."""
        url = f"{self.config.base_url.rstrip('/')}/tools/execute/{tool_slug}"
        headers = {"x-api-key": self.config.api_key or ""}
        body = {"user_id": self.config.user_id, "arguments": arguments}
        logger.debug(f"Executing {tool_slug} with {arguments}")

        try:
            response = await self._client.post(url, json=body, headers=headers)
        except httpx.RequestError as e:
            raise ToolExecutionError(f"{tool_slug} request failed: {e}") from e

        if not response.is_success:
            raise ToolExecutionError(f"{tool_slug} failed: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ToolExecutionError(f"{tool_slug} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise ToolExecutionError(f"{tool_slug} returned an unexpected payload")

        if payload.get("successful") is False:
            raise ToolExecutionError(f"{tool_slug} failed: {payload.get('error') or 'unknown error'}")

        return payload.get("data") or {}

    async def list_channels(self, limit: int = 100) -> list[dict[str, Any]]:
        data = await self.execute(LIST_CHANNELS_TOOL, {"limit": limit})
        channels = data.get("channels") or []
        return [ch for ch in channels if isinstance(ch, dict)]

    async def fetch_history(
        self,
        channel_id: str,
        oldest: int,
        latest: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        data = await self.execute(
            FETCH_HISTORY_TOOL,
            {
                "channel": channel_id,
                "oldest": str(oldest),
                "latest": str(latest),
                "limit": limit,
            },
        )
        messages = data.get("messages") or []
        return [msg for msg in messages if isinstance(msg, dict)]

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
