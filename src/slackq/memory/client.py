"""HTTP client for the Zep memory/knowledge-graph service."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from .models import InteractionMessage

logger = logging.getLogger(__name__)


class MemoryServiceError(Exception):
    """The memory service could not complete a request."""


class MemoryService(Protocol):
    """Operations the assistant needs from the memory service."""

    async def ensure_user(self, user_id: str) -> None: ...

    async def create_thread(self, thread_id: str, user_id: str) -> None: ...

    async def get_user_context(self, thread_id: str) -> str | None: ...

    async def get_messages(self, thread_id: str) -> list[dict[str, Any]]: ...

    async def add_messages(self, thread_id: str, messages: list[InteractionMessage]) -> None: ...


@dataclass
class MemoryConfig:
    """Configuration for the memory service."""

    api_key: str | None = None
    base_url: str = "https://api.getzep.com/api/v2"
    timeout: float = 30.0


class ZepMemoryClient:
    """MemoryService backed by Zep Cloud's REST API."""

    def __init__(
        self,
        config: MemoryConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or MemoryConfig()
        self._client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        allow_404: bool = False,
    ) -> dict[str, Any] | None:
        """Send a request and decode the JSON body.

        Returns None for a 404 when ``allow_404`` is set.
        """
        headers = {"Authorization": f"Api-Key {self.config.api_key or ''}"}
        try:
            response = await self._client.request(
                method, self._url(path), json=json, headers=headers
            )
        except httpx.RequestError as e:
            raise MemoryServiceError(f"{method} {path} failed: {e}") from e

        if allow_404 and response.status_code == 404:
            return None
        if not response.is_success:
            raise MemoryServiceError(f"{method} {path} failed: HTTP {response.status_code}")

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise MemoryServiceError(f"{method} {path} returned invalid JSON") from e
        return data if isinstance(data, dict) else {}

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        """Get a user record, or None if the user does not exist."""
        return await self._request("GET", f"users/{user_id}", allow_404=True)

    async def add_user(self, user_id: str) -> None:
        await self._request("POST", "users", json={"user_id": user_id})

    async def ensure_user(self, user_id: str) -> None:
        """Create the user record if it does not exist yet."""
        if await self.get_user(user_id) is None:
            logger.info(f"Creating memory user {user_id}")
            await self.add_user(user_id)

    async def create_thread(self, thread_id: str, user_id: str) -> None:
        await self._request(
            "POST", "threads", json={"thread_id": thread_id, "user_id": user_id}
        )

    async def get_user_context(self, thread_id: str) -> str | None:
        """Get the context block summarizing what is known about the thread's user."""
        data = await self._request("GET", f"threads/{thread_id}/context")
        return (data or {}).get("context")

    async def get_messages(self, thread_id: str) -> list[dict[str, Any]]:
        data = await self._request("GET", f"threads/{thread_id}/messages")
        messages = (data or {}).get("messages") or []
        return [msg for msg in messages if isinstance(msg, dict)]

    async def add_messages(self, thread_id: str, messages: list[InteractionMessage]) -> None:
        await self._request(
            "POST",
            f"threads/{thread_id}/messages",
            json={"messages": [msg.to_dict() for msg in messages]},
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
