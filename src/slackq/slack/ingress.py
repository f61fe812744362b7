"""Slack Events API ingress: acknowledge fast, answer in the background."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Protocol

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from slack_sdk.errors import SlackApiError
from slack_sdk.signature import SignatureVerifier

from .. import __version__
from ..logging import get_logger

if TYPE_CHECKING:
    from slack_sdk.web.async_client import AsyncWebClient

    from ..logging import JSONLLogger

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"<@[^>]+>")
ACK_RESPONSE = "Success."


class QueryResponder(Protocol):
    """Anything that turns a user's text into a reply."""

    async def handle(self, user_query: str, user_id: str | None = None) -> str: ...


def strip_mentions(text: str) -> str:
    """Remove ``<@U123>`` mention markup and surrounding whitespace."""
    return MENTION_PATTERN.sub("", text).strip()


def format_error_reply(error: Exception) -> str:
    return f"Sorry, something went wrong: {error}"


class SlackEventHandler:
    """Handles Events API payloads for app mentions.

    The acknowledgment is returned before the query runs; the answer is
    posted into the mention's thread by a detached task.
    """

    def __init__(
        self,
        responder: QueryResponder,
        slack_client: AsyncWebClient,
        event_logger: JSONLLogger | None = None,
    ) -> None:
        self.responder = responder
        self.slack_client = slack_client
        self.event_logger = event_logger or get_logger()
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending_tasks(self) -> set[asyncio.Task]:
        """Background tasks that have not finished yet."""
        return set(self._tasks)

    async def handle_payload(self, payload: dict[str, Any]) -> str:
        """Return the text to acknowledge the payload with."""
        challenge = payload.get("challenge")
        if challenge:
            return str(challenge)

        event = payload.get("event") or {}
        event_type = event.get("type")
        self.event_logger.log(
            "slack_event",
            user_id=event.get("user"),
            channel_id=event.get("channel"),
            event_type=event_type,
        )

        if event_type == "app_mention":
            self.dispatch(event)

        return ACK_RESPONSE

    def dispatch(self, event: dict[str, Any]) -> asyncio.Task:
        """Start answering a mention without waiting for it."""
        task = asyncio.create_task(self._process_mention(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _process_mention(self, event: dict[str, Any]) -> None:
        user_query = strip_mentions(event.get("text") or "")
        user_id = event.get("user")
        channel = event.get("channel")
        message_ts = event.get("ts")

        try:
            reply = await self.responder.handle(user_query, user_id=user_id)
        except Exception as e:
            logger.exception("Error answering Slack mention")
            reply = format_error_reply(e)

        if not channel:
            logger.warning("Mention event has no channel, reply dropped")
            return
        await self.post_reply(channel, message_ts, reply)

    async def post_reply(self, channel: str, thread_ts: str | None, text: str) -> bool:
        """Post a reply in the thread of ``thread_ts``. Not retried."""
        try:
            await self.slack_client.chat_postMessage(
                channel=channel,
                thread_ts=thread_ts,
                text=text,
            )
        except SlackApiError as e:
            logger.exception("Error posting to Slack thread")
            self.event_logger.log("slack_reply_error", channel_id=channel, error=str(e))
            return False
        except Exception as e:
            # Runs inside a detached task; nothing upstream would see this
            logger.exception("Unexpected error posting to Slack thread")
            self.event_logger.log(
                "slack_reply_error",
                channel_id=channel,
                error=f"{type(e).__name__}: {e}",
            )
            return False
        return True


def create_app(
    handler: SlackEventHandler,
    signing_secret: str | None = None,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """Build the FastAPI app serving ``POST /slack/events``."""
    verifier = SignatureVerifier(signing_secret) if signing_secret else None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        pending = handler.pending_tasks
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        if on_shutdown is not None:
            await on_shutdown()

    app = FastAPI(
        title="SlackQ",
        version=__version__,
        description="Answers Slack mentions from workspace message history",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/slack/events", response_class=PlainTextResponse)
    async def slack_events(request: Request) -> PlainTextResponse:
        body = await request.body()
        if verifier is not None and not verifier.is_valid_request(body, dict(request.headers)):
            raise HTTPException(status_code=401, detail="Invalid Slack signature")

        try:
            payload = json.loads(body)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON payload")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid JSON payload")

        return PlainTextResponse(await handler.handle_payload(payload))

    return app
