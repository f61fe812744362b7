"""Model-driven selection of channels to search."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..llm import LLMClient, parse_json_response
from ..slack.models import Channel
from .prompts import CHANNEL_SELECTION_PROMPT, build_channel_selection_prompt

if TYPE_CHECKING:
    from ..logging import JSONLLogger
    from ..slack.broker import SlackReader

logger = logging.getLogger(__name__)

CHANNEL_LIST_LIMIT = 100
MAX_SELECTED_CHANNELS = 3


class NoChannelsError(RuntimeError):
    """The workspace listing returned no channels."""


class ChannelSelector:
    """Picks up to three channels likely to contain the answer."""

    def __init__(
        self,
        reader: SlackReader,
        llm: LLMClient,
        event_logger: JSONLLogger | None = None,
    ) -> None:
        self.reader = reader
        self.llm = llm
        self.event_logger = event_logger

    async def list_channels(self) -> list[Channel]:
        raw_channels = await self.reader.list_channels(limit=CHANNEL_LIST_LIMIT)
        return [Channel.from_api(raw) for raw in raw_channels]

    async def select(self, search_instructions: str, user_id: str | None = None) -> list[Channel]:
        """Select relevant channels for the search instructions.

        Raises:
            NoChannelsError: If the workspace has no channels.
        """
        channels = await self.list_channels()
        logger.info(f"Found {len(channels)} total channels")
        if self.event_logger:
            self.event_logger.log("channels_listed", user_id=user_id, count=len(channels))

        if not channels:
            raise NoChannelsError("Could not find any channels.")

        prompt = build_channel_selection_prompt(
            search_instructions, [ch.to_dict() for ch in channels]
        )
        response = await self.llm.complete(prompt, system=CHANNEL_SELECTION_PROMPT)

        try:
            selected = self._parse_selection(response, channels)
        except ValueError as e:
            logger.error(f"Error parsing channel selection response, using first 3 channels: {e}")
            selected = channels[:MAX_SELECTED_CHANNELS]

        logger.info(f"Selected {len(selected)} relevant channels: {[ch.name for ch in selected]}")
        if self.event_logger:
            self.event_logger.log(
                "channels_selected",
                user_id=user_id,
                channels=[ch.name for ch in selected],
            )
        return selected

    def _parse_selection(self, response: str, channels: list[Channel]) -> list[Channel]:
        """Map the model's JSON array onto channels, in the model's order.

        Raises:
            ValueError: If the response is not a JSON array.
        """
        data = parse_json_response(response)
        if not isinstance(data, list):
            raise ValueError("expected a JSON array")

        by_id = {ch.id: ch for ch in channels}
        selected: list[Channel] = []
        for item in data:
            channel = self._to_channel(item, by_id)
            if channel is not None:
                selected.append(channel)
            if len(selected) >= MAX_SELECTED_CHANNELS:
                break
        return selected

    def _to_channel(self, item: Any, by_id: dict[str, Channel]) -> Channel | None:
        if not isinstance(item, dict) or not item.get("id"):
            logger.warning(f"Skipping invalid channel selection item: {item}")
            return None

        channel_id = str(item["id"])
        if channel_id in by_id:
            return by_id[channel_id]
        return Channel(
            id=channel_id,
            name=str(item.get("name", "")),
            purpose=item.get("purpose") if isinstance(item.get("purpose"), str) else None,
            topic=item.get("topic") if isinstance(item.get("topic"), str) else None,
        )
