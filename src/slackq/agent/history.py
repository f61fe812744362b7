"""Per-channel history search with model relevance filtering."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..dates import convert_to_unix_timestamps, extract_date_strings, get_today_date_string
from ..llm import LLMClient, parse_json_response
from ..slack.models import Channel, Message
from .prompts import MESSAGE_RELEVANCE_PROMPT, build_relevance_prompt

if TYPE_CHECKING:
    from ..logging import JSONLLogger
    from ..slack.broker import SlackReader

logger = logging.getLogger(__name__)

MAX_PROMPT_MESSAGES = 50
MAX_RELEVANT_MESSAGES = 5


class HistorySearcher:
    """Finds the messages in one channel most relevant to the instructions."""

    def __init__(
        self,
        reader: SlackReader,
        llm: LLMClient,
        event_logger: JSONLLogger | None = None,
        today: Callable[[], str] = get_today_date_string,
    ) -> None:
        self.reader = reader
        self.llm = llm
        self.event_logger = event_logger
        self.today = today

    async def search(
        self,
        channel: Channel,
        search_instructions: str,
        user_id: str | None = None,
    ) -> list[Message]:
        """Return up to five relevant messages, in the model's order."""
        today = self.today()
        date_range = await extract_date_strings(self.llm, search_instructions, today)
        window = convert_to_unix_timestamps(date_range)

        logger.info(
            f"Searching {channel.name} from {date_range.start_date} to {date_range.end_date} "
            f"({window.oldest} to {window.latest})"
        )

        raw_messages = await self.reader.fetch_history(
            channel.id, window.oldest, window.latest, window.limit
        )
        messages = [Message.from_api(raw) for raw in raw_messages]
        logger.info(f"Found {len(messages)} messages in {channel.name}")

        relevant: list[Message] = []
        if messages:
            relevant = await self._filter_relevant(channel, search_instructions, messages)

        if self.event_logger:
            self.event_logger.log_channel_search(
                channel.id,
                channel.name,
                user_id=user_id,
                start_date=date_range.start_date,
                end_date=date_range.end_date,
                fetched=len(messages),
                relevant=len(relevant),
            )
        return relevant

    async def _filter_relevant(
        self,
        channel: Channel,
        search_instructions: str,
        messages: list[Message],
    ) -> list[Message]:
        prompt = build_relevance_prompt(
            search_instructions,
            channel.name,
            [msg.to_dict() for msg in messages[:MAX_PROMPT_MESSAGES]],
        )
        response = await self.llm.complete(prompt, system=MESSAGE_RELEVANCE_PROMPT)

        try:
            indices = parse_json_response(response)
            if not isinstance(indices, list):
                raise ValueError("expected a JSON array")
        except ValueError as e:
            logger.error(f"Error parsing message relevance response: {e}")
            return []

        relevant = [
            messages[idx]
            for idx in indices
            # bool is an int subclass; true/false are not indices
            if isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < len(messages)
        ][:MAX_RELEVANT_MESSAGES]

        logger.info(f"Found {len(relevant)} relevant messages in {channel.name}")
        return relevant
