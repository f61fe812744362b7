"""Prompt templates for the query pipeline."""

import json
from typing import Any

SEARCH_INSTRUCTIONS_PROMPT = """You are an expert at converting user queries into specific, actionable search instructions for finding information in Slack conversations.

Given a user's natural language query and their previous context/memory, create clear, specific search instructions that will help find the most relevant information.
You should not fabricate information. Your only goal is to add any relevant context to a query so the user does not have to repeat their preferences or desires.
If the context is empty, just convert the question to a statement like "Find all..." or something similar.

Return ONLY the search instructions as plain text, no additional formatting or explanation."""

CHANNEL_SELECTION_PROMPT = """You are an expert at analyzing search instructions and selecting relevant Slack channels.

Given search instructions and list of channels, select the most relevant channels where the answer is likely to be found.

Consider:
- Channel names and their relevance to the query topic
- Channel purposes/topics if available
- If user mentions specific channels, include those
- If user mentions dates, consider all relevant channels for that timeframe
- Select 1-3 channels maximum to avoid overwhelming searches
- If the user mentions that they are looking in a specific channel, only include that one.

Respond with a JSON array of channel objects: [{"id": "C123", "name": "general", "reason": "why this channel is relevant"}]

CRITICAL: Your response must be valid JSON. Do not add any text or wrap your response in a code block."""

MESSAGE_RELEVANCE_PROMPT = """You are an expert at finding relevant messages in Slack conversations.

Given search instructions and numbered channel messages, identify the most relevant messages that answer or relate to the search criteria.

Return a JSON array of message indices (numbers) for the most relevant messages.
Only include indices of messages that are directly relevant to the search instructions.
Limit to top 5 most relevant messages.

Example: [0, 3, 7, 12, 15]

CRITICAL: Your response must be valid JSON. Do not add any text or wrap your response in a code block."""

ANSWER_PROMPT = """You are an expert at summarizing Slack messages to answer a user's query.

You will be given:
1. A user query
2. Context about the user.
{history_item}{results_number}. Search results from multiple Slack channels containing relevant messages

The search results have this structure:
- Array of channels, each containing:
  - channel_name: The Slack channel name
  - channel_id: The channel ID
  - messages: Array of relevant messages from that channel

Each message contains:
- text: The message content
- ts: Timestamp of the message
- user: User ID who sent the message (may be null for bot messages)
- attachments: Array of attachments with title and original_url

Your task: Generate a clear, helpful response to answer the user's question based on these messages.
Do your best to provide a useful answer, but ask the user to be more specific if the messages don't contain relevant information. Never make up messages or facts.

BONUS 1: If you reference specific messages, you can include message URLs using this format:
{workspace_url}/archives/<channel_id>/<message_ts>

BONUS 2: If you reference specific messages, you can tag someone by using arrow brackets in your response
Ex: <@message.user>

Respond ONLY with the plain text response to the user's query."""


def _history_json(history: list[dict[str, Any]]) -> str:
    return json.dumps(history, ensure_ascii=False)


def build_instructions_prompt(
    user_query: str,
    memory_context: str,
    history: list[dict[str, Any]] | None = None,
) -> str:
    """Build the user prompt for rewriting a query into search instructions."""
    prompt = f'User query: "{user_query}"\n\nUser\'s previous context: {memory_context}'
    if history is not None:
        prompt += f"\n\nConversation History with User: {_history_json(history)}"
    return prompt


def build_channel_selection_prompt(search_instructions: str, channels: list[dict[str, Any]]) -> str:
    return (
        f'Search instructions: "{search_instructions}"\n\n'
        f"Available channels: {json.dumps(channels, indent=2, ensure_ascii=False)}\n\n"
        "Select the most relevant channels for this query:"
    )


def build_relevance_prompt(
    search_instructions: str,
    channel_name: str,
    messages: list[dict[str, Any]],
) -> str:
    """Build the relevance prompt with index-labeled messages."""
    numbered = "\n".join(
        f"{idx}: {json.dumps(msg, ensure_ascii=False)}" for idx, msg in enumerate(messages)
    )
    return (
        f'Search instructions: "{search_instructions}"\n\n'
        f"Channel: {channel_name}\n\n"
        f"Recent messages (with indices):\n{numbered}\n\n"
        "Return the indices of the most relevant messages:"
    )


def build_answer_system_prompt(workspace_url: str, include_history: bool) -> str:
    """Build the system prompt for answer synthesis."""
    return ANSWER_PROMPT.format(
        history_item="3. Your conversation history with the user.\n" if include_history else "",
        results_number=4 if include_history else 3,
        workspace_url=workspace_url.rstrip("/"),
    )


def build_answer_prompt(
    user_query: str,
    memory_context: str,
    results: list[dict[str, Any]],
    history: list[dict[str, Any]] | None = None,
) -> str:
    """Build the user prompt for answer synthesis."""
    parts = [
        f'1. User query: "{user_query}"',
        f"2. Previous context about User from memory: {memory_context}",
    ]
    if history is not None:
        parts.append(f"3. Conversation History with User: {_history_json(history)}")
    parts.append(
        f"{len(parts) + 1}. Relevant Slack Messages: {json.dumps(results, ensure_ascii=False)}"
    )
    return "\n\n".join(parts)
