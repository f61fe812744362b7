"""SlackQ: conversational search over Slack message history."""

__version__ = "0.1.0"
