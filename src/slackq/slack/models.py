"""Data models for Slack channels and messages."""

from dataclasses import dataclass, field
from typing import Any


def _nested_value(raw: Any) -> str | None:
    """Slack returns purpose/topic as {"value": ...}; accept plain strings too."""
    if isinstance(raw, dict):
        value = raw.get("value")
        return value or None
    if isinstance(raw, str):
        return raw or None
    return None


@dataclass(frozen=True)
class Channel:
    """A channel the assistant may search.

    Attributes:
        id: Slack channel ID (e.g. 'C0123ABC').
        name: Channel name without the leading '#'.
        purpose: Optional purpose text.
        topic: Optional topic text.
    """

    id: str
    name: str
    purpose: str | None = None
    topic: str | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Channel":
        """Build from a conversations.list channel object."""
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            purpose=_nested_value(raw.get("purpose")),
            topic=_nested_value(raw.get("topic")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "purpose": self.purpose,
            "topic": self.topic,
        }


@dataclass(frozen=True)
class Attachment:
    """A link attachment on a message."""

    title: str | None = None
    original_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "original_url": self.original_url}


@dataclass(frozen=True)
class Message:
    """A normalized Slack message.

    ``user`` is None for bot messages.
    """

    text: str
    ts: str
    user: str | None = None
    attachments: list[Attachment] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Message":
        """Build from a conversations.history message object."""
        attachments = [
            Attachment(title=att.get("title"), original_url=att.get("original_url"))
            for att in raw.get("attachments") or []
            if isinstance(att, dict)
        ]
        return cls(
            text=raw.get("text") or "",
            ts=str(raw.get("ts", "")),
            user=raw.get("user"),
            attachments=attachments,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "ts": self.ts,
            "user": self.user,
            "attachments": [att.to_dict() for att in self.attachments],
        }


@dataclass
class ChannelResult:
    """Relevant messages found in one channel."""

    channel_name: str
    channel_id: str
    messages: list[Message] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel_name": self.channel_name,
            "channel_id": self.channel_id,
            "messages": [msg.to_dict() for msg in self.messages],
        }
