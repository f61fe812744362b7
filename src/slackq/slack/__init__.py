"""Slack workspace access: channel/message models, reader, and ingress."""

from .broker import BrokerConfig, ComposioSlackReader, SlackReader, ToolExecutionError
from .models import Attachment, Channel, ChannelResult, Message

__all__ = [
    "Attachment",
    "BrokerConfig",
    "Channel",
    "ChannelResult",
    "ComposioSlackReader",
    "Message",
    "SlackReader",
    "ToolExecutionError",
]
