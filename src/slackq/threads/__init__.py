"""Conversation threads and the ``~`` command surface."""

from .commands import USAGE, CommandKind, ParsedCommand, is_command, parse_command
from .handler import CommandHandler, ThreadManager

__all__ = [
    "USAGE",
    "CommandHandler",
    "CommandKind",
    "ParsedCommand",
    "ThreadManager",
    "is_command",
    "parse_command",
]
