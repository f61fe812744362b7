"""Parser for the ``~`` command grammar.

Grammar::

    ~help
    ~thread
    ~thread -c
    ~thread -l
    ~thread -s <id>

Parsing is pure: the result says what to do, or which error text to
return, without touching any state.
"""

from dataclasses import dataclass
from enum import Enum

COMMAND_PREFIX = "~"
THREAD_COMMAND = "~thread"
HELP_COMMAND = "~help"

ACCEPTED_FLAGS = ("c", "l", "s")

USAGE = """~thread <flag>
    -c: start a new thread
    -l: list threads
    -s <id>: switch to thread with id"""

INVALID_COMMAND = "Invalid command."
ONE_FLAG_ONLY = "Only one flag per run is allowed."
MULTIPLE_FLAGS_IN_DASH = "Multiple flags in one dash not allowed. Use one flag per dash."
INVALID_FLAG_FORMAT = "Invalid flag format."
SWITCH_NEEDS_ID = "Flag -s requires an ID argument."


class CommandKind(Enum):
    """What a parsed command asks for."""

    HELP = "help"
    CREATE = "create"
    LIST = "list"
    SWITCH = "switch"
    ERROR = "error"


@dataclass(frozen=True)
class ParsedCommand:
    """Result of parsing a command line.

    ``thread_id`` is set for SWITCH; ``message`` is set for ERROR.
    """

    kind: CommandKind
    thread_id: str | None = None
    message: str | None = None

    @classmethod
    def error(cls, message: str) -> "ParsedCommand":
        return cls(kind=CommandKind.ERROR, message=message)


def is_command(text: str) -> bool:
    """Check whether input should go to the command handler instead of search."""
    return text.startswith(COMMAND_PREFIX)


def invalid_flag(flag: str) -> str:
    return f"Invalid flag: -{flag}. Accepted flags are: -c, -l, -s"


def unexpected_argument(token: str) -> str:
    return f"Unexpected argument: {token}"


def parse_thread_args(tokens: list[str]) -> ParsedCommand:
    """Parse the tokens following ``~thread``."""
    kind: CommandKind | None = None
    thread_id: str | None = None

    i = 0
    while i < len(tokens):
        token = tokens[i]

        if not token.startswith("-"):
            return ParsedCommand.error(unexpected_argument(token))

        if kind is not None:
            return ParsedCommand.error(ONE_FLAG_ONLY)

        if len(token) == 1:
            return ParsedCommand.error(INVALID_FLAG_FORMAT)
        if len(token) > 2:
            return ParsedCommand.error(MULTIPLE_FLAGS_IN_DASH)

        flag = token[1]
        if flag not in ACCEPTED_FLAGS:
            return ParsedCommand.error(invalid_flag(flag))

        if flag == "c":
            kind = CommandKind.CREATE
        elif flag == "l":
            kind = CommandKind.LIST
        else:
            if i + 1 >= len(tokens):
                return ParsedCommand.error(SWITCH_NEEDS_ID)
            i += 1
            thread_id = tokens[i]
            if thread_id.startswith("-"):
                return ParsedCommand.error(ONE_FLAG_ONLY)
            kind = CommandKind.SWITCH

        i += 1

    if kind is None:
        return ParsedCommand(kind=CommandKind.HELP)

    return ParsedCommand(kind=kind, thread_id=thread_id)


def parse_command(text: str) -> ParsedCommand:
    """Parse a full command line such as ``~thread -s abc``."""
    if text.startswith(THREAD_COMMAND):
        return parse_thread_args(text[len(THREAD_COMMAND):].split())

    if text.startswith(HELP_COMMAND):
        return ParsedCommand(kind=CommandKind.HELP)

    return ParsedCommand.error(INVALID_COMMAND)
