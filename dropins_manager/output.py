"""Console output for dropins-manager.

All user-facing text goes through :func:`message` so that verbosity and
color are controlled in one place.
"""

import sys
from enum import Enum, IntEnum
from typing import TextIO


class MessageType(Enum):
    """Kind of message, used for coloring and stream selection."""

    NORMAL = "normal"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"


class VerbosityLevel(IntEnum):
    """Minimum ``-v`` count required for a message to be shown."""

    ALWAYS = 0
    VERBOSE = 1
    EXTRA_VERBOSE = 2
    DEBUG = 3


_COLORS = {
    MessageType.NORMAL: "",
    MessageType.INFO: "\033[36m",
    MessageType.SUCCESS: "\033[32m",
    MessageType.WARNING: "\033[33m",
    MessageType.ERROR: "\033[31m",
    MessageType.DEBUG: "\033[90m",
}
_RESET = "\033[0m"


class OutputManager:
    """Holds the output settings for the running process."""

    def __init__(self, verbosity: int = 0, use_color: bool = False):
        self.verbosity = verbosity
        self.use_color = use_color

    def should_show(self, level: VerbosityLevel) -> bool:
        return self.verbosity >= level

    def stream_for(self, msg_type: MessageType) -> TextIO:
        if msg_type in (MessageType.WARNING, MessageType.ERROR):
            return sys.stderr
        return sys.stdout

    def format(self, text: str, msg_type: MessageType) -> str:
        color = _COLORS.get(msg_type, "")
        if not self.use_color or not color:
            return text
        return f"{color}{text}{_RESET}"

    def emit(self, text: str, msg_type: MessageType, level: VerbosityLevel) -> None:
        if not self.should_show(level):
            return
        stream = self.stream_for(msg_type)
        print(self.format(text, msg_type), file=stream)


_output = OutputManager()


def get_output() -> OutputManager:
    """Return the process-wide output manager."""
    return _output


def message(
    text: str,
    msg_type: MessageType = MessageType.NORMAL,
    level: VerbosityLevel = VerbosityLevel.ALWAYS,
) -> None:
    """Print *text* if the current verbosity allows it.

    Args:
        text: Message to print
        msg_type: Kind of message (controls color and stream)
        level: Verbosity level required to show the message
    """
    _output.emit(text, msg_type, level)
