# whiteboard_sim/commands.py
"""
Text protocol for wheel commands, as understood by the robot firmware.

Each command is one letter followed by the pulses for the left and right
wheel, separated by whitespace::

    M 456 -789    # move with the pen lifted
    D 120 120     # move with the pen on the board
"""
import logging
from dataclasses import dataclass
from typing import List

from . import constants as const
from .exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WheelCommand:
    """A parsed move or draw command."""

    kind: str  # const.CMD_MOVE or const.CMD_DRAW
    left: int
    right: int

    @property
    def drawing(self) -> bool:
        return self.kind == const.CMD_DRAW

    @property
    def pulses(self) -> List[int]:
        return [self.left, self.right]

    def __str__(self) -> str:
        return f"{self.kind} {self.left} {self.right}"


def _parse_arg(token: str, line_number) -> int:
    try:
        value = int(token)
    except ValueError as exc:
        raise CommandError(
            f"Argument '{token}' is not an integer.", line_number=line_number
        ) from exc
    if not (const.COMMAND_ARG_MIN <= value <= const.COMMAND_ARG_MAX):
        raise CommandError(
            f"Argument {value} is outside "
            f"[{const.COMMAND_ARG_MIN}, {const.COMMAND_ARG_MAX}].",
            line_number=line_number,
        )
    return value


def parse_command(line: str, line_number=None) -> WheelCommand:
    """
    Parse a single command line.

    Args:
        line: The command text, without comment.
        line_number: Optional 1-based line number used in error messages.

    Returns:
        The parsed :class:`WheelCommand`.

    Raises:
        CommandError: If the letter is unknown, the argument count is not two
                      or an argument is not a 16-bit signed integer.
    """
    tokens = line.split()
    if not tokens:
        raise CommandError("Empty command.", line_number=line_number)

    kind = tokens[0].upper()
    if kind not in const.COMMAND_CODES:
        raise CommandError(f"Unknown command '{tokens[0]}'.", line_number=line_number)
    if len(tokens) != 3:
        raise CommandError(
            f"{const.COMMAND_CODES[kind]} takes 2 arguments, got {len(tokens) - 1}.",
            line_number=line_number,
        )

    left = _parse_arg(tokens[1], line_number)
    right = _parse_arg(tokens[2], line_number)
    return WheelCommand(kind=kind, left=left, right=right)


def parse_script(text: str) -> List[WheelCommand]:
    """Parse a script of commands, skipping blank lines and ``#`` comments."""
    commands = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split(const.COMMAND_COMMENT_PREFIX, 1)[0].strip()
        if not line:
            continue
        commands.append(parse_command(line, line_number=line_number))
    logger.debug(f"Parsed {len(commands)} commands.")
    return commands
