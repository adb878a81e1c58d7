"""S3G command table.

The S3G file format carries no length information, so every opcode that can
appear in a file has to be listed here with a rule for sizing its body. The
table is closed-world: anything not listed is unknown and can't be reframed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class Command(IntEnum):
    """Host-to-bot motion and tool commands seen in S3G files."""

    QUEUE_POINT = 129
    SET_POSITION = 130
    FIND_MINS = 131
    FIND_MAXS = 132
    DELAY = 133
    CHANGE_TOOL = 134
    WAIT_FOR_TOOL_READY = 135
    TOOL_ACTION = 136
    ENABLE_DISABLE_AXES = 137
    USER_BLOCK = 138
    QUEUE_POINT_EXT = 139
    SET_POSITION_EXT = 140
    WAIT_FOR_PLATFORM_READY = 141
    QUEUE_POINT_EXT_NEW = 142
    STORE_HOME = 143
    RECALL_HOME = 144


@dataclass(frozen=True)
class Fixed:
    """Body is always ``size`` bytes."""

    size: int

    def describe(self) -> str:
        return f"fixed({self.size})"


@dataclass(frozen=True)
class EmbeddedLength:
    """Body starts with a ``header_size``-byte header whose byte at
    ``count_offset`` gives the number of further bytes to read.
    """

    header_size: int = 3
    count_offset: int = 2

    def describe(self) -> str:
        return f"embedded(header={self.header_size}, count@{self.count_offset})"


@dataclass(frozen=True)
class Unknown:
    """Opcode not implemented; seeing it in input is fatal."""

    def describe(self) -> str:
        return "unknown"


LengthRule = Union[Fixed, EmbeddedLength, Unknown]


@dataclass(frozen=True)
class CommandInfo:
    """Table entry for one opcode."""

    opcode: int
    name: str | None = None
    rule: LengthRule = Unknown()

    @property
    def is_known(self) -> bool:
        return self.name is not None

    def to_dict(self) -> dict:
        return {
            "opcode": self.opcode,
            "hex": f"0x{self.opcode:02X}",
            "name": self.name,
            "length": self.rule.describe(),
        }

    def __repr__(self) -> str:
        return (
            f"CommandInfo(opcode=0x{self.opcode:02X}, "
            f"name={self.name!r}, rule={self.rule.describe()})"
        )


# Body lengths, excluding the opcode byte itself
COMMAND_LENGTHS: dict[Command, LengthRule] = {
    Command.QUEUE_POINT: Fixed(16),
    Command.SET_POSITION: Fixed(12),
    Command.FIND_MINS: Fixed(7),
    Command.FIND_MAXS: Fixed(7),
    Command.DELAY: Fixed(4),
    Command.CHANGE_TOOL: Fixed(1),
    Command.WAIT_FOR_TOOL_READY: Fixed(5),
    Command.TOOL_ACTION: EmbeddedLength(header_size=3, count_offset=2),
    Command.ENABLE_DISABLE_AXES: Fixed(1),
    Command.USER_BLOCK: Fixed(2),
    Command.QUEUE_POINT_EXT: Fixed(24),
    Command.SET_POSITION_EXT: Fixed(20),
    Command.WAIT_FOR_PLATFORM_READY: Fixed(5),
    Command.QUEUE_POINT_EXT_NEW: Fixed(25),
    Command.STORE_HOME: Fixed(1),
    Command.RECALL_HOME: Fixed(1),
}


def build_table(
    lengths: dict[int, tuple[str, LengthRule]],
) -> tuple[CommandInfo, ...]:
    """Expand a sparse ``{opcode: (name, rule)}`` mapping into a full
    256-entry table, filling the gaps with unknown entries.
    """
    for opcode in lengths:
        if not 0 <= opcode <= 0xFF:
            raise ValueError(f"Opcode must be 0-255, got {opcode}")
    table = []
    for opcode in range(256):
        if opcode in lengths:
            name, rule = lengths[opcode]
            table.append(CommandInfo(opcode=opcode, name=name, rule=rule))
        else:
            table.append(CommandInfo(opcode=opcode))
    return tuple(table)


COMMAND_TABLE: tuple[CommandInfo, ...] = build_table(
    {cmd.value: (cmd.name, rule) for cmd, rule in COMMAND_LENGTHS.items()}
)


def lookup(
    opcode: int, table: tuple[CommandInfo, ...] = COMMAND_TABLE
) -> CommandInfo:
    """Return the table entry for *opcode*.

    Raises:
        ValueError: If *opcode* isn't a single byte.
    """
    if not 0 <= opcode <= 0xFF:
        raise ValueError(f"Opcode must be 0-255, got {opcode}")
    return table[opcode]


def known_commands(
    table: tuple[CommandInfo, ...] = COMMAND_TABLE,
) -> list[CommandInfo]:
    """All recognized entries, in opcode order."""
    return [info for info in table if info.is_known]
