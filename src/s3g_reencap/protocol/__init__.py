"""Protocol layer: command table and packet framing."""

from .commands import Command, CommandInfo, COMMAND_TABLE, lookup
from .framing import Packet, PacketBuffer, build_packet
