"""Reconstruct wire framing for an S3G command stream.

The reframer pulls one command at a time from a binary source, sizes it with
the command table, and pushes exactly one packet to the sink before looking at
the next byte. There is no lookahead and no batching, so output order always
matches input order and a failure never leaves a partial packet behind.

Usage::

    with open("part.s3g", "rb") as src, open("part.es3g", "wb") as dst:
        stats = Reframer(src, dst).run()
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from .errors import (
    ErrorContext,
    IOFailure,
    OversizedPayloadError,
    ShortWriteError,
    TableInconsistencyError,
    TruncatedInputError,
    UnknownCommandError,
)
from .protocol.commands import (
    COMMAND_TABLE,
    CommandInfo,
    EmbeddedLength,
    Fixed,
    lookup,
)
from .protocol.framing import MAX_PAYLOAD, Packet, PacketBuffer

logger = logging.getLogger(__name__)


@dataclass
class ReframeStats:
    """Running totals for one reframing pass."""

    commands: int = 0
    bytes_read: int = 0
    bytes_written: int = 0

    def to_dict(self) -> dict:
        return {
            "commands": self.commands,
            "bytes_read": self.bytes_read,
            "bytes_written": self.bytes_written,
        }


class Reframer:
    """Turns an unframed S3G stream into encapsulated packets.

    Args:
        source: Binary stream to read commands from.
        sink: Binary stream to write packets to.
        table: 256-entry command table; defaults to :data:`COMMAND_TABLE`.
    """

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        table: tuple[CommandInfo, ...] = COMMAND_TABLE,
    ) -> None:
        if len(table) != 256:
            raise ValueError(f"Command table must have 256 entries, got {len(table)}")
        self._source = source
        self._sink = sink
        self._table = table
        self._buffer = PacketBuffer()
        self._command = 0
        self._length = 0
        self.stats = ReframeStats()

    def _context(self) -> ErrorContext:
        return ErrorContext(
            bytes_read=self.stats.bytes_read,
            command=self._command,
            length=self._length,
        )

    def _read(self, size: int) -> bytes:
        """Read up to *size* bytes, stopping early only at end of input."""
        data = bytearray()
        while len(data) < size:
            try:
                chunk = self._source.read(size - len(data))
            except OSError as exc:
                raise IOFailure("reading", self._context()) from exc
            if chunk is None:
                # Non-blocking source with nothing ready; only b"" is end of input
                raise IOFailure("reading: source returned no data", self._context())
            if not chunk:
                break
            data += chunk
            self.stats.bytes_read += len(chunk)
        return bytes(data)

    def _write(self, packet: bytes) -> None:
        try:
            written = self._sink.write(packet)
            flush = getattr(self._sink, "flush", None)
            if flush is not None:
                flush()
        except OSError as exc:
            raise IOFailure("writing", self._context()) from exc
        # Buffered and text streams may return None after taking everything;
        # from any other sink None means nothing was written.
        if written is None:
            if not isinstance(self._sink, (io.BufferedIOBase, io.TextIOBase)):
                raise ShortWriteError("packet failed to write", self._context())
        elif written != len(packet):
            raise ShortWriteError("packet failed to write", self._context())
        self.stats.bytes_written += len(packet)

    def _read_body(self, info: CommandInfo) -> bytes:
        rule = info.rule
        if isinstance(rule, Fixed):
            self._length = rule.size
            if rule.size < 0:
                raise TableInconsistencyError(
                    "table contains unexpected negative length", self._context()
                )
            if rule.size > MAX_PAYLOAD:
                raise TableInconsistencyError(
                    "table contains bogus length", self._context()
                )
            body = self._read(rule.size)
            if len(body) != rule.size:
                raise TruncatedInputError("truncated packet body", self._context())
            return body

        if isinstance(rule, EmbeddedLength):
            if not 0 <= rule.count_offset < rule.header_size <= MAX_PAYLOAD:
                raise TableInconsistencyError(
                    "table contains bogus length", self._context()
                )
            header = self._read(rule.header_size)
            if len(header) != rule.header_size:
                label = (info.name or "").lower().replace("_", " ")
                raise TruncatedInputError(
                    f"truncated {label} command header", self._context()
                )
            count = header[rule.count_offset]
            self._length = count
            if rule.header_size + count > MAX_PAYLOAD:
                raise OversizedPayloadError(
                    "embedded length exceeds maximum payload", self._context()
                )
            rest = self._read(count)
            if len(rest) != count:
                raise TruncatedInputError("truncated packet body", self._context())
            return header + rest

        raise TableInconsistencyError(
            "table has no length rule for command", self._context()
        )

    def step(self) -> Packet | None:
        """Reframe one command.

        Returns:
            The packet written, or ``None`` at a clean end of input.

        Raises:
            ReframeError: On any read, sizing, or write failure.
        """
        opcode = self._read(1)
        if not opcode:
            return None

        self._command = opcode[0]
        self._length = 0
        info = lookup(self._command, self._table)
        if not info.is_known:
            raise UnknownCommandError("encountered unknown command", self._context())

        body = self._read_body(info)
        self._write(self._buffer.pack(self._command, body))
        self.stats.commands += 1

        packet = Packet(command=self._command, payload=body)
        logger.debug("%s %r", info.name, packet)
        return packet

    def __iter__(self) -> Iterator[Packet]:
        while True:
            packet = self.step()
            if packet is None:
                return
            yield packet

    def run(self) -> ReframeStats:
        """Reframe until the input is exhausted at a command boundary."""
        for _ in self:
            pass
        return self.stats


def reencapsulate(
    data: bytes, table: tuple[CommandInfo, ...] = COMMAND_TABLE
) -> bytes:
    """Reframe an in-memory S3G blob and return the packet stream."""
    sink = io.BytesIO()
    Reframer(io.BytesIO(data), sink, table).run()
    return sink.getvalue()


def reencapsulate_file(
    input_path: str | Path,
    output_path: str | Path,
    table: tuple[CommandInfo, ...] = COMMAND_TABLE,
) -> ReframeStats:
    """Reframe an S3G file into an encapsulated packet file.

    Args:
        input_path: Path to the ``.s3g`` file.
        output_path: Where to write the packet stream.

    Returns:
        Totals for the pass.
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    with input_path.open("rb") as src, output_path.open("wb") as dst:
        stats = Reframer(src, dst, table).run()
    logger.info(
        "Reframed %s -> %s: %d commands", input_path, output_path, stats.commands
    )
    return stats
