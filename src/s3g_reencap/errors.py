"""Exception hierarchy for the reframing filter.

Every error is fatal to the stream: once a command can't be sized or written,
the position in the input is unknown and any further output would be garbage.
Each exception carries the :class:`ErrorContext` captured where it was raised.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorContext:
    """Where the reframer was when it gave up."""

    bytes_read: int = 0
    command: int = 0
    length: int = 0


class ReframeError(RuntimeError):
    """Base class for all reframing failures."""

    def __init__(self, message: str, context: ErrorContext | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def diagnostic(self) -> str:
        """Render the multi-line report printed before exiting."""
        headline = self.message
        if self.__cause__ is not None:
            headline = f"{headline}: {self.__cause__}"
        ctx = self.context
        return (
            f"{headline}\n"
            f"  after {ctx.bytes_read} bytes read\n"
            f"  during command {ctx.command}\n"
            f"  length {ctx.length}"
        )


class IOFailure(ReframeError):
    """The underlying read or write raised ``OSError``."""


class UnknownCommandError(ReframeError):
    """The opcode has no entry in the command table."""


class TruncatedInputError(ReframeError):
    """Input ended in the middle of a command."""


class TableInconsistencyError(ReframeError):
    """A length rule produced a size outside the packet limits."""


class OversizedPayloadError(TableInconsistencyError):
    """A payload would not fit in a single packet."""


class ShortWriteError(ReframeError):
    """The output stream accepted fewer bytes than the packet holds."""


__all__ = [
    "ErrorContext",
    "IOFailure",
    "OversizedPayloadError",
    "ReframeError",
    "ShortWriteError",
    "TableInconsistencyError",
    "TruncatedInputError",
    "UnknownCommandError",
]
