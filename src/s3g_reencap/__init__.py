"""Reconstruct S3G wire-protocol framing for unframed S3G command files."""

from .errors import (
    ErrorContext,
    IOFailure,
    OversizedPayloadError,
    ReframeError,
    ShortWriteError,
    TableInconsistencyError,
    TruncatedInputError,
    UnknownCommandError,
)
from .reframer import ReframeStats, Reframer, reencapsulate, reencapsulate_file

__all__ = [
    "ErrorContext",
    "IOFailure",
    "OversizedPayloadError",
    "ReframeError",
    "ReframeStats",
    "Reframer",
    "ShortWriteError",
    "TableInconsistencyError",
    "TruncatedInputError",
    "UnknownCommandError",
    "reencapsulate",
    "reencapsulate_file",
]
