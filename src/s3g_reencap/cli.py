"""``s3g-reencap``: reframe an S3G file from stdin onto stdout.

Takes no arguments. Exits 0 when stdin ends cleanly between commands and 1
on any failure, after logging a diagnostic to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO

from .errors import ReframeError
from .reframer import Reframer

logger = logging.getLogger(__name__)


def run(source: BinaryIO, sink: BinaryIO) -> int:
    """Reframe *source* into *sink* and return the process exit code."""
    reframer = Reframer(source, sink)
    try:
        stats = reframer.run()
    except ReframeError as exc:
        logger.error("%s", exc.diagnostic())
        return 1
    logger.debug(
        "Reframed %d commands (%d bytes in, %d bytes out)",
        stats.commands,
        stats.bytes_read,
        stats.bytes_written,
    )
    return 0


def main() -> None:
    """Console entry point."""
    logging.basicConfig(level=logging.INFO)
    sys.exit(run(sys.stdin.buffer, sys.stdout.buffer))


if __name__ == "__main__":
    main()
