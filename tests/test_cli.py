"""Tests for the stdin/stdout filter entry point."""

from __future__ import annotations

import io
import sys
from unittest.mock import patch

import pytest

from s3g_reencap import cli
from s3g_reencap.protocol.framing import build_packet
from s3g_reencap.utils.crc import crc8


def test_clean_run_exits_zero():
    """Well-formed input exits 0 with one packet per command."""
    sink = io.BytesIO()
    code = cli.run(io.BytesIO(bytes([0x86, 0x00, 0x8F, 0x01])), sink)
    assert code == 0
    assert sink.getvalue() == build_packet(0x86, b"\x00") + build_packet(0x8F, b"\x01")


def test_empty_input_exits_zero():
    """End of input before any command is a clean finish."""
    sink = io.BytesIO()
    assert cli.run(io.BytesIO(b""), sink) == 0
    assert sink.getvalue() == b""


def test_unknown_command_exits_one(caplog):
    """Unknown opcodes fail with the full diagnostic."""
    sink = io.BytesIO()
    code = cli.run(io.BytesIO(bytes([0x86, 0x00, 0x00, 0x02])), sink)
    assert code == 1
    assert sink.getvalue() == bytes([0xD5, 0x02, 0x86, 0x00, crc8(b"\x86\x00")])

    text = caplog.text
    assert "encountered unknown command" in text
    assert "after 3 bytes read" in text
    assert "during command 0" in text
    assert "length 0" in text


def test_truncated_body_exits_one(caplog):
    """A body cut short by end of input fails."""
    code = cli.run(io.BytesIO(bytes([0x85, 0x00, 0x01])), io.BytesIO())
    assert code == 1
    assert "truncated packet body" in caplog.text
    assert "during command 133" in caplog.text
    assert "length 4" in caplog.text


def test_io_error_reported(caplog):
    """The underlying OSError text appears in the diagnostic."""

    class BrokenPipe:
        def write(self, data):
            raise BrokenPipeError(32, "Broken pipe")

    code = cli.run(io.BytesIO(b"\x86\x00"), BrokenPipe())
    assert code == 1
    assert "writing: [Errno 32] Broken pipe" in caplog.text


def test_main_uses_std_streams():
    """main() wires stdin/stdout buffers and exits with run()'s code."""
    stdin = io.TextIOWrapper(io.BytesIO(bytes([0x86, 0x00])))
    stdout = io.TextIOWrapper(io.BytesIO())
    with patch.object(sys, "stdin", stdin), patch.object(sys, "stdout", stdout), \
            patch.object(cli.logging, "basicConfig"):
        with pytest.raises(SystemExit) as excinfo:
            cli.main()
        stdout.flush()
        written = stdout.buffer.getvalue()
    assert excinfo.value.code == 0
    assert written == build_packet(0x86, b"\x00")


def test_main_failure_exits_one():
    """main() exits 1 when the input holds an unknown command."""
    stdin = io.TextIOWrapper(io.BytesIO(bytes([0x86, 0x00, 0x00])))
    stdout = io.TextIOWrapper(io.BytesIO())
    with patch.object(sys, "stdin", stdin), patch.object(sys, "stdout", stdout), \
            patch.object(cli.logging, "basicConfig"):
        with pytest.raises(SystemExit) as excinfo:
            cli.main()
        stdout.flush()
        written = stdout.buffer.getvalue()
    assert excinfo.value.code == 1
    assert written == build_packet(0x86, b"\x00")


def test_clean_run_is_quiet_at_info(caplog):
    """A successful run logs nothing at INFO or above."""
    caplog.set_level("INFO")
    assert cli.run(io.BytesIO(bytes([0x86, 0x00])), io.BytesIO()) == 0
    assert [r for r in caplog.records if r.levelname != "DEBUG"] == []
