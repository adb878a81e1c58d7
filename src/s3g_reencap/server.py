"""MCP server entry point for the S3G reframer.

Exposes the command table, the CRC, and stream reframing as tools and
resources via the Model Context Protocol using the official Python MCP SDK
with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import ReframeError
from .protocol.commands import known_commands, lookup
from .reframer import reencapsulate, reencapsulate_file as _reencapsulate_file
from .utils.crc import crc8

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "s3g-reencap",
    instructions="Reframe S3G command files into encapsulated S3G packets",
)


def _parse_hex(hex_data: str) -> bytes:
    """Accept hex with or without spaces/colons."""
    cleaned = hex_data.replace(" ", "").replace(":", "").strip()
    return bytes.fromhex(cleaned)


def _error_result(exc: ReframeError) -> dict[str, Any]:
    return {
        "error": exc.message,
        "diagnostic": exc.diagnostic(),
        "bytes_read": exc.context.bytes_read,
        "command": exc.context.command,
        "length": exc.context.length,
    }


# ─── COMMAND TABLE TOOLS ─────────────────────────────────────────────

@mcp.tool()
def list_commands() -> dict[str, Any]:
    """List every S3G command the reframer knows how to size."""
    return {"commands": [info.to_dict() for info in known_commands()]}


@mcp.tool()
def describe_command(opcode: int) -> dict[str, Any]:
    """Look up a single opcode in the command table.

    Args:
        opcode: Command byte (0-255).
    """
    if not 0 <= opcode <= 255:
        return {"error": "Opcode must be 0-255"}
    info = lookup(opcode)
    result = info.to_dict()
    result["known"] = info.is_known
    return result


@mcp.tool()
def compute_crc(hex_data: str) -> dict[str, Any]:
    """Compute the Maxim CRC-8 used in packet trailers.

    Args:
        hex_data: Bytes as a hex string, e.g. "86 00".
    """
    try:
        data = _parse_hex(hex_data)
    except ValueError as e:
        return {"error": f"Invalid hex data: {e}"}
    crc = crc8(data)
    return {"crc": crc, "hex": f"0x{crc:02X}", "length": len(data)}


# ─── REFRAMING TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def reencapsulate_hex(hex_data: str) -> dict[str, Any]:
    """Reframe an S3G command stream given as hex.

    Args:
        hex_data: Unframed S3G bytes as a hex string.
    """
    try:
        data = _parse_hex(hex_data)
    except ValueError as e:
        return {"error": f"Invalid hex data: {e}"}
    try:
        framed = reencapsulate(data)
    except ReframeError as e:
        return _error_result(e)
    return {
        "packets": framed.hex(" "),
        "bytes_in": len(data),
        "bytes_out": len(framed),
    }


@mcp.tool()
def reencapsulate_file(input_path: str, output_path: str) -> dict[str, Any]:
    """Reframe an .s3g file on disk into an encapsulated packet file.

    Args:
        input_path: Path to the source .s3g file.
        output_path: Where to write the packet stream.
    """
    try:
        stats = _reencapsulate_file(input_path, output_path)
    except FileNotFoundError:
        return {"error": f"File not found: {input_path}"}
    except ReframeError as e:
        return _error_result(e)
    result = stats.to_dict()
    result["output_path"] = output_path
    return result


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("s3g://commands")
def resource_commands() -> str:
    """The full table of recognized commands and their length rules."""
    return json.dumps({"commands": [info.to_dict() for info in known_commands()]})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def inspect_build_file(path: str) -> str:
    """Guide the AI through checking an S3G file before sending it to a bot.

    Args:
        path: Path to the .s3g file.
    """
    return f"""Reframe {path} using the reencapsulate_file tool.
If it fails, report:
- The failing command (use describe_command on the opcode)
- How many bytes were read before the failure
- Whether the file looks truncated or uses an unsupported command

Use list_commands to see which commands are supported."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
