"""
MCP Clock: time and AlphaDec tools for MCP clients.
"""

from .alphadec import (
    AlphaDecError,
    AlphaDecFormatError,
    AlphaDecIndexError,
    AlphaDecTimestamp,
    decode,
    encode,
    parse,
)

__version__ = "0.1.0"

__all__ = [
    "AlphaDecError",
    "AlphaDecFormatError",
    "AlphaDecIndexError",
    "AlphaDecTimestamp",
    "decode",
    "encode",
    "parse",
]
