"""
Configuration for MCP Clock.

Settings come from environment variables and can be overridden by the
command line. Precedence: explicit overrides, then environment, then defaults.
"""

import os
from typing import Any, Dict, List, Optional

SERVER_NAME = "MCP Clock"

TRANSPORTS = ("stdio", "sse", "streamable-http")

DEFAULT_TRANSPORT = "stdio"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "WARNING"

# Pseudo zones accepted by clock_get alongside IANA names
UTC_ZONE = "UTC"
ALPHADEC_ZONE = "Alphadec"
DEFAULT_TIMEZONES: List[str] = [UTC_ZONE]
MAX_TIMEZONES = 15

ALPHADEC_PREAMBLE = (
    "// Alphadec units (approx): Period (A-Z) ≈ 14.04 days (UTC yr (different "
    "length leap yr vs common yr) / 26) | Arc (0-9) ≈ 33.7 hours (Period / 10) | "
    "Bar (A-Z) ≈ 77.75 minutes (Arc / 26) | Beat (0-9) ≈ 7.78 minutes (Bar / 10). "
    "The final part of canonical Alphadec is milliseconds offset within the beat."
)


def get_server_configuration(
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Resolve the server configuration.

    Args:
        transport: MCP transport (stdio, sse or streamable-http)
        host: Bind address for the HTTP transports
        port: Bind port for the HTTP transports
        log_level: Logging level name
        log_file: Optional path for a JSON-lines log file

    Returns:
        Dictionary with transport, host, port, log_level and log_file

    Raises:
        ValueError: If the transport or port is invalid
    """
    transport = transport or os.getenv("MCP_CLOCK_TRANSPORT", DEFAULT_TRANSPORT)
    if transport not in TRANSPORTS:
        raise ValueError(
            f"Invalid transport: '{transport}'. Choose from {', '.join(TRANSPORTS)}."
        )

    if port is None:
        raw_port = os.getenv("MCP_CLOCK_PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"Invalid port: '{raw_port}'")
    if not 0 < port < 65536:
        raise ValueError(f"Invalid port: {port}")

    return {
        "transport": transport,
        "host": host or os.getenv("MCP_CLOCK_HOST", DEFAULT_HOST),
        "port": port,
        "log_level": (
            log_level or os.getenv("MCP_CLOCK_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        ).upper(),
        "log_file": log_file or os.getenv("MCP_CLOCK_LOG_FILE") or None,
    }
