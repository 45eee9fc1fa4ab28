"""
MCP Clock CLI interface

Copyright 2023-2025 Eric Florenzano

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.

Runs the MCP server and exposes the same conversions on the command line.
"""

import argparse
import json
import sys
from typing import List, Optional

from colorama import Fore, Style, init

from . import alphadec
from .clock import clock_report
from .config import TRANSPORTS, get_server_configuration
from .logger import setup_logging, get_logger
from .timeutil import now_utc, parse_iso_utc, to_iso_z

# Initialize colorama
init(autoreset=True)

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list, defaults to sys.argv[1:]

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="mcpclock",
        description="MCP Clock - time and AlphaDec tools over the Model Context Protocol.",
    )
    parser.add_argument(
        "--log-level",
        help="Console log level (overrides MCP_CLOCK_LOG_LEVEL, default: WARNING).",
    )
    parser.add_argument(
        "--log-file",
        help="Also write JSON-lines logs to this file (overrides MCP_CLOCK_LOG_FILE).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the MCP server.")
    serve.add_argument(
        "--transport",
        choices=TRANSPORTS,
        help="Transport method to use (overrides MCP_CLOCK_TRANSPORT, default: stdio).",
    )
    serve.add_argument("--host", help="Bind address for the HTTP transports.")
    serve.add_argument("--port", type=int, help="Bind port for the HTTP transports.")

    now = subparsers.add_parser("now", help="Show the current time in several zones.")
    now.add_argument(
        "-z",
        "--timezone",
        dest="timezones",
        action="append",
        help='IANA zone, "UTC" or "Alphadec". May be repeated.',
    )
    now.add_argument(
        "--offset-seconds",
        type=int,
        help="Signed offset in seconds applied before formatting.",
    )
    now.add_argument(
        "--canonical-only",
        action="store_true",
        help="Only show the canonical Alphadec string without format explanation.",
    )

    encode = subparsers.add_parser("encode", help="Convert an ISO 8601 timestamp to AlphaDec.")
    encode.add_argument(
        "timestamp", nargs="?", help="ISO 8601 timestamp with Z or offset (default: now)."
    )
    encode.add_argument("--json", action="store_true", help="Print all fields as JSON.")

    decode = subparsers.add_parser("decode", help="Convert an AlphaDec string to ISO 8601.")
    decode.add_argument("canonical", help="Canonical AlphaDec string, YYYY_LdLd_MMMMMM.")
    decode.add_argument("--json", action="store_true", help="Print all fields as JSON.")

    units = subparsers.add_parser("units", help="Show AlphaDec unit durations for a year.")
    units.add_argument("--year", type=int, help="Calendar year (default: current UTC year).")
    units.add_argument("--json", action="store_true", help="Print as JSON.")

    return parser.parse_args(argv)


def format_field(label: str, value) -> str:
    return f"{Fore.CYAN}{label:<12}{Style.RESET_ALL} {Fore.YELLOW}{value}{Style.RESET_ALL}"


def run_serve(args: argparse.Namespace, config: dict) -> int:
    from .server import app

    app.settings.host = config["host"]
    app.settings.port = config["port"]
    logger.info(
        f"Starting MCP Clock server (Transport: {config['transport']})",
        extra={"host": config["host"], "port": config["port"]},
    )
    app.run(transport=config["transport"])
    return 0


def run_now(args: argparse.Namespace) -> int:
    print(clock_report(args.timezones, args.offset_seconds, args.canonical_only))
    return 0


def run_encode(args: argparse.Namespace) -> int:
    instant = parse_iso_utc(args.timestamp) if args.timestamp else now_utc()
    timestamp = alphadec.encode(instant)
    if args.json:
        result = timestamp.to_dict()
        result["iso"] = to_iso_z(instant)
        print(json.dumps(result, indent=2))
        return 0

    print(f"{Fore.GREEN}{Style.BRIGHT}{timestamp.canonical}")
    print(format_field("iso", to_iso_z(instant)))
    print(format_field("readable", timestamp.readable))
    print(format_field("beat index", timestamp.beat_index))
    print(format_field("ms in beat", timestamp.ms_offset_in_beat))
    print(
        format_field(
            "arc (ms)",
            f"{timestamp.arc_start_ms_in_year} - {timestamp.arc_end_ms_in_year}",
        )
    )
    return 0


def run_decode(args: argparse.Namespace) -> int:
    instant = alphadec.decode(args.canonical)
    if args.json:
        result = alphadec.parse(args.canonical).to_dict()
        result["iso"] = to_iso_z(instant)
        print(json.dumps(result, indent=2))
        return 0

    print(f"{Fore.GREEN}{Style.BRIGHT}{to_iso_z(instant)}")
    return 0


def run_units(args: argparse.Namespace) -> int:
    year = args.year if args.year is not None else now_utc().year
    if not 1 <= year <= 9999:
        raise ValueError(f"Year out of range (1-9999): {year}")
    durations = alphadec.unit_durations(year)
    points = alphadec.exact_alignment_points(year)
    if args.json:
        result = {"year": year, "days_in_year": alphadec.days_in_year(year)}
        result.update(durations)
        result["exact_alignment_points"] = len(points)
        print(json.dumps(result, indent=2))
        return 0

    leap = "leap" if alphadec.is_leap_year(year) else "common"
    print(f"{Fore.GREEN}{Style.BRIGHT}{year} ({leap} year, {alphadec.days_in_year(year)} days)")
    for name, value in durations.items():
        print(format_field(name, f"{value:,.3f}"))
    print(format_field("exact points", len(points)))
    return 0


COMMANDS = {
    "now": run_now,
    "encode": run_encode,
    "decode": run_decode,
    "units": run_units,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Process exit status
    """
    args = parse_args(argv)

    try:
        config = get_server_configuration(
            transport=getattr(args, "transport", None),
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            log_level=args.log_level,
            log_file=args.log_file,
        )
        setup_logging(config["log_level"], config["log_file"])

        if args.command == "serve":
            return run_serve(args, config)
        return COMMANDS[args.command](args)
    except ValueError as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"{Fore.RED}Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
