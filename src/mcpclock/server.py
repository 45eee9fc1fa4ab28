"""
MCP Clock server.

Registers the clock and AlphaDec tools on a FastMCP application. Tools raise
ValueError on bad input; FastMCP reports those to the client as tool errors.
"""

import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from . import alphadec
from .clock import clock_report
from .config import SERVER_NAME
from .timeutil import now_utc, parse_iso_utc, to_iso_z, unix_ms

logger = logging.getLogger(__name__)

app = FastMCP(SERVER_NAME)


def _log_failure(tool: str, error: Exception) -> None:
    logger.warning(f"Tool {tool} failed: {error}", extra={"tool": tool})


# --- Clock ---


@app.tool()
def clock_get(
    timezones: Optional[List[str]] = None,
    offset_seconds: Optional[int] = None,
    adec_canonical_only: bool = False,
) -> str:
    """Returns time-of-day information for the requested time zones.

    Examples:
        clock_get{}  // now, default UTC & Alphadec
        clock_get{"timezones": ["Asia/Tokyo", "America/New_York"]}
        clock_get{"timezones": ["Asia/Kolkata"], "offset_seconds": -3600}

    Args:
        timezones (List[str], optional): Up to 15 IANA zones plus the literals "UTC" or "Alphadec". Defaults to ["UTC"].
        offset_seconds (int, optional): Signed offset in seconds applied to now before formatting, e.g. -86400 for "24 h ago".
        adec_canonical_only (bool, optional): Only show the canonical Alphadec string without format explanation.

    Returns:
        str: A JSON list of entries, one per zone, always ending with UTC and Alphadec entries.

    Raises:
        ValueError: If a timezone is invalid or more than 15 are requested.
    """
    logger.debug(f"clock_get timezones={timezones} offset_seconds={offset_seconds}")
    try:
        return clock_report(timezones, offset_seconds, adec_canonical_only)
    except ValueError as e:
        _log_failure("clock_get", e)
        raise


# --- AlphaDec ---


@app.tool()
def alphadec_encode(timestamp_iso: Optional[str] = None) -> Dict[str, Any]:
    """Converts an ISO 8601 timestamp (with Z or offset) to AlphaDec.

    Args:
        timestamp_iso (str, optional): The timestamp to encode, e.g. '2025-06-09T16:30:00Z'. Defaults to now.

    Returns:
        dict: The AlphaDec fields: 'canonical' (YYYY_LdLd_MMMMMM), 'readable', 'year', 'period', 'arc', 'bar', 'beat',
            'msOffsetInBeat', 'periodLetter', 'barLetter', 'arcStartMsInYear', 'arcEndMsInYear', and the encoded 'iso' instant.

    Raises:
        ValueError: If the timestamp format is invalid or lacks timezone info.
    """
    try:
        instant = parse_iso_utc(timestamp_iso) if timestamp_iso else now_utc()
        result = alphadec.encode(instant).to_dict()
    except ValueError as e:
        _log_failure("alphadec_encode", e)
        raise
    result["iso"] = to_iso_z(instant)
    return result


@app.tool()
def alphadec_decode(canonical: str) -> Dict[str, Any]:
    """Converts a canonical AlphaDec string (YYYY_LdLd_MMMMMM, e.g. '2025_L3T5_000000') to a UTC timestamp.

    Args:
        canonical (str): The canonical AlphaDec string.

    Returns:
        dict: 'iso' (UTC ISO 8601 with milliseconds), 'unixtime_ms' (int), and the parsed AlphaDec fields.

    Raises:
        ValueError: If the string is not a canonical AlphaDec timestamp.
    """
    try:
        instant = alphadec.decode(canonical)
    except ValueError as e:
        _log_failure("alphadec_decode", e)
        raise
    result = alphadec.parse(canonical).to_dict()
    result["iso"] = to_iso_z(instant)
    result["unixtime_ms"] = unix_ms(instant)
    return result


@app.tool()
def alphadec_units(year: Optional[int] = None) -> Dict[str, Any]:
    """Describes the AlphaDec grid for a year: unit durations and exact millisecond alignment.

    Args:
        year (int, optional): The calendar year. Defaults to the current UTC year.

    Returns:
        dict: 'year', 'is_leap_year', 'days_in_year', 'period_ms', 'arc_ms', 'bar_ms', 'beat_ms',
            'exact_alignment_points' (count of beat boundaries on whole milliseconds) and 'exact_alignment_spacing_ms'.

    Raises:
        ValueError: If the year is outside 1-9999.
    """
    if year is None:
        year = now_utc().year
    if not 1 <= year <= 9999:
        raise ValueError(f"Year out of range (1-9999): {year}")

    points = alphadec.exact_alignment_points(year)
    result: Dict[str, Any] = {
        "year": year,
        "is_leap_year": alphadec.is_leap_year(year),
        "days_in_year": alphadec.days_in_year(year),
    }
    result.update(alphadec.unit_durations(year))
    result["exact_alignment_points"] = len(points)
    result["exact_alignment_spacing_ms"] = alphadec.year_total_ms(year) // len(points)
    return result
