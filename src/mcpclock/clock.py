"""
Clock report behind the ``clock_get`` tool.

A report describes one reference instant (now, optionally shifted) in a list
of requested zones. Besides IANA names two pseudo zones are understood:
``UTC`` (ISO string and Unix time) and ``Alphadec``.
"""

import datetime
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from . import alphadec
from .config import (
    ALPHADEC_PREAMBLE,
    ALPHADEC_ZONE,
    DEFAULT_TIMEZONES,
    MAX_TIMEZONES,
    UTC_ZONE,
)
from .domain import AlphadecEntry, UtcEntry, ZoneEntry
from .timeutil import get_zone_info, now_utc

logger = logging.getLogger(__name__)


def is_pseudo_zone(tz: str) -> bool:
    return tz in (UTC_ZONE, ALPHADEC_ZONE)


def reference_instant(
    offset_seconds: Optional[int] = None, base: Optional[datetime.datetime] = None
) -> datetime.datetime:
    """The instant a report describes: ``base`` (default now) plus the offset."""
    target = base if base is not None else now_utc()
    if offset_seconds:
        try:
            target = target + datetime.timedelta(seconds=offset_seconds)
        except OverflowError as e:
            raise ValueError(
                f"offset_seconds out of range: {offset_seconds}"
            ) from e
    return target


def validate_timezones(timezones: Optional[List[str]]) -> List[str]:
    """Returns the zones to report, defaulting to UTC.

    Raises:
        ValueError: If too many zones are requested or one is not a known IANA name.
    """
    requested = list(timezones) if timezones else list(DEFAULT_TIMEZONES)
    if len(requested) > MAX_TIMEZONES:
        raise ValueError(
            f"Too many timezones: {len(requested)} requested, at most {MAX_TIMEZONES} allowed."
        )
    for tz in requested:
        if not is_pseudo_zone(tz):
            # Raises ValueError("Invalid timezone: ...")
            get_zone_info(tz)
    return requested


def build_entries(
    target: datetime.datetime,
    timezones: Optional[List[str]] = None,
    canonical_only: bool = False,
) -> Tuple[List[Dict[str, Any]], bool]:
    """
    Build the report entries for ``target``.

    Args:
        target: Reference instant (aware)
        timezones: Requested zones; see validate_timezones
        canonical_only: Drop the readable AlphaDec form when Alphadec was requested

    Returns:
        Tuple of (entries, alphadec_explicit)
    """
    requested = validate_timezones(timezones)
    alphadec_explicit = ALPHADEC_ZONE in requested
    timestamp = alphadec.encode(target)

    entries: List[Dict[str, Any]] = []
    has_utc = False
    for tz in requested:
        if tz == ALPHADEC_ZONE:
            continue
        if tz == UTC_ZONE:
            if not has_utc:
                entries.append(UtcEntry.from_datetime(target).to_dict())
                has_utc = True
            continue
        try:
            local = target.astimezone(get_zone_info(tz))
        except OverflowError as e:
            raise ValueError(
                f"Time in {tz} is outside the supported date range."
            ) from e
        entries.append(ZoneEntry.from_local(tz, local).to_dict())

    if not has_utc:
        entries.append(UtcEntry.from_datetime(target).to_dict())

    include_readable = not (alphadec_explicit and canonical_only)
    entries.append(
        AlphadecEntry.from_timestamp(timestamp, include_readable).to_dict()
    )
    return entries, alphadec_explicit


def clock_report(
    timezones: Optional[List[str]] = None,
    offset_seconds: Optional[int] = None,
    canonical_only: bool = False,
    base: Optional[datetime.datetime] = None,
) -> str:
    """Renders the clock report as JSON, with the unit preamble when asked for Alphadec."""
    target = reference_instant(offset_seconds, base)
    entries, alphadec_explicit = build_entries(target, timezones, canonical_only)
    logger.debug(f"Built clock report with {len(entries)} entries for {target.isoformat()}")

    preamble = ""
    if alphadec_explicit and not canonical_only:
        preamble = ALPHADEC_PREAMBLE + "\n"
    return preamble + json.dumps(entries, indent=2, ensure_ascii=False)
