"""
ISO 8601 and IANA timezone helpers shared by the clock tools and the CLI.
"""

import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime.datetime:
    """Current UTC time truncated to milliseconds."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def to_iso_z(dt: datetime.datetime) -> str:
    """Formats a datetime as UTC ISO 8601 with milliseconds and a 'Z' suffix.

    Naive datetimes are taken to be UTC.

    Args:
        dt (datetime.datetime): The datetime to format.

    Returns:
        str: The datetime as YYYY-MM-DDTHH:MM:SS.sssZ.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    else:
        dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def unix_ms(dt: datetime.datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""
    epoch = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
    delta = dt - epoch
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000


def parse_iso_utc(timestamp_iso: str) -> datetime.datetime:
    """Parses an ISO 8601 timestamp (with 'Z' or an offset) into an aware UTC datetime.

    Args:
        timestamp_iso (str): The ISO 8601 timestamp string.

    Returns:
        datetime.datetime: The parsed datetime, normalized to UTC.

    Raises:
        ValueError: For invalid formats or naive timestamps (lacking Z or offset).
    """
    if not isinstance(timestamp_iso, str) or not timestamp_iso.strip():
        raise ValueError("Timestamp must be a non-empty ISO 8601 string.")

    value = timestamp_iso.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    try:
        dt = datetime.datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(
            f"Invalid ISO 8601 timestamp format or value: '{timestamp_iso}'. Error: {e}"
        ) from e

    if dt.tzinfo is None:
        raise ValueError(
            f"Timestamp '{timestamp_iso}' lacks timezone information (offset or Z)."
        )
    try:
        return dt.astimezone(datetime.timezone.utc)
    except OverflowError as e:
        raise ValueError(
            f"Timestamp '{timestamp_iso}' is outside the supported date range."
        ) from e


def get_zone_info(tz_name: str) -> ZoneInfo:
    """Gets a ZoneInfo object for an IANA timezone name.

    Raises:
        ValueError: If the timezone name is invalid or not found.
    """
    if not isinstance(tz_name, str) or len(tz_name) < 2:
        raise ValueError(f"Invalid timezone: {tz_name}")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"Invalid timezone: {tz_name}") from e
