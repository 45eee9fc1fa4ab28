"""
Domain models for MCP Clock.

Each entry in a ``clock_get`` report describes the reference instant in one
timezone. ``to_dict`` produces the JSON shape returned to MCP clients.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass
import datetime

from .alphadec import AlphaDecTimestamp
from .timeutil import to_iso_z, unix_ms


@dataclass
class UtcEntry:
    """The reference instant in UTC."""

    iso: str
    unixtime: int
    timezone: str = "UTC"

    @classmethod
    def from_datetime(cls, dt: datetime.datetime):
        """Create a UtcEntry from an aware datetime."""
        return cls(iso=to_iso_z(dt), unixtime=unix_ms(dt) // 1000)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"timezone": self.timezone, "iso": self.iso, "unixtime": self.unixtime}


@dataclass
class ZoneEntry:
    """Wall-clock time of the reference instant in an IANA timezone."""

    timezone: str
    time12: str
    time24: str
    day_name: str
    date: str

    @classmethod
    def from_local(cls, timezone: str, local: datetime.datetime):
        """Create a ZoneEntry from a datetime already converted to the zone."""
        hour12 = local.hour % 12 or 12
        meridiem = "AM" if local.hour < 12 else "PM"
        return cls(
            timezone=timezone,
            time12=f"{hour12}:{local.minute:02d} {meridiem}",
            time24=f"{local.hour:02d}:{local.minute:02d}",
            day_name=local.strftime("%A"),
            date=f"{local.strftime('%b')} {local.day}, {local.year}",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timezone": self.timezone,
            "time12": self.time12,
            "time24": self.time24,
            "dayName": self.day_name,
            "date": self.date,
        }


@dataclass
class AlphadecEntry:
    """The reference instant as an AlphaDec timestamp."""

    alphadec: str
    readable: Optional[str] = None
    timezone: str = "Alphadec"

    @classmethod
    def from_timestamp(cls, timestamp: AlphaDecTimestamp, include_readable: bool = True):
        return cls(
            alphadec=timestamp.canonical,
            readable=timestamp.readable if include_readable else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting the readable form when absent."""
        result = {"timezone": self.timezone, "alphadec": self.alphadec}
        if self.readable is not None:
            result["readable"] = self.readable
        return result
