"""
AlphaDec codec.

AlphaDec divides every UTC calendar year into 67,600 equal beats, addressed as
period (A-Z), arc (0-9), bar (A-Z) and beat (0-9), plus the milliseconds
elapsed inside the beat. The canonical form ``YYYY_LdLd_MMMMMM`` is fixed
width, so sorting the strings sorts the instants within a year.

All conversions use exact integer arithmetic. Beat widths are not whole
milliseconds, so floating point would drift across the four levels.
"""

import datetime
import math
import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, List

PERIODS_PER_YEAR = 26
ARCS_PER_PERIOD = 10
BARS_PER_ARC = 26
BEATS_PER_BAR = 10

BEATS_PER_ARC = BARS_PER_ARC * BEATS_PER_BAR  # 260
BEATS_PER_PERIOD = ARCS_PER_PERIOD * BEATS_PER_ARC  # 2600
BEATS_IN_YEAR = PERIODS_PER_YEAR * BEATS_PER_PERIOD  # 67600

MS_PER_DAY = 86_400_000

CANONICAL_PATTERN = re.compile(r"([0-9]{4})_([A-Z])([0-9])([A-Z])([0-9])_([0-9]{6})")


class AlphaDecError(ValueError):
    """Base class for AlphaDec codec failures."""


class AlphaDecFormatError(AlphaDecError):
    """Raised when a string is not a decodable canonical AlphaDec timestamp."""


class AlphaDecIndexError(AlphaDecError):
    """Raised when a base-26 index falls outside 0-25."""


# --- Calendar helpers ---


def is_leap_year(year: int) -> bool:
    """Proleptic Gregorian leap-year rule."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def year_total_ms(year: int) -> int:
    """Length of the UTC year in milliseconds."""
    return days_in_year(year) * MS_PER_DAY


def beat_start_ms(year: int, beat_index: int) -> int:
    """Milliseconds from the start of ``year`` to the start of a beat.

    ``beat_index`` may equal BEATS_IN_YEAR, which gives the year length.
    """
    return (year_total_ms(year) * beat_index) // BEATS_IN_YEAR


def _year_start(year: int) -> datetime.datetime:
    return datetime.datetime(year, 1, 1, tzinfo=datetime.timezone.utc)


def _to_utc(instant: datetime.datetime) -> datetime.datetime:
    if instant.tzinfo is None:
        # Naive datetimes are taken to be UTC
        return instant.replace(tzinfo=datetime.timezone.utc)
    return instant.astimezone(datetime.timezone.utc)


# --- Base-26 letters ---


def to_base26(index: int) -> str:
    """Renders 0-25 as a single uppercase letter.

    Raises:
        AlphaDecIndexError: If ``index`` is outside 0-25.
    """
    if not 0 <= index < 26:
        raise AlphaDecIndexError(
            f"Invalid index for base-26 single character conversion: {index}"
        )
    return chr(ord("A") + index)


def from_base26(letter: str) -> int:
    """Inverse of :func:`to_base26`."""
    if len(letter) != 1 or not "A" <= letter <= "Z":
        raise AlphaDecIndexError(
            f"Invalid base-26 letter (expected a single A-Z): '{letter}'"
        )
    return ord(letter) - ord("A")


# --- Structured timestamp ---


@dataclass(frozen=True)
class AlphaDecTimestamp:
    """An instant expressed as a position on a year's beat grid."""

    year: int
    period: int
    arc: int
    bar: int
    beat: int
    ms_offset_in_beat: int
    period_letter: str
    bar_letter: str
    arc_start_ms_in_year: int
    arc_end_ms_in_year: int

    @property
    def beat_index(self) -> int:
        """Position of the beat in the year, 0 <= index < BEATS_IN_YEAR."""
        return (
            self.period * BEATS_PER_PERIOD
            + self.arc * BEATS_PER_ARC
            + self.bar * BEATS_PER_BAR
            + self.beat
        )

    @property
    def readable(self) -> str:
        return f"{self.period_letter}{self.arc}:{self.bar_letter}{self.beat}"

    @property
    def canonical(self) -> str:
        return (
            f"{self.year:04d}_{self.period_letter}{self.arc}"
            f"{self.bar_letter}{self.beat}_{self.ms_offset_in_beat:06d}"
        )

    def ms_since_year_start(self) -> int:
        return beat_start_ms(self.year, self.beat_index) + self.ms_offset_in_beat

    def to_datetime(self) -> datetime.datetime:
        """Returns the UTC instant this timestamp denotes."""
        return _year_start(self.year) + datetime.timedelta(
            milliseconds=self.ms_since_year_start()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire dictionary used by the MCP tools."""
        return {
            "canonical": self.canonical,
            "year": self.year,
            "period": self.period,
            "arc": self.arc,
            "bar": self.bar,
            "beat": self.beat,
            "msOffsetInBeat": self.ms_offset_in_beat,
            "periodLetter": self.period_letter,
            "barLetter": self.bar_letter,
            "readable": self.readable,
            "arcStartMsInYear": self.arc_start_ms_in_year,
            "arcEndMsInYear": self.arc_end_ms_in_year,
        }

    def __str__(self) -> str:
        return self.canonical


def _build(year: int, beat_index: int, ms_offset_in_beat: int) -> AlphaDecTimestamp:
    period, rest = divmod(beat_index, BEATS_PER_PERIOD)
    arc, rest = divmod(rest, BEATS_PER_ARC)
    bar, beat = divmod(rest, BEATS_PER_BAR)

    arc_start_beats = period * BEATS_PER_PERIOD + arc * BEATS_PER_ARC

    return AlphaDecTimestamp(
        year=year,
        period=period,
        arc=arc,
        bar=bar,
        beat=beat,
        ms_offset_in_beat=ms_offset_in_beat,
        period_letter=to_base26(period),
        bar_letter=to_base26(bar),
        arc_start_ms_in_year=beat_start_ms(year, arc_start_beats),
        arc_end_ms_in_year=beat_start_ms(year, arc_start_beats + BEATS_PER_ARC),
    )


# --- Codec ---


def encode(instant: datetime.datetime) -> AlphaDecTimestamp:
    """Encodes a UTC instant as an AlphaDec timestamp.

    Sub-millisecond precision is truncated, which is the only lossy step:
    ``decode(encode(x).canonical)`` is within 1 ms of ``x``.

    Args:
        instant (datetime.datetime): The instant to encode. Aware datetimes are
            converted to UTC; naive ones are taken to be UTC already.

    Returns:
        AlphaDecTimestamp: The structured timestamp; ``.canonical`` holds the
        ``YYYY_LdLd_MMMMMM`` string.
    """
    instant = _to_utc(instant)
    year = instant.year

    delta = instant - _year_start(year)
    ms_since_year_start = (
        delta.days * MS_PER_DAY + delta.seconds * 1000 + delta.microseconds // 1000
    )

    beat_index = (ms_since_year_start * BEATS_IN_YEAR) // year_total_ms(year)
    ms_offset_in_beat = ms_since_year_start - beat_start_ms(year, beat_index)

    return _build(year, beat_index, ms_offset_in_beat)


def parse(canonical: str) -> AlphaDecTimestamp:
    """Parses a canonical AlphaDec string into its structured form.

    Raises:
        AlphaDecFormatError: If the string is not ``YYYY_LdLd_MMMMMM``.
    """
    match = (
        CANONICAL_PATTERN.fullmatch(canonical) if isinstance(canonical, str) else None
    )
    if match is None:
        raise AlphaDecFormatError(
            f"Bad AlphaDec canonical string (format YYYY_PaBt_MMMMMM): '{canonical}'"
        )

    year_str, period_letter, arc_str, bar_letter, beat_str, ms_str = match.groups()
    beat_index = (
        from_base26(period_letter) * BEATS_PER_PERIOD
        + int(arc_str) * BEATS_PER_ARC
        + from_base26(bar_letter) * BEATS_PER_BAR
        + int(beat_str)
    )
    return _build(int(year_str), beat_index, int(ms_str))


def decode(canonical: str) -> datetime.datetime:
    """Decodes a canonical AlphaDec string to a timezone-aware UTC datetime.

    The millisecond field is added as given, without checking it against the
    width of the beat.

    Args:
        canonical (str): A string of the form ``YYYY_LdLd_MMMMMM``.

    Returns:
        datetime.datetime: The instant, in UTC.

    Raises:
        AlphaDecFormatError: If the string is malformed or its year lies
            outside the range ``datetime`` can represent.
    """
    timestamp = parse(canonical)
    try:
        return timestamp.to_datetime()
    except (ValueError, OverflowError) as e:
        raise AlphaDecFormatError(
            f"AlphaDec string '{canonical}' is outside the supported date range: {e}"
        ) from e


# --- Grid properties ---


def exact_alignment_points(year: int) -> List[datetime.datetime]:
    """Instants in ``year`` where a beat boundary falls on a whole millisecond.

    Only at these instants does the beat grid line up exactly with the
    millisecond clock. 67600 = 2^4 * 5^2 * 13^2 and a year's length in ms
    shares only 2^4 * 5^2 = 400 with it, so every year has 400 of them.
    """
    total = year_total_ms(year)
    step = BEATS_IN_YEAR // math.gcd(total, BEATS_IN_YEAR)
    start = _year_start(year)
    return [
        start + datetime.timedelta(milliseconds=beat_start_ms(year, index))
        for index in range(0, BEATS_IN_YEAR, step)
    ]


def unit_durations(year: int) -> Dict[str, float]:
    """Nominal width in milliseconds of each AlphaDec unit for ``year``."""
    total = Fraction(year_total_ms(year))
    period = total / PERIODS_PER_YEAR
    arc = period / ARCS_PER_PERIOD
    bar = arc / BARS_PER_ARC
    beat = bar / BEATS_PER_BAR
    return {
        "period_ms": float(period),
        "arc_ms": float(arc),
        "bar_ms": float(bar),
        "beat_ms": float(beat),
    }
