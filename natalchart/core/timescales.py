# natalchart/core/timescales.py
# -----------------------------------------------------------------------------
# Civil time → Julian Day
#
# Public API:
#   build_instant(date_str, time_str, tz_str) -> JulianInstant
#   julian_day(year, month, day, hour, minute, utc_offset_hours=0) -> float
#   parse_utc_offset(tz_str) -> (hours, parsed_ok)
#   centuries_since_j2000(jd) -> float
#
# Conventions:
#   • Gregorian calendar → JDN with the floor-based Jan/Feb adjustment.
#   • JD origin is 12:00 UTC, hence the (decimal_hours − 12)/24 fraction.
#   • Offsets are whole hours in the form "UTC±N". Anything unparseable falls
#     back to offset 0; the fallback is reported in `warnings`, not raised.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, List, Tuple
import re

from natalchart.core.constants import J2000_JD, DAYS_PER_CENTURY

__all__ = [
    "JulianInstant",
    "build_instant",
    "julian_day",
    "parse_utc_offset",
    "parse_date_str",
    "parse_time_str",
    "centuries_since_j2000",
    "TZ_DEFAULTED_WARNING",
    "MAX_UTC_OFFSET_HOURS",
]

TZ_DEFAULTED_WARNING = "timezone_unparsed_defaulted_to_utc"
# Readable offsets beyond this are rejected rather than defaulted
MAX_UTC_OFFSET_HOURS = 24

# ───────────────────────────── Dataclass ─────────────────────────────

@dataclass(frozen=True)
class JulianInstant:
    jd: float
    centuries: float          # T since J2000.0
    utc_offset_hours: int
    offset_defaulted: bool    # True when the tz string could not be read
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# ───────────────────────────── Parsing helpers ─────────────────────────────

_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")
_TIME_RE = re.compile(r"^\s*(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?\s*$")
# Leading signed integer, the way JS parseInt reads it
_OFFSET_RE = re.compile(r"^\s*([+-]?\d+)")

def parse_date_str(date_str: str) -> Tuple[int, int, int]:
    """Parse YYYY-MM-DD into (year, month, day); the date must exist."""
    m = _DATE_RE.match(date_str or "")
    if not m:
        raise ValueError(f"Invalid date_str '{date_str}': expected YYYY-MM-DD")
    iy, im, iday = int(m.group(1)), int(m.group(2)), int(m.group(3))
    try:
        datetime(iy, im, iday)  # existence check
    except ValueError as e:
        raise ValueError(f"Invalid date_str '{date_str}': {e}") from e
    return iy, im, iday

def parse_time_str(time_str: str) -> Tuple[int, int]:
    """
    Parse HH:MM (HH:MM:SS accepted, seconds ignored) into (hour, minute).
    """
    m = _TIME_RE.match(time_str or "")
    if not m:
        raise ValueError(f"Invalid time_str '{time_str}': expected HH:MM")
    ih = int(m.group("h")); im = int(m.group("m"))
    isec = int(m.group("s") or 0)
    if not (0 <= ih <= 23 and 0 <= im <= 59 and 0 <= isec <= 59):
        raise ValueError(f"Invalid time fields: hh={ih}, mm={im}, ss={isec}")
    return ih, im

def parse_utc_offset(tz_str: str) -> Tuple[int, bool]:
    """
    Read a whole-hour offset from 'UTC±N'.

    Only the first literal 'UTC' is stripped. Trailing junk after the integer
    is ignored ('UTC+5:30' → 5). No integer at all → (0, False).
    A readable offset with |N| > MAX_UTC_OFFSET_HOURS raises ValueError.
    """
    rest = str(tz_str if tz_str is not None else "").replace("UTC", "", 1)
    m = _OFFSET_RE.match(rest)
    if not m:
        return 0, False
    raw = m.group(1)
    # Bound the digit count before int(); huge digit strings are refused
    if len(raw.lstrip("+-").lstrip("0")) > 3 or abs(int(raw)) > MAX_UTC_OFFSET_HOURS:
        raise ValueError(f"UTC offset '{raw}' outside ±{MAX_UTC_OFFSET_HOURS} hours")
    return int(raw), True

# ───────────────────────────── Julian Day ─────────────────────────────

def julian_day(year: int, month: int, day: int, hour: int, minute: int,
               utc_offset_hours: int = 0) -> float:
    """Gregorian civil time at a fixed hour offset → Julian Day (UTC)."""
    utc_hours = hour - utc_offset_hours
    decimal_time = utc_hours + minute / 60.0

    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3

    jdn = (day + (153 * m + 2) // 5 + 365 * y
           + y // 4 - y // 100 + y // 400 - 32045)

    return jdn + (decimal_time - 12.0) / 24.0

def centuries_since_j2000(jd: float) -> float:
    return (float(jd) - J2000_JD) / DAYS_PER_CENTURY

# ───────────────────────────── Public builder ─────────────────────────────

def build_instant(date_str: str, time_str: str, tz_str: str) -> JulianInstant:
    """
    Civil strings → JulianInstant.

    Raises ValueError on malformed date/time or an offset beyond ±24 h. An
    unreadable offset is not an error: it becomes 0 with TZ_DEFAULTED_WARNING
    attached.
    """
    year, month, day = parse_date_str(date_str)
    hour, minute = parse_time_str(time_str)
    offset, ok = parse_utc_offset(tz_str)

    warnings: List[str] = []
    if not ok:
        warnings.append(TZ_DEFAULTED_WARNING)

    jd = julian_day(year, month, day, hour, minute, offset)
    return JulianInstant(
        jd=jd,
        centuries=centuries_since_j2000(jd),
        utc_offset_hours=offset,
        offset_defaulted=not ok,
        warnings=warnings,
    )
