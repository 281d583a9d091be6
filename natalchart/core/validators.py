# natalchart/core/validators.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from natalchart.core.constants import wrap_deg
from natalchart.core.timescales import parse_date_str, parse_time_str, parse_utc_offset

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Structured validator error; `.errors()` mirrors pydantic's list shape."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        elif isinstance(details, list):
            self._details = details
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")
        else:
            self._details = [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__("validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


class MissingFieldError(ValidationError):
    """One or more required inputs absent."""


class MalformedInputError(ValidationError):
    """A present input that does not parse (date, time, number) or is out of range."""


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _is_missing(v: Any) -> bool:
    # 0 / 0.0 are valid coordinates; only absence or blank strings count
    return v is None or (isinstance(v, str) and not v.strip())

def _require(body: Dict[str, Any], keys: Sequence[str]) -> None:
    missing = [k for k in keys if _is_missing(body.get(k))]
    if missing:
        raise MissingFieldError([
            _err(k, "field required", "value_error.missing") for k in missing
        ])

def _as_float(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    try:
        x = float(v.strip() if isinstance(v, str) else v)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(x):
        return None
    return x


# ───────────────────────── atomic parsers ─────────────────────────

def parse_date(s: Any) -> str:
    if not isinstance(s, str):
        raise MalformedInputError(_err("date", "date must be a 'YYYY-MM-DD' string", "type_error.str"))
    try:
        parse_date_str(s)
    except ValueError:
        raise MalformedInputError(_err("date", "date must be 'YYYY-MM-DD'", "value_error.date"))
    return s.strip()

def parse_time(s: Any) -> str:
    if not isinstance(s, str):
        raise MalformedInputError(_err("time", "time must be an 'HH:MM' string", "type_error.str"))
    try:
        parse_time_str(s)
    except ValueError:
        raise MalformedInputError(_err("time", "time must be 'HH:MM' (24-hour)", "value_error.time"))
    return s.strip()

def parse_latlon(lat: Any, lon: Any, lat_key="latitude", lon_key="longitude") -> Tuple[float, float]:
    lat_f = _as_float(lat); lon_f = _as_float(lon)
    if lat_f is None or lon_f is None:
        bad = [k for k, v in ((lat_key, lat_f), (lon_key, lon_f)) if v is None]
        raise MalformedInputError(_err(bad, "latitude/longitude must be finite numbers", "type_error.float"))
    if not (-90.0 <= lat_f <= 90.0):
        raise MalformedInputError(_err(lat_key, "latitude must be between -90 and 90"))
    if not (-180.0 <= lon_f <= 180.0):
        raise MalformedInputError(_err(lon_key, "longitude must be between -180 and 180"))
    return lat_f, lon_f

def parse_timezone(tz: Any) -> str:
    # Unreadable offsets fall back to UTC downstream; readable ones must be in range.
    if isinstance(tz, bool) or not isinstance(tz, (str, int)):
        raise MalformedInputError(_err("timezone", "timezone must be a string like 'UTC+2'", "type_error.str"))
    try:
        s = str(tz).strip()
        parse_utc_offset(s)
    except ValueError:
        raise MalformedInputError(_err("timezone", "UTC offset must be between -24 and +24 hours", "value_error.timezone"))
    return s


# ───────────────────────── payloads ─────────────────────────

@dataclass(frozen=True)
class ChartRequest:
    date: str
    time: str
    latitude: float
    longitude: float
    timezone: str


@dataclass(frozen=True)
class TimeRequest:
    date: str
    time: str
    timezone: str


def _as_object(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("payload must be an object")
    return body

def parse_chart_payload(body: Any) -> ChartRequest:
    """
    Validate /api/calculate input. All five fields are required.

    - Missing/blank fields → MissingFieldError listing every absent key.
    - Bad date/time/coordinates → MalformedInputError (never NaN downstream).
    """
    body = _as_object(body)
    _require(body, ("date", "time", "latitude", "longitude", "timezone"))
    lat, lon = parse_latlon(body["latitude"], body["longitude"])
    return ChartRequest(
        date=parse_date(body["date"]),
        time=parse_time(body["time"]),
        latitude=lat,
        longitude=lon,
        timezone=parse_timezone(body["timezone"]),
    )

def parse_time_payload(body: Any) -> TimeRequest:
    body = _as_object(body)
    _require(body, ("date", "time", "timezone"))
    return TimeRequest(
        date=parse_date(body["date"]),
        time=parse_time(body["time"]),
        timezone=parse_timezone(body["timezone"]),
    )

def parse_aspect_points(body: Any) -> List[Tuple[str, float]]:
    """{bodies: [{name, longitude}, ...]} → [(name, longitude), ...] (order kept)."""
    body = _as_object(body)
    _require(body, ("bodies",))
    rows = body["bodies"]
    if not isinstance(rows, list):
        raise MalformedInputError(_err("bodies", "bodies must be a list", "type_error.list"))

    points: List[Tuple[str, float]] = []
    errors: List[Dict[str, Any]] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            errors.append(_err(["bodies", str(i)], "each body must be an object", "type_error.dict"))
            continue
        name = row.get("name")
        lon = _as_float(row.get("longitude"))
        if not isinstance(name, str) or not name.strip():
            errors.append(_err(["bodies", str(i), "name"], "name must be a non-empty string"))
        if lon is None:
            errors.append(_err(["bodies", str(i), "longitude"], "longitude must be a finite number", "type_error.float"))
        if isinstance(name, str) and name.strip() and lon is not None:
            points.append((name.strip(), wrap_deg(lon)))
    if errors:
        raise MalformedInputError(errors)
    return points
