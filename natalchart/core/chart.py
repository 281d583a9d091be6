# natalchart/core/chart.py
"""
Chart assembly: bodies + houses + aspects for one instant and observer.

Public API:
    compute_chart(request, *, orbs=None) -> Chart      (validated request in)
    assemble_chart(instant, latitude, longitude, ...)   (instant already built)
    zodiac_sign(L) / sign_index(L) / degree_in_sign(L)
    house_of(L, cusps)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging
import math

from natalchart.core.aspects import AspectHit, compute_aspects
from natalchart.core.bodies import all_body_positions
from natalchart.core.constants import HOUSE_CONVENTION, SIGN_NAMES, SIGN_SPAN_DEG
from natalchart.core.errors import ComputationError
from natalchart.core.houses import house_cusps, house_warnings
from natalchart.core.timescales import JulianInstant, build_instant
from natalchart.core.validators import ChartRequest

log = logging.getLogger(__name__)

__all__ = [
    "PlacedBody", "HouseRow", "Chart",
    "sign_index", "zodiac_sign", "degree_in_sign", "house_of",
    "assemble_chart", "compute_chart",
]


# ───────────────────────────── records ─────────────────────────────

@dataclass(frozen=True)
class PlacedBody:
    name: str
    longitude: float
    latitude: float
    sign: str
    degree: float
    retrograde: bool
    house: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "longitude": self.longitude,
            "latitude": self.latitude,
            "sign": self.sign,
            "degree": self.degree,
            "retrograde": self.retrograde,
            "house": self.house,
        }


@dataclass(frozen=True)
class HouseRow:
    number: int
    longitude: float
    sign: str

    def as_dict(self) -> Dict[str, Any]:
        return {"number": self.number, "longitude": self.longitude, "sign": self.sign}


@dataclass(frozen=True)
class Chart:
    bodies: Tuple[PlacedBody, ...]
    houses: Tuple[HouseRow, ...]
    aspects: Tuple[AspectHit, ...]
    julian_day: float
    utc_offset_hours: int
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        # Key names are the public JSON contract (planets/houses/aspects)
        return {
            "planets": [b.as_dict() for b in self.bodies],
            "houses": [h.as_dict() for h in self.houses],
            "aspects": [a.as_dict() for a in self.aspects],
            "meta": {
                "julian_day": self.julian_day,
                "utc_offset_hours": self.utc_offset_hours,
                "house_convention": HOUSE_CONVENTION,
                "warnings": list(self.warnings),
            },
        }


# ───────────────────────────── zodiac ─────────────────────────────

def sign_index(longitude: float) -> int:
    return int(math.floor(longitude / SIGN_SPAN_DEG)) % 12

def zodiac_sign(longitude: float) -> str:
    return SIGN_NAMES[sign_index(longitude)]

def degree_in_sign(longitude: float) -> float:
    return longitude % SIGN_SPAN_DEG


# ───────────────────────────── houses ─────────────────────────────

def house_of(longitude: float, cusps: Sequence[float]) -> int:
    """
    House number (1..12) whose span [cusp[i], cusp[i+1]) holds `longitude`.

    Spans that wrap past 360° match on either side of 0°. A longitude exactly
    on a cusp belongs to the house starting there. First match wins; if no
    span matches (degenerate cusp order) the answer is house 1.
    """
    n = len(cusps)
    for i in range(n):
        current = cusps[i]
        nxt = cusps[(i + 1) % n]
        if nxt > current:
            if current <= longitude < nxt:
                return i + 1
        elif longitude >= current or longitude < nxt:
            return i + 1
    return 1


# ───────────────────────────── assembly ─────────────────────────────

def _dedup(items: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(items))

def _assert_finite(chart: Chart) -> None:
    values: List[float] = [chart.julian_day]
    for b in chart.bodies:
        values.extend((b.longitude, b.latitude, b.degree))
    values.extend(h.longitude for h in chart.houses)
    values.extend(a.orb for a in chart.aspects)
    if not all(math.isfinite(v) for v in values):
        raise ComputationError("chart contains non-finite values")

def assemble_chart(
    instant: JulianInstant,
    latitude: float,
    longitude: float,
    *,
    orbs: Optional[Mapping[str, float]] = None,
    warnings: Iterable[str] = (),
) -> Chart:
    jd = instant.jd
    if not math.isfinite(jd):
        raise ComputationError(f"julian day is not finite: {jd!r}")
    cusps = house_cusps(jd, latitude, longitude)

    bodies = tuple(
        PlacedBody(
            name=p.name,
            longitude=p.longitude,
            latitude=p.latitude,
            sign=zodiac_sign(p.longitude),
            degree=degree_in_sign(p.longitude),
            retrograde=p.retrograde,
            house=house_of(p.longitude, cusps),
        )
        for p in all_body_positions(jd)
    )
    houses = tuple(
        HouseRow(number=i + 1, longitude=c, sign=zodiac_sign(c))
        for i, c in enumerate(cusps)
    )
    aspects = tuple(compute_aspects([(b.name, b.longitude) for b in bodies], orbs))

    chart = Chart(
        bodies=bodies,
        houses=houses,
        aspects=aspects,
        julian_day=jd,
        utc_offset_hours=instant.utc_offset_hours,
        warnings=_dedup([*instant.warnings, *warnings, *house_warnings(latitude)]),
    )
    _assert_finite(chart)
    return chart

def compute_chart(request: ChartRequest, *, orbs: Optional[Mapping[str, float]] = None) -> Chart:
    instant = build_instant(request.date, request.time, request.timezone)
    chart = assemble_chart(instant, request.latitude, request.longitude, orbs=orbs)
    log.debug(
        "chart jd=%.6f lat=%.4f lon=%.4f aspects=%d warnings=%s",
        chart.julian_day, request.latitude, request.longitude, len(chart.aspects), list(chart.warnings),
    )
    return chart
