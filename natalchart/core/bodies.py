# natalchart/core/bodies.py
# -*- coding: utf-8 -*-
"""
Body positions from first-order mean-longitude series.

This is a deliberately coarse model, not an ephemeris:
- longitude  = L0 + L1*T + L2*T^2, reduced to [0, 360)
- latitude   = sin(T) * scale, a placeholder (Moon: 5.14, others: index*0.8)
- retrograde = sign of the step from L(T - 0.01) to L(T), shortest way round

Public API:
    body_position(jd, index) -> BodyPosition
    all_body_positions(jd) -> tuple[BodyPosition, ...]
    mean_longitude(index, T) -> float   (unreduced)
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Tuple
import math

from natalchart.core.constants import (
    BODY_CATALOG,
    LATITUDE_SCALE_PER_INDEX,
    MOON_INCLINATION_DEG,
    MOON_INDEX,
    RETROGRADE_BASELINE_CENTURIES,
    delta_deg,
    wrap_deg,
)
from natalchart.core.timescales import centuries_since_j2000

__all__ = ["BodyPosition", "body_position", "all_body_positions", "mean_longitude"]


@dataclass(frozen=True)
class BodyPosition:
    index: int
    name: str
    longitude: float   # [0, 360)
    latitude: float    # signed, placeholder model
    retrograde: bool

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _series(index: int):
    # Negative indices would silently wrap on a tuple
    if not 0 <= index < len(BODY_CATALOG):
        raise IndexError(f"body index {index} outside catalog 0..{len(BODY_CATALOG) - 1}")
    return BODY_CATALOG[index]


def mean_longitude(index: int, T: float) -> float:
    s = _series(index)
    return s.l0 + s.l1 * T + s.l2 * T * T


def _latitude(index: int, T: float) -> float:
    scale = MOON_INCLINATION_DEG if index == MOON_INDEX else index * LATITUDE_SCALE_PER_INDEX
    return math.sin(T) * scale


def _is_retrograde(index: int, T: float) -> bool:
    now = wrap_deg(mean_longitude(index, T))
    before = wrap_deg(mean_longitude(index, T - RETROGRADE_BASELINE_CENTURIES))
    # A forward pass through 0° shows up as before >> now; delta_deg folds it back positive.
    return delta_deg(now, before) < 0.0


def body_position(jd: float, index: int) -> BodyPosition:
    T = centuries_since_j2000(jd)
    s = _series(index)
    return BodyPosition(
        index=index,
        name=s.name,
        longitude=wrap_deg(mean_longitude(index, T)),
        latitude=_latitude(index, T),
        retrograde=_is_retrograde(index, T),
    )


def all_body_positions(jd: float) -> Tuple[BodyPosition, ...]:
    return tuple(body_position(jd, i) for i in range(len(BODY_CATALOG)))
