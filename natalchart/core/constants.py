# natalchart/core/constants.py
# -*- coding: utf-8 -*-
"""
Core constants & small helpers

Purpose
-------
Single source of truth for:
- the fixed body catalog (names + mean-longitude series coefficients)
- zodiac sign names
- canonical aspect angles and default orbs
- epoch constants (J2000.0, Julian century)
- tiny angle helpers (wrap/shortest delta)

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
- Catalog order is part of the public contract: body index 0..10 and sign
  index 0..11 are stable.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple

__all__ = [
    # epochs
    "J2000_JD", "DAYS_PER_CENTURY",
    # bodies
    "MeanLongitudeSeries", "BODY_CATALOG", "BODY_NAMES", "MOON_INDEX",
    "MOON_INCLINATION_DEG", "LATITUDE_SCALE_PER_INDEX", "RETROGRADE_BASELINE_CENTURIES",
    # signs
    "SIGN_NAMES", "SIGN_SPAN_DEG",
    # aspects
    "ASPECT_ANGLES_DEG", "DEFAULT_ORBS_DEG",
    # houses
    "HOUSE_COUNT", "HOUSE_CONVENTION",
    # helpers
    "wrap_deg", "delta_deg",
]

# ── epochs ───────────────────────────────────────────────────────────────────
J2000_JD: float = 2451545.0
DAYS_PER_CENTURY: float = 36525.0


# ── body catalog ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MeanLongitudeSeries:
    """L(T) = l0 + l1*T + l2*T^2 (degrees, T in Julian centuries from J2000)."""
    name: str
    l0: float
    l1: float
    l2: float


BODY_CATALOG: Tuple[MeanLongitudeSeries, ...] = (
    MeanLongitudeSeries("Sun",        280.46646,    36000.76983,      0.0003032),
    MeanLongitudeSeries("Moon",       218.3164477,  481267.88123421, -0.0015786),
    MeanLongitudeSeries("Mercury",    252.25032350, 149472.67411175,  0.00000535),
    MeanLongitudeSeries("Venus",      181.97909950, 58517.81538729,   0.00000165),
    MeanLongitudeSeries("Mars",       355.43299958, 19140.30268499,   0.00000261),
    MeanLongitudeSeries("Jupiter",    34.39644051,  3034.74612775,    0.00022330),
    MeanLongitudeSeries("Saturn",     49.95424423,  1222.49362201,   -0.00025200),
    MeanLongitudeSeries("Uranus",     313.23810451, 428.48202785,     0.00030390),
    MeanLongitudeSeries("Neptune",    304.88003400, 218.45945325,     0.00000480),
    MeanLongitudeSeries("Pluto",      238.92903833, 145.20780515,     0.0),
    MeanLongitudeSeries("North Node", 125.04452,    -1934.136261,     0.0020708),
)

BODY_NAMES: Tuple[str, ...] = tuple(b.name for b in BODY_CATALOG)

MOON_INDEX: int = 1
# Placeholder latitude model: sin(T) scaled by the Moon's mean inclination,
# or by index * 0.8 for every other body. Not a physical model.
MOON_INCLINATION_DEG: float = 5.14
LATITUDE_SCALE_PER_INDEX: float = 0.8

# Finite-difference baseline for the retrograde heuristic (0.01 Julian centuries)
RETROGRADE_BASELINE_CENTURIES: float = 0.01


# ── zodiac ───────────────────────────────────────────────────────────────────
SIGN_NAMES: Tuple[str, ...] = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)
SIGN_SPAN_DEG: float = 30.0


# ── aspect geometry ──────────────────────────────────────────────────────────
# Insertion order is the detection order for a single pair.
ASPECT_ANGLES_DEG: Dict[str, float] = {
    "conjunction": 0.0,
    "sextile": 60.0,
    "square": 90.0,
    "trine": 120.0,
    "opposition": 180.0,
}

DEFAULT_ORBS_DEG: Dict[str, float] = {
    "conjunction": 8.0,
    "sextile": 6.0,
    "square": 8.0,
    "trine": 8.0,
    "opposition": 8.0,
}


# ── houses ───────────────────────────────────────────────────────────────────
HOUSE_COUNT: int = 12
# Every cusp uses the ascendant formula on LST + 30°*i; not a named historical system.
HOUSE_CONVENTION: str = "ascendant-offset-30"


# ── helpers ──────────────────────────────────────────────────────────────────
def wrap_deg(x: float) -> float:
    """Normalize any angle to [0, 360)."""
    v = float(x) % 360.0
    # float modulo can round up to exactly 360.0 for tiny negative inputs
    return 0.0 if v >= 360.0 else v


def delta_deg(a2: float, a1: float) -> float:
    """Signed shortest step a1 → a2 in (-180, 180]."""
    d = (float(a2) - float(a1) + 180.0) % 360.0 - 180.0
    return 180.0 if d == -180.0 else d
