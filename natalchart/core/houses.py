# natalchart/core/houses.py
from __future__ import annotations

"""
House cusps from sidereal time and observer latitude.

Convention (the only one implemented):
    Every cusp i = 0..11 runs the ascendant formula on θ = LST + 30°·i
        cusp = atan2(cos θ, −sin θ·cos ε − tan φ·sin ε)
    This is NOT Placidus, Koch or any other named historical system; it is a
    single ascendant-style rule offset by 30° per house. Cusps are therefore
    not generally 30° apart and the sequence may wrap past 360° → 0°.

POLAR POLICY
1) |lat| ≥ POLAR_ABSOLUTE_LIMIT_DEG → DegenerateGeometryError (tan φ blows up).
2) |lat| > POLAR_SOFT_LIMIT_DEG     → cusps returned, warning attached by callers.
3) Any non-finite cusp               → DegenerateGeometryError. Never clamped.
"""

from typing import Final, List, Tuple
import math
import os

from natalchart.core.constants import HOUSE_COUNT, J2000_JD, wrap_deg
from natalchart.core.errors import DegenerateGeometryError
from natalchart.core.timescales import centuries_since_j2000

__all__ = [
    "POLAR_SOFT_LIMIT_DEG",
    "POLAR_ABSOLUTE_LIMIT_DEG",
    "POLAR_WARNING",
    "gmst_deg",
    "local_sidereal_time_deg",
    "mean_obliquity_deg",
    "cusp_longitude",
    "house_cusps",
    "house_warnings",
]

# ──────────────────────────────────────────────────────────────────────────────
# Environment / policy knobs
# ──────────────────────────────────────────────────────────────────────────────
POLAR_SOFT_LIMIT_DEG: Final[float] = float(os.getenv("NATAL_POLAR_SOFT_LAT", "66.0"))
POLAR_ABSOLUTE_LIMIT_DEG: Final[float] = 89.999999  # guard near exact poles
POLAR_WARNING: Final[str] = "polar_latitude_houses_unstable"


# ──────────────────────────────────────────────────────────────────────────────
# Sidereal time & obliquity
# ──────────────────────────────────────────────────────────────────────────────
def gmst_deg(jd: float) -> float:
    """Greenwich Mean Sidereal Time (degrees, [0, 360)) via the IAU cubic."""
    T = centuries_since_j2000(jd)
    theta = (
        280.46061837
        + 360.98564736629 * (float(jd) - J2000_JD)
        + 0.000387933 * T * T
        - T * T * T / 38710000.0
    )
    return wrap_deg(theta)


def local_sidereal_time_deg(jd: float, longitude: float) -> float:
    """LST with east-positive observer longitude."""
    return wrap_deg(gmst_deg(jd) + float(longitude))


def mean_obliquity_deg(T: float) -> float:
    return 23.439291 - 0.0130042 * T


def cusp_longitude(angle_deg: float, obliquity_deg: float, latitude_deg: float) -> float:
    """Ascendant-style transform of a sidereal angle to an ecliptic longitude."""
    th = math.radians(angle_deg)
    eps = math.radians(obliquity_deg)
    phi = math.radians(latitude_deg)
    asc = math.degrees(math.atan2(
        math.cos(th),
        -math.sin(th) * math.cos(eps) - math.tan(phi) * math.sin(eps),
    ))
    return wrap_deg(asc)


# ──────────────────────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────────────────────
def _check_latitude(latitude: float) -> None:
    if not math.isfinite(latitude):
        raise DegenerateGeometryError(f"latitude is not finite: {latitude!r}")
    if abs(latitude) >= POLAR_ABSOLUTE_LIMIT_DEG:
        raise DegenerateGeometryError(
            f"latitude {latitude}° is at a pole; tan(latitude) is undefined and "
            "house cusps cannot be computed"
        )


def house_warnings(latitude: float) -> List[str]:
    """Non-fatal warnings for an observer latitude that is still computable."""
    if abs(float(latitude)) > POLAR_SOFT_LIMIT_DEG:
        return [POLAR_WARNING]
    return []


def house_cusps(jd: float, latitude: float, longitude: float) -> Tuple[float, ...]:
    """
    Twelve cusp longitudes in [0, 360); index 0 is house 1.

    Raises DegenerateGeometryError for polar latitudes or non-finite results.
    """
    latitude = float(latitude)
    _check_latitude(latitude)

    T = centuries_since_j2000(jd)
    lst = local_sidereal_time_deg(jd, longitude)
    obliquity = mean_obliquity_deg(T)

    cusps: List[float] = []
    for i in range(HOUSE_COUNT):
        angle = (lst + i * 30.0) % 360.0
        cusp = cusp_longitude(angle, obliquity, latitude)
        if not math.isfinite(cusp):
            raise DegenerateGeometryError(
                f"house {i + 1} cusp is not finite (lat={latitude}, lon={longitude})"
            )
        cusps.append(cusp)
    return tuple(cusps)
