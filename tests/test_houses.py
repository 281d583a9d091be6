# tests/test_houses.py
from __future__ import annotations

import math

import pytest
from hypothesis import given, strategies as st

from natalchart.core.constants import J2000_JD
from natalchart.core.errors import DegenerateGeometryError
from natalchart.core.houses import (
    POLAR_WARNING,
    cusp_longitude,
    gmst_deg,
    house_cusps,
    house_warnings,
    local_sidereal_time_deg,
    mean_obliquity_deg,
)

JD_RANGE = st.floats(min_value=2378496.5, max_value=2524593.5, allow_nan=False, allow_infinity=False)
LON = st.floats(min_value=-180.0, max_value=180.0, allow_nan=False, allow_infinity=False)


# ─────────────────────────────────────────────────────────────────────────────
# Sidereal time & obliquity
# ─────────────────────────────────────────────────────────────────────────────

def test_gmst_at_epoch() -> None:
    assert gmst_deg(J2000_JD) == pytest.approx(280.46061837, abs=1e-9)

def test_lst_adds_east_longitude_and_wraps() -> None:
    assert local_sidereal_time_deg(J2000_JD, 10.0) == pytest.approx(290.46061837, abs=1e-9)
    assert local_sidereal_time_deg(J2000_JD, 90.0) == pytest.approx(10.46061837, abs=1e-9)
    assert local_sidereal_time_deg(J2000_JD, -180.0) == pytest.approx(100.46061837, abs=1e-9)

def test_obliquity_linear_in_t() -> None:
    assert mean_obliquity_deg(0.0) == pytest.approx(23.439291)
    assert mean_obliquity_deg(1.0) == pytest.approx(23.439291 - 0.0130042)

@pytest.mark.parametrize("angle, expected", [(0.0, 90.0), (90.0, 180.0), (180.0, 270.0), (270.0, 0.0)])
def test_cusp_transform_on_equator(angle: float, expected: float) -> None:
    got = cusp_longitude(angle, 23.439291, 0.0)
    assert min(abs(got - expected), 360.0 - abs(got - expected)) < 1e-9


# ─────────────────────────────────────────────────────────────────────────────
# Cusps
# ─────────────────────────────────────────────────────────────────────────────

def test_twelve_cusps_and_first_is_ascendant_of_lst() -> None:
    cusps = house_cusps(J2000_JD, 48.85, 2.35)
    assert len(cusps) == 12
    lst = local_sidereal_time_deg(J2000_JD, 2.35)
    assert cusps[0] == pytest.approx(cusp_longitude(lst, mean_obliquity_deg(0.0), 48.85))

@given(jd=JD_RANGE, lat=st.floats(min_value=-89.0, max_value=89.0), lon=LON)
def test_cusps_in_range(jd: float, lat: float, lon: float) -> None:
    for c in house_cusps(jd, lat, lon):
        assert 0.0 <= c < 360.0

@given(jd=JD_RANGE, lat=st.floats(min_value=-60.0, max_value=60.0), lon=LON)
def test_cusps_increase_then_wrap_once(jd: float, lat: float, lon: float) -> None:
    cusps = house_cusps(jd, lat, lon)
    descents = sum(1 for i in range(12) if cusps[(i + 1) % 12] < cusps[i])
    assert descents == 1

def test_cusps_deterministic() -> None:
    assert house_cusps(2448930.5, 13.08, 80.27) == house_cusps(2448930.5, 13.08, 80.27)


# ─────────────────────────────────────────────────────────────────────────────
# Polar policy
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("lat", [90.0, -90.0, 89.9999995])
def test_pole_is_degenerate(lat: float) -> None:
    with pytest.raises(DegenerateGeometryError) as exc:
        house_cusps(J2000_JD, lat, 0.0)
    assert exc.value.code == "degenerate_geometry"

@pytest.mark.parametrize("lat, lon", [(float("nan"), 0.0), (10.0, float("nan")), (float("inf"), 0.0)])
def test_non_finite_geometry_is_degenerate(lat: float, lon: float) -> None:
    with pytest.raises(DegenerateGeometryError):
        house_cusps(J2000_JD, lat, lon)

def test_soft_polar_warning() -> None:
    assert house_warnings(70.0) == [POLAR_WARNING]
    assert house_warnings(-70.0) == [POLAR_WARNING]
    assert house_warnings(45.0) == []
    # still computable below the absolute limit
    assert all(math.isfinite(c) for c in house_cusps(J2000_JD, 89.0, 0.0))
