# natalchart/api/routes.py
"""
Natal chart API routes
- Chart: POST /api/calculate
- Time:  POST /api/julian-day
- Aspects for arbitrary longitudes: POST /api/aspects
- Ops: /api/health, /api/config, /api/timezones

Notes:
- Validation happens here; the core only ever sees parsed, finite inputs.
- Unparseable timezone strings are not rejected: they compute at UTC+0 and the
  response carries meta.warnings = ["timezone_unparsed_defaulted_to_utc"].
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from natalchart.version import VERSION
from natalchart.utils.config import aspect_orbs, timezone_choices
from natalchart.utils.metrics import MET_CHARTS, count_warnings
from natalchart.core.aspects import aspect_kinds, compute_aspects
from natalchart.core.chart import compute_chart
from natalchart.core.constants import BODY_NAMES, HOUSE_CONVENTION, SIGN_NAMES
from natalchart.core.errors import ComputationError, DegenerateGeometryError
from natalchart.core.houses import POLAR_ABSOLUTE_LIMIT_DEG, POLAR_SOFT_LIMIT_DEG
from natalchart.core.timescales import build_instant
from natalchart.core.validators import (
    MissingFieldError,
    ValidationError,
    parse_aspect_points,
    parse_chart_payload,
    parse_time_payload,
)

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _validation_error(e: ValidationError):
    code = "missing_field" if isinstance(e, MissingFieldError) else "validation_error"
    log.warning("%s at %s: %s", code, request.path, e.errors())
    return _json_error(code, e.errors(), 400)


def _body() -> Any:
    # silent=True: non-JSON bodies surface as a validation error, not a werkzeug 400 page
    return request.get_json(force=True, silent=True)


def _cfg():
    return getattr(current_app, "cfg", {}) or {}


# ───────────────────────── chart ─────────────────────────
@api.post("/api/calculate")
def calculate():
    try:
        req = parse_chart_payload(_body())
    except ValidationError as e:
        MET_CHARTS.labels(outcome="invalid").inc()
        return _validation_error(e)

    try:
        chart = compute_chart(req, orbs=aspect_orbs(_cfg()))
    except DegenerateGeometryError as e:
        MET_CHARTS.labels(outcome="degenerate").inc()
        log.warning("degenerate geometry for lat=%s lon=%s: %s", req.latitude, req.longitude, e.message)
        return jsonify({"ok": False, "error": e.code, "message": e.message}), 422
    except ComputationError as e:
        MET_CHARTS.labels(outcome="failed").inc()
        log.error("chart computation failed for lat=%s lon=%s: %s", req.latitude, req.longitude, e.message)
        return _json_error(e.code, http=500)

    MET_CHARTS.labels(outcome="ok").inc()
    count_warnings(chart.warnings)
    return jsonify({"ok": True, **chart.to_dict()}), 200


# ───────────────────────── time ─────────────────────────
@api.post("/api/julian-day")
def julian_day():
    try:
        req = parse_time_payload(_body())
    except ValidationError as e:
        return _validation_error(e)
    instant = build_instant(req.date, req.time, req.timezone)
    return jsonify({
        "ok": True,
        "julian_day": instant.jd,
        "centuries": instant.centuries,
        "utc_offset_hours": instant.utc_offset_hours,
        "warnings": list(instant.warnings),
    }), 200


# ───────────────────────── aspects ─────────────────────────
@api.post("/api/aspects")
def aspects():
    try:
        points = parse_aspect_points(_body())
    except ValidationError as e:
        return _validation_error(e)
    hits = compute_aspects(points, aspect_orbs(_cfg()))
    return jsonify({"ok": True, "aspects": [h.as_dict() for h in hits]}), 200


# ───────────────────────── ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "ok", "version": VERSION}), 200


@api.get("/api/timezones")
def timezones():
    return jsonify({"ok": True, "timezones": timezone_choices(_cfg())}), 200


@api.get("/api/config")
def config():
    return jsonify({
        "ok": True,
        "version": VERSION,
        "bodies": list(BODY_NAMES),
        "signs": list(SIGN_NAMES),
        "aspects": [k.as_dict() for k in aspect_kinds(aspect_orbs(_cfg()))],
        "houses": {
            "convention": HOUSE_CONVENTION,
            "polar_soft_limit_deg": POLAR_SOFT_LIMIT_DEG,
            "polar_absolute_limit_deg": POLAR_ABSOLUTE_LIMIT_DEG,
        },
    }), 200
