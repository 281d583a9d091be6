import base64

from natalchart.core.constants import BODY_NAMES


def _j2000(**kw):
    body = {"date": "2000-01-01", "time": "12:00", "latitude": 0.0, "longitude": 0.0, "timezone": "UTC+0"}
    body.update(kw)
    return body


def test_health(client):
    rv = client.get("/api/health")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ok"] is True and data["status"] == "ok"
    assert "version" in data

    assert client.get("/healthz").get_json()["status"] == "ok"


def test_calculate(client, sample_payload):
    rv = client.post("/api/calculate", json=sample_payload)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ok"] is True
    assert [p["name"] for p in data["planets"]] == list(BODY_NAMES)
    assert [h["number"] for h in data["houses"]] == list(range(1, 13))
    for p in data["planets"]:
        assert 0.0 <= p["longitude"] < 360.0
        assert 0.0 <= p["degree"] < 30.0
        assert 1 <= p["house"] <= 12
        assert isinstance(p["retrograde"], bool)
    for a in data["aspects"]:
        assert set(a) == {"planet1", "planet2", "aspect", "angle", "orb"}
    assert data["meta"]["utc_offset_hours"] == 1
    assert data["meta"]["warnings"] == []


def test_calculate_at_epoch(client):
    data = client.post("/api/calculate", json=_j2000()).get_json()
    assert data["meta"]["julian_day"] == 2451545.0
    sun = data["planets"][0]
    assert abs(sun["longitude"] - 280.46646) < 1e-9
    assert sun["sign"] == "Capricorn"


def test_calculate_is_deterministic(client, sample_payload):
    first = client.post("/api/calculate", json=sample_payload).data
    second = client.post("/api/calculate", json=sample_payload).data
    assert first == second


def test_missing_field(client, sample_payload):
    body = dict(sample_payload)
    del body["latitude"]
    rv = client.post("/api/calculate", json=body)
    assert rv.status_code == 400
    data = rv.get_json()
    assert data["ok"] is False and data["error"] == "missing_field"
    assert data["details"][0]["loc"] == ["latitude"]


def test_malformed_input(client, sample_payload):
    rv = client.post("/api/calculate", json=dict(sample_payload, date="04/11/1992"))
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "validation_error"

    rv = client.post("/api/calculate", data="not json", content_type="application/json")
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "validation_error"


def test_pole_is_degenerate(client):
    rv = client.post("/api/calculate", json=_j2000(latitude=90))
    assert rv.status_code == 422
    data = rv.get_json()
    assert data["ok"] is False and data["error"] == "degenerate_geometry"


def test_high_latitude_warns(client):
    data = client.post("/api/calculate", json=_j2000(latitude=70)).get_json()
    assert "polar_latitude_houses_unstable" in data["meta"]["warnings"]


def test_unparsed_timezone_defaults(client):
    rv = client.post("/api/calculate", json=_j2000(timezone="Europe/Paris"))
    assert rv.status_code == 200
    meta = rv.get_json()["meta"]
    assert meta["utc_offset_hours"] == 0
    assert meta["julian_day"] == 2451545.0
    assert meta["warnings"] == ["timezone_unparsed_defaulted_to_utc"]


def test_unhandled_error_is_generic(client, sample_payload, monkeypatch):
    import natalchart.api.routes as routes

    def boom(*_a, **_kw):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(routes, "compute_chart", boom)
    rv = client.post("/api/calculate", json=sample_payload)
    assert rv.status_code == 500
    data = rv.get_json()
    assert data["ok"] is False and data["error"] == "computation_failed"
    assert "secret" not in rv.get_data(as_text=True)


def test_julian_day(client):
    rv = client.post("/api/julian-day", json={"date": "2000-01-01", "time": "13:00", "timezone": "UTC+1"})
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["julian_day"] == 2451545.0
    assert data["centuries"] == 0.0
    assert data["utc_offset_hours"] == 1
    assert data["warnings"] == []

    rv = client.post("/api/julian-day", json={"date": "2000-01-01"})
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "missing_field"


def test_aspects(client):
    body = {"bodies": [{"name": "A", "longitude": 10}, {"name": "B", "longitude": 190}]}
    rv = client.post("/api/aspects", json=body)
    assert rv.status_code == 200
    hits = rv.get_json()["aspects"]
    assert len(hits) == 1
    assert hits[0]["planet1"] == "A" and hits[0]["planet2"] == "B"
    assert hits[0]["aspect"] == "opposition"
    assert hits[0]["orb"] == 0.0

    rv = client.post("/api/aspects", json={"bodies": [{"name": "A", "longitude": "x"}]})
    assert rv.status_code == 400


def test_timezones(client):
    tzs = client.get("/api/timezones").get_json()["timezones"]
    assert len(tzs) == 25
    assert tzs[0] == "UTC-12" and tzs[-1] == "UTC+12"
    assert "UTC+0" in tzs


def test_config(client):
    data = client.get("/api/config").get_json()
    assert data["bodies"] == list(BODY_NAMES)
    assert len(data["signs"]) == 12
    assert [a["name"] for a in data["aspects"]] == ["conjunction", "sextile", "square", "trine", "opposition"]
    assert data["houses"]["convention"] == "ascendant-offset-30"


def test_metrics_requires_auth(client, monkeypatch):
    monkeypatch.delenv("METRICS_USER", raising=False)
    monkeypatch.delenv("METRICS_PASS", raising=False)
    assert client.get("/metrics").status_code == 401


def test_metrics_with_credentials(client, monkeypatch):
    monkeypatch.setenv("METRICS_USER", "ops")
    monkeypatch.setenv("METRICS_PASS", "s3cret")
    client.get("/api/health")
    token = base64.b64encode(b"ops:s3cret").decode("ascii")
    rv = client.get("/metrics", headers={"Authorization": f"Basic {token}"})
    assert rv.status_code == 200
    assert b"natal_api_requests_total" in rv.data

    bad = base64.b64encode(b"ops:wrong").decode("ascii")
    assert client.get("/metrics", headers={"Authorization": f"Basic {bad}"}).status_code == 401


def test_oversized_numbers_are_client_errors(client, sample_payload):
    raw = '{"date": "1992-11-04", "time": "05:25", "latitude": 1%s, "longitude": 2.35, "timezone": "UTC+1"}' % ("0" * 400)
    rv = client.post("/api/calculate", data=raw, content_type="application/json")
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "validation_error"

    raw = '{"bodies": [{"name": "A", "longitude": 1%s}]}' % ("0" * 400)
    rv = client.post("/api/aspects", data=raw, content_type="application/json")
    assert rv.status_code == 400

    rv = client.post("/api/calculate", json=dict(sample_payload, timezone="UTC+" + "9" * 400))
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "validation_error"


def test_computation_failure_log_omits_birth_data(client, sample_payload, monkeypatch, caplog):
    import logging

    import natalchart.api.routes as routes
    from natalchart.core.errors import ComputationError

    def fail(*_a, **_kw):
        raise ComputationError("chart contains non-finite values")

    monkeypatch.setattr(routes, "compute_chart", fail)
    caplog.set_level(logging.ERROR, logger="natalchart.api.routes")
    rv = client.post("/api/calculate", json=sample_payload)
    assert rv.status_code == 500
    assert rv.get_json()["error"] == "computation_failed"
    assert "lat=48.8566" in caplog.text
    assert "1992-11-04" not in caplog.text
    assert "05:25" not in caplog.text
