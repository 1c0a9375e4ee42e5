"""
tests/test_health.py -- Integration tests for GET /health, /stats and /system-events.

Covers:
  - 200 response with status, version, and per-store components
  - No authentication required
  - /stats counts requests and reports uptime
  - unknown routes render the standard error envelope
"""

from __future__ import annotations


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _ = api_client
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == "1.0.0"
    assert data["components"] == {"auth_db": "ok", "directory_db": "ok"}


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    client, _ = api_client
    resp = client.get("/health", headers={})
    assert resp.status_code == 200


def test_health_degraded_when_store_fails(api_client, monkeypatch):
    from sqlalchemy.exc import OperationalError

    client, ctx = api_client

    def broken_ping():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(ctx.directory, "ping", broken_ping)
    data = client.get("/health").json()
    assert data["status"] == "degraded"
    assert data["components"]["directory_db"] == "error"
    assert data["components"]["auth_db"] == "ok"


def test_stats_counts_requests(api_client):
    client, _ = api_client
    before = client.get("/stats").json()["total_requests"]
    client.get("/health")
    after = client.get("/stats").json()
    assert after["total_requests"] == before + 2
    assert after["uptime_seconds"] >= 0
    assert after["start_time"]


def test_system_events_is_a_list(api_client):
    client, _ = api_client
    resp = client.get("/system-events")
    assert resp.status_code == 200
    assert isinstance(resp.json(), list)


def test_unknown_route_uses_error_envelope(api_client):
    client, _ = api_client
    resp = client.get("/no-such-route")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "http_404"
