"""
Cache Admin API Tests

Tests for api/cache_router.py endpoints plus /api/health and /api/metrics.
Uses TestClient against the real app with a fake-clock cache installed as
the shared cache.
"""

import pytest
from fastapi.testclient import TestClient

from api.server import app


@pytest.fixture
def client(shared_cache):
    return TestClient(app)


class TestStatsEndpoint:
    """Tests for GET /api/cache/stats."""

    def test_stats_returns_counters(self, client, shared_cache):
        shared_cache.set("product:1", {"sku": "A-1"})
        shared_cache.get("product:1")
        shared_cache.get("product:2")

        response = client.get("/api/cache/stats")
        assert response.status_code == 200

        data = response.json()
        assert data["hits"] == 1
        assert data["misses"] == 1
        assert data["sets"] == 1
        assert data["current_size"] == 1
        assert data["total_requests"] == 2
        assert data["hit_rate"] == 0.5

    def test_stats_on_empty_cache(self, client):
        data = client.get("/api/cache/stats").json()
        assert data["current_size"] == 0
        assert data["hit_rate"] == 0.0


class TestKeyDeletion:
    """Tests for DELETE /api/cache/keys/{key}."""

    def test_delete_existing_key(self, client, shared_cache):
        shared_cache.set("user:42", {"id": "42"})

        response = client.delete("/api/cache/keys/user:42")
        assert response.status_code == 200
        assert response.json() == {"success": True, "removed": 1, "key": "user:42"}
        assert shared_cache.get("user:42") is None

    def test_delete_missing_key_still_succeeds(self, client):
        response = client.delete("/api/cache/keys/nothing-here")
        assert response.status_code == 200
        assert response.json()["removed"] == 0

    def test_delete_key_with_slash(self, client, shared_cache):
        shared_cache.set("report/daily", 1)
        response = client.delete("/api/cache/keys/report/daily")
        assert response.json()["key"] == "report/daily"
        assert "report/daily" not in shared_cache


class TestInvalidateEndpoint:
    """Tests for POST /api/cache/invalidate."""

    def test_invalidate_pattern(self, client, shared_cache):
        shared_cache.set("perm:42:can_use_pos", True)
        shared_cache.set("perm:42:can_view_reports", False)
        shared_cache.set("user:42", {"id": "42"})

        response = client.post("/api/cache/invalidate", json={"pattern": "perm:42:*"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "removed": 2, "pattern": "perm:42:*"}
        assert "user:42" in shared_cache

    def test_empty_pattern_rejected(self, client):
        response = client.post("/api/cache/invalidate", json={"pattern": ""})
        assert response.status_code == 422

    def test_missing_body_rejected(self, client):
        assert client.post("/api/cache/invalidate").status_code == 422


class TestMaintenanceEndpoints:
    """Tests for POST /api/cache/cleanup and /api/cache/users/{id}/clear."""

    def test_cleanup_sweeps_expired(self, client, shared_cache, clock):
        shared_cache.set("short", 1, ttl=5)
        shared_cache.set("long", 2, ttl=500)
        clock.advance(10)

        response = client.post("/api/cache/cleanup")
        assert response.status_code == 200
        assert response.json() == {"success": True, "removed": 1}
        assert "long" in shared_cache

    def test_clear_user(self, client, shared_cache):
        shared_cache.set("user:7", {"id": "7"})
        shared_cache.set("perm:7:can_use_pos", True)
        shared_cache.set("user:8", {"id": "8"})

        response = client.post("/api/cache/users/7/clear")
        assert response.status_code == 200
        assert response.json() == {"success": True, "removed": 2, "user_id": "7"}
        assert "user:8" in shared_cache

    def test_clear_user_with_wildcard_id_leaves_others(self, client, shared_cache):
        shared_cache.set("perm:5:can_use_pos", True)
        shared_cache.set("perm:*:can_use_pos", True)

        response = client.post("/api/cache/users/*/clear")
        assert response.json()["removed"] == 1
        assert "perm:5:can_use_pos" in shared_cache


class TestServiceEndpoints:
    """Tests for /api/health and /api/metrics."""

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["cache_enabled"] is True

    def test_metrics_exports_cache_gauges(self, client, shared_cache):
        shared_cache.set("k", "v")
        shared_cache.get("k")

        response = client.get("/api/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "perf_cache_hits 1" in response.text
        assert "perf_cache_current_size 1" in response.text
        assert "api_requests_total" in response.text

    def test_request_id_header_accepted(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-test"})
        assert response.status_code == 200
