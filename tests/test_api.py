"""Tests for the internal API gateway.

Uses FastAPI's TestClient with the golden catalog and an in-memory cache —
no Redis or catalog file needed.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from pcfinder.api import internal
from pcfinder.api.app import create_app
from pcfinder.cache.redis_cache import InMemoryCache
from pcfinder.catalog.repository import CatalogProvider
from pcfinder.errors import CatalogUnavailable
from pcfinder.orchestrator.facade import RecommendationFacade


# ──────────────────────────────────────────────
# Fixtures
# ──────────────────────────────────────────────


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def client(golden_catalog, cache):
    app = create_app(catalog_provider=CatalogProvider(lambda: golden_catalog), cache=cache)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def broken_client(cache):
    def _fail():
        raise CatalogUnavailable("Catalog file not found: /missing.json")

    app = create_app(catalog_provider=CatalogProvider(_fail), cache=cache)
    with TestClient(app) as c:
        yield c


# ──────────────────────────────────────────────
# Root & Health
# ──────────────────────────────────────────────


class TestRoot:
    def test_root_returns_gateway_info(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["engine"] == "PC Finder"
        assert "internal" in data["gateways"]

    def test_health(self, client):
        resp = client.get("/internal/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["catalog_entries"] == 10
        assert data["cache_available"] is True

    def test_health_degraded_without_catalog(self, broken_client):
        data = broken_client.get("/internal/health").json()
        assert data["status"] == "degraded"
        assert data["catalog_loaded"] is False


# ──────────────────────────────────────────────
# Recommend
# ──────────────────────────────────────────────


class TestRecommend:
    def test_golden_profile(self, client, golden_profile):
        resp = client.post("/internal/recommend", json=golden_profile)
        assert resp.status_code == 200
        data = resp.json()
        assert data["parts"]["cpu"] == "AMD Ryzen 5 7600"
        assert data["grade"] == "B"
        assert data["profile"] == "Mid-Range Gaming"
        assert data["totalPrice"] == 1066.0
        assert data["fulfilment"]["etaDays"] == 5
        assert "caseFans" not in data["parts"]

    def test_result_cached(self, client, cache, golden_profile):
        first = client.post("/internal/recommend", json=golden_profile).json()
        assert len(cache._store) == 1
        second = client.post("/internal/recommend", json=golden_profile).json()
        assert first == second

    def test_new_month_recomputes(self, client, cache, golden_catalog, golden_profile, monkeypatch):
        today = [date(2025, 6, 15)]
        monkeypatch.setattr(
            internal, "_facade",
            lambda: RecommendationFacade(golden_catalog, clock=lambda: today[0]),
        )
        client.post("/internal/recommend", json=golden_profile)
        client.post("/internal/recommend", json=golden_profile)
        assert len(cache._store) == 1

        today[0] = date(2025, 7, 1)
        resp = client.post("/internal/recommend", json=golden_profile)
        assert resp.status_code == 200
        assert len(cache._store) == 2

    def test_invalid_profile_is_422(self, client, golden_profile):
        resp = client.post("/internal/recommend", json={**golden_profile, "purpose": "mining"})
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["field"] == "purpose"

    def test_budget_too_low_is_422(self, client, golden_profile):
        resp = client.post("/internal/recommend", json={**golden_profile, "budget": 250})
        assert resp.status_code == 422
        assert resp.json()["errors"] == [{"field": "budget", "message": "budget too low"}]

    def test_catalog_unavailable_is_503(self, broken_client, golden_profile):
        resp = broken_client.post("/internal/recommend", json=golden_profile)
        assert resp.status_code == 503


# ──────────────────────────────────────────────
# Compatibility Check
# ──────────────────────────────────────────────


class TestCompatibilityCheck:
    def test_matching_platform(self, client):
        build = {
            "cpu": {"id": "c", "name": "Ryzen 5 7600", "category": "cpu", "price": 199,
                    "tags": {"sockets": ["AM5"]}, "specs": {"cores": 6}},
            "motherboard": {"id": "m", "name": "B650M", "category": "motherboard", "price": 129,
                            "tags": {"sockets": ["AM5"], "memory_type": "DDR5"}},
        }
        resp = client.post("/internal/compatibility/check", json=build)
        assert resp.status_code == 200
        data = resp.json()
        assert data["compatible"] is True
        assert data["grade"] in {"A", "B", "C", "D", "E", "F"}

    def test_socket_mismatch(self, client):
        build = {
            "cpu": {"id": "c", "name": "Core i5", "category": "cpu", "price": 169,
                    "tags": {"sockets": ["LGA1700"]}},
            "motherboard": {"id": "m", "name": "B650M", "category": "motherboard", "price": 129,
                            "tags": {"sockets": ["AM5"]}},
        }
        data = client.post("/internal/compatibility/check", json=build).json()
        assert data["compatible"] is False
        assert data["issues"][0]["rule"] == "cpu_motherboard_socket"
        assert data["issues"][0]["categoryPair"] == ["cpu", "motherboard"]


# ──────────────────────────────────────────────
# Sessions
# ──────────────────────────────────────────────


class TestSessions:
    def test_save_then_load(self, client, golden_profile):
        saved = client.put("/internal/sessions/abc123", json=golden_profile)
        assert saved.status_code == 200
        assert saved.json()["persisted"] is True

        loaded = client.get("/internal/sessions/abc123")
        assert loaded.status_code == 200
        data = loaded.json()
        assert data["answers"] == golden_profile
        assert data["recommendation"]["grade"] == "B"
        assert "savedAt" in data

    def test_unknown_session_is_404(self, client):
        assert client.get("/internal/sessions/missing").status_code == 404

    def test_invalid_answers_not_saved(self, client):
        resp = client.put("/internal/sessions/bad", json={"purpose": "gaming"})
        assert resp.status_code == 422
        assert client.get("/internal/sessions/bad").status_code == 404
