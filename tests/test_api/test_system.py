"""Tests for system API endpoints (health, config check)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from brandlens.llm import LLMClient

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

    from brandlens.config import Settings


class TestHealthCheck:
    def test_healthy(self, client: TestClient):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["db_connected"] is True

    def test_correlation_id_echoed(self, client: TestClient):
        resp = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc123"})
        assert resp.headers["X-Correlation-ID"] == "abc123"


class TestConfigCheck:
    def test_config_check(self, client: TestClient):
        resp = client.get("/api/v1/config/check")
        assert resp.status_code == 200
        configured = resp.json()["configured"]

        # Test settings carry both LLM keys but no webhook URL
        assert configured == {"openai": True, "anthropic": True, "analysis_webhook": False}

    def test_vendor_without_key_reported_missing(self, client: TestClient, settings: Settings):
        unconfigured = settings.model_copy(update={"anthropic_api_key": ""})
        client.app.state.llm = LLMClient(unconfigured)

        configured = client.get("/api/v1/config/check").json()["configured"]
        assert configured["openai"] is True
        assert configured["anthropic"] is False
