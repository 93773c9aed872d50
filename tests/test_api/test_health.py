"""Tests for the health check endpoint and basic app setup."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    """Create a test client with inference disabled."""
    with patch("hoarder.inference.get_inference_client", return_value=None):
        from hoarder.main import app

        with TestClient(app) as c:
            yield c


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_response_body(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert "env" in data
        assert data["inference"] is None

    def test_health_reports_active_backend(self):
        backend = MagicMock()
        backend.backend = "ollama"
        with patch("hoarder.inference.get_inference_client", return_value=backend):
            from hoarder.main import app

            with TestClient(app) as c:
                assert c.get("/health").json()["inference"] == "ollama"
