"""
Integration tests for health and readiness endpoints.
"""
from unittest.mock import patch

import pytest
from django.urls import reverse


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthEndpoints:
    """Integration tests for health checks."""

    def test_health(self, client):
        response = client.get(reverse("health"))

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "license-validation-service"}

    def test_health_db(self, client):
        response = client.get(reverse("health-db"))

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_health_cache(self, client):
        response = client.get(reverse("health-cache"))

        assert response.status_code == 200
        assert response.json()["cache"] == "connected"

    def test_ready(self, client):
        """Test readiness covers database, cache and record store."""
        response = client.get(reverse("ready"))

        assert response.status_code == 200
        assert response.json() == {
            "status": "ready",
            "checks": {"database": True, "cache": True, "record_store": True},
        }

    @patch("core.views.check_record_store", return_value=False)
    def test_not_ready(self, _check, client):
        """Test a failing dependency makes the service not ready."""
        response = client.get(reverse("ready"))

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
        assert response.json()["checks"]["record_store"] is False
