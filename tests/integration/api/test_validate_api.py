"""
Integration tests for the public validation endpoint.
"""
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.urls import reverse

from blacklist.domain.blacklist import Blacklist

OWNER_ID = "100000000000000001"
STRANGER_ID = "100000000000000003"


@pytest.fixture
def validate(api_client):
    """Post a validation request from ``ip``."""

    def _validate(body, ip="203.0.113.5", **extra):
        return api_client.post(
            reverse("validate-license"), body, format="json", REMOTE_ADDR=ip, **extra
        )

    return _validate


@pytest.mark.django_db
@pytest.mark.integration
class TestValidateAPI:
    """Integration tests for POST /api/v1/validate."""

    def test_success(self, validate, make_license, license_repository):
        license = make_license()

        response = validate({"key": license.key, "discordId": OWNER_ID})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": "success",
            "message": "License key is valid",
        }
        stored = async_to_sync(license_repository.find_by_key)(license.key)
        assert stored.allowed_ips == ("203.0.113.5",)

    def test_success_with_sections(self, validate, make_license, settings_repository):
        """Test the body follows the validation response settings."""

        def _enable(document):
            document["validationResponse"]["license"]["enabled"] = True
            document["validationResponse"]["product"]["enabled"] = True

        settings_repository.save(_enable)
        license = make_license()

        body = validate({"key": license.key, "discordId": OWNER_ID}).json()

        assert body["license"]["license_key"] == license.key
        assert body["license"]["used_ips"] == ["203.0.113.5"]
        assert body["product"]["name"] == "Test Product"
        assert "customer" not in body

    def test_forwarded_for_first_hop(self, validate, make_license, license_repository):
        """Test the first X-Forwarded-For hop is the client address."""
        license = make_license()

        validate(
            {"key": license.key, "discordId": OWNER_ID},
            ip="10.0.0.2",
            HTTP_X_FORWARDED_FOR="198.51.100.7, 10.0.0.1",
        )

        stored = async_to_sync(license_repository.find_by_key)(license.key)
        assert stored.allowed_ips == ("198.51.100.7",)

    def test_missing_key(self, validate, audit_log_repository):
        response = validate({"discordId": OWNER_ID})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "status": "failure",
            "message": "Missing license key",
        }
        assert async_to_sync(audit_log_repository.list_validations)() == []

    def test_malformed_body(self, validate):
        response = validate({"key": ["not", "a", "string"]})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid input"

    @pytest.mark.parametrize(
        "body_overrides, status_code, reason",
        [
            ({"key": "LF-MISSING"}, 404, "not_found"),
            ({"discordId": STRANGER_ID}, 401, "unauthorized"),
        ],
    )
    def test_failures(self, validate, make_license, body_overrides, status_code, reason):
        license = make_license()
        body = {"key": license.key, "discordId": OWNER_ID}
        body.update(body_overrides)

        response = validate(body)

        assert response.status_code == status_code
        assert response.json()["success"] is False
        assert response.json()["status"] == "failure"
        assert response.json()["reason"] == reason

    def test_expired(self, validate, make_license):
        license = make_license(expires_at=datetime.now(timezone.utc) - timedelta(days=1))

        response = validate({"key": license.key, "discordId": OWNER_ID})

        assert response.status_code == 403
        assert response.json()["reason"] == "expired"

    def test_blacklisted(self, validate, make_license, blacklist_repository):
        license = make_license()
        async_to_sync(blacklist_repository.update)(lambda _: Blacklist(ips=("203.0.113.5",)))

        response = validate({"key": license.key, "discordId": OWNER_ID})

        assert response.status_code == 403
        assert response.json()["reason"] == "blacklisted"

    def test_capacity(self, validate, make_license, audit_log_repository):
        """Test a second address is refused and both attempts are logged."""
        license = make_license()
        validate({"key": license.key, "discordId": OWNER_ID}, ip="203.0.113.5")

        response = validate({"key": license.key, "discordId": OWNER_ID}, ip="203.0.113.6")

        assert response.status_code == 409
        assert response.json()["reason"] == "ip_capacity"
        logs = async_to_sync(audit_log_repository.list_validations)()
        assert [log.status.value for log in logs] == ["success", "failure"]

    def test_hwid_required(self, validate, make_license, hwid_product):
        license = make_license(product_id=hwid_product.id)

        response = validate({"key": license.key, "discordId": OWNER_ID})

        assert response.status_code == 400
        assert response.json()["reason"] == "hwid_required"

        response = validate({"key": license.key, "discordId": OWNER_ID, "hwid": "HW-1"})
        assert response.status_code == 200
