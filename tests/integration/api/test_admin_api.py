"""
Integration tests for the admin API.
"""
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.urls import reverse

from core.domain.value_objects import Capacity, EvidenceKind

OWNER_ID = "100000000000000001"
SUB_USER_ID = "100000000000000002"
ADMIN_API_KEY = "test-admin-key"


def error_code(response):
    return response.json()["error"]["code"]


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminAuthentication:
    """Integration tests for the admin key and switches."""

    def test_missing_key(self, api_client, admin_settings):
        response = api_client.get(reverse("licenses"))

        assert response.status_code == 401
        assert error_code(response) == "INVALID_API_KEY"

    def test_wrong_key(self, api_client, admin_settings):
        api_client.credentials(HTTP_X_API_KEY="wrong")

        response = api_client.get(reverse("licenses"))

        assert response.status_code == 401

    def test_bearer_token(self, api_client, admin_settings):
        """Test the key is also accepted as a bearer token."""
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {ADMIN_API_KEY}")

        response = api_client.get(reverse("licenses"))

        assert response.status_code == 200

    def test_admin_api_disabled(self, api_client, settings_repository):
        """Test the whole admin API can be switched off."""
        settings_repository.save(lambda document: document.update(apiKey=ADMIN_API_KEY))
        api_client.credentials(HTTP_X_API_KEY=ADMIN_API_KEY)

        response = api_client.get(reverse("licenses"))

        assert response.status_code == 401
        assert error_code(response) == "ADMIN_API_DISABLED"

    def test_endpoint_disabled(self, admin_client, settings_repository):
        """Test a single endpoint switch; its siblings stay available."""
        settings_repository.save(
            lambda document: document["adminApiEndpoints"].update(createLicense=False)
        )

        response = admin_client.post(reverse("licenses"), {}, format="json")
        assert response.status_code == 403
        assert error_code(response) == "ENDPOINT_DISABLED"

        assert admin_client.get(reverse("licenses")).status_code == 200

    def test_validate_endpoint_needs_no_key(self, api_client, admin_settings):
        """Test the public route is not guarded."""
        response = api_client.post(reverse("validate-license"), {}, format="json")

        assert response.status_code == 400


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAdminAPI:
    """Integration tests for license management."""

    def test_issue_and_list(self, admin_client, product):
        """Test issuing a license and listing it."""
        response = admin_client.post(
            reverse("licenses"),
            {
                "productId": product.id,
                "discordId": OWNER_ID,
                "maxIps": -1,
                "maxHwids": -2,
                "email": "owner@example.com",
                "expiresAt": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
                "subUserDiscordIds": [SUB_USER_ID],
            },
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["key"].startswith("LF-")
        assert body["productName"] == "Test Product"
        assert body["maxIps"] == -1
        assert body["maxHwids"] == -2
        assert body["status"] == "active"
        assert body["isExpired"] is False
        assert body["subUserDiscordIds"] == [SUB_USER_ID]
        assert body["validations"] == 0

        listed = admin_client.get(reverse("licenses")).json()
        assert [item["key"] for item in listed] == [body["key"]]

    def test_issue_bounded_capacity(self, admin_client, product):
        response = admin_client.post(
            reverse("licenses"),
            {"productId": product.id, "discordId": OWNER_ID, "maxIps": 1, "maxHwids": 3},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["maxIps"] == 1
        assert response.json()["maxHwids"] == 3

    def test_issue_unknown_product(self, admin_client):
        response = admin_client.post(
            reverse("licenses"), {"productId": "missing", "discordId": OWNER_ID}, format="json"
        )

        assert response.status_code == 404
        assert error_code(response) == "INVALID_REFERENCE"

    def test_issue_invalid_capacity(self, admin_client, product):
        response = admin_client.post(
            reverse("licenses"),
            {"productId": product.id, "discordId": OWNER_ID, "maxIps": -3},
            format="json",
        )

        assert response.status_code == 400
        assert error_code(response) == "INVALID_INPUT"
        assert "maxIps" in response.json()["error"]["fields"]

    def test_set_status(self, admin_client, make_license):
        license = make_license()
        url = reverse("license-detail", kwargs={"key": license.key})

        response = admin_client.patch(url, {"status": "inactive"}, format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "inactive"

        response = admin_client.patch(url, {"status": "paused"}, format="json")
        assert response.status_code == 400

    def test_delete(self, admin_client, make_license):
        license = make_license()
        url = reverse("license-detail", kwargs={"key": license.key})

        assert admin_client.delete(url).status_code == 204

        response = admin_client.delete(url)
        assert response.status_code == 404
        assert error_code(response) == "LICENSE_NOT_FOUND"

    def test_renew(self, admin_client, make_license):
        """Test renewing reactivates an expired license."""
        license = make_license(expires_at=datetime.now(timezone.utc) - timedelta(days=1))
        new_expiration = datetime.now(timezone.utc) + timedelta(days=90)

        response = admin_client.patch(
            reverse("renew-license", kwargs={"key": license.key}),
            {"expiresAt": new_expiration.isoformat()},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "active"
        assert response.json()["isExpired"] is False

    def test_patch_identities(self, admin_client, make_license):
        license = make_license()
        url = reverse("license-identities", kwargs={"key": license.key})

        response = admin_client.patch(url, {"ip": "203.0.113.5", "hwid": "HW-1"}, format="json")

        assert response.status_code == 200
        assert response.json()["allowedIps"] == ["203.0.113.5"]
        assert response.json()["allowedHwids"] == ["HW-1"]

        response = admin_client.patch(url, {"ip": "203.0.113.6"}, format="json")
        assert response.status_code == 409
        assert error_code(response) == "IP_CAPACITY"

    def test_patch_untracked_identity(self, admin_client, make_license):
        license = make_license(max_hwids=Capacity.untracked())

        response = admin_client.patch(
            reverse("license-identities", kwargs={"key": license.key}),
            {"hwid": "HW-1"},
            format="json",
        )

        assert response.status_code == 409
        assert error_code(response) == "HWID_NOT_TRACKED"

    def test_sub_users(self, admin_client, make_license):
        license = make_license()
        url = reverse("license-sub-users", kwargs={"key": license.key})

        response = admin_client.post(url, {"subUserDiscordId": SUB_USER_ID}, format="json")
        assert response.status_code == 200
        assert response.json()["subUserDiscordIds"] == [SUB_USER_ID]

        response = admin_client.post(url, {"subUserDiscordId": SUB_USER_ID}, format="json")
        assert response.status_code == 409
        assert error_code(response) == "DUPLICATE_SUB_USER"

        response = admin_client.post(url, {"subUserDiscordId": OWNER_ID}, format="json")
        assert response.status_code == 400
        assert error_code(response) == "OWNER_AS_SUB_USER"

        response = admin_client.delete(url, {"subUserDiscordId": SUB_USER_ID}, format="json")
        assert response.status_code == 200
        assert response.json()["subUserDiscordIds"] == []


@pytest.mark.django_db
@pytest.mark.integration
class TestBlacklistAdminAPI:
    """Integration tests for blacklist management."""

    def test_entries(self, admin_client):
        url = reverse("blacklist")

        response = admin_client.post(url, {"type": "ip", "value": "203.0.113.5"}, format="json")
        assert response.status_code == 200
        assert response.json() == {"ips": ["203.0.113.5"], "hwids": [], "discordIds": []}

        response = admin_client.post(url, {"type": "ip", "value": "203.0.113.5"}, format="json")
        assert response.status_code == 409
        assert error_code(response) == "DUPLICATE_BLACKLIST_ENTRY"

        response = admin_client.delete(url, {"type": "ip", "value": "203.0.113.5"}, format="json")
        assert response.status_code == 200
        assert admin_client.get(url).json()["ips"] == []

        response = admin_client.delete(url, {"type": "hwid", "value": "HW-1"}, format="json")
        assert response.status_code == 404
        assert error_code(response) == "BLACKLIST_ENTRY_NOT_FOUND"

    def test_invalid_entry_type(self, admin_client):
        response = admin_client.post(
            reverse("blacklist"), {"type": "email", "value": "x"}, format="json"
        )

        assert response.status_code == 400

    def test_blacklist_user(self, admin_client, make_license, license_repository):
        """Test blacklisting a user deactivates their licenses and blocks validation."""
        license = make_license()
        async_to_sync(license_repository.update)(
            license.key, lambda lic: lic.with_evidence({EvidenceKind.IP: "203.0.113.5"})
        )

        response = admin_client.post(reverse("blacklist-user", kwargs={"discord_id": OWNER_ID}))

        assert response.status_code == 200
        assert response.json()["discordIds"] == [OWNER_ID]
        assert response.json()["ips"] == ["203.0.113.5"]
        listed = admin_client.get(reverse("licenses")).json()
        assert listed[0]["status"] == "inactive"

        response = admin_client.delete(reverse("blacklist-user", kwargs={"discord_id": OWNER_ID}))
        assert response.status_code == 200
        assert response.json() == {"ips": [], "hwids": [], "discordIds": []}

    def test_blacklist_license_identifiers(self, admin_client, make_license):
        license = make_license()
        admin_client.patch(
            reverse("license-identities", kwargs={"key": license.key}),
            {"ip": "203.0.113.5", "hwid": "HW-1"},
            format="json",
        )

        response = admin_client.post(
            reverse("blacklist-license-identifiers", kwargs={"key": license.key})
        )

        assert response.status_code == 200
        assert response.json() == {"ips": ["203.0.113.5"], "hwids": ["HW-1"], "discordIds": []}


@pytest.mark.django_db
@pytest.mark.integration
class TestStatsAdminAPI:
    """Integration tests for statistics and bot usage."""

    def test_dashboard_stats(self, admin_client, make_license):
        license = make_license()
        admin_client.post(
            reverse("validate-license"),
            {"key": license.key, "discordId": OWNER_ID},
            format="json",
            REMOTE_ADDR="203.0.113.5",
        )
        admin_client.post(
            reverse("log-bot-usage"), {"command": "license", "userId": OWNER_ID}, format="json"
        )

        response = admin_client.get(reverse("stats"))

        assert response.status_code == 200
        body = response.json()
        assert body["totals"]["totalProducts"] == 1
        assert body["totals"]["totalLicenses"] == 1
        assert body["totals"]["activeLicenses"] == 1
        assert body["totals"]["totalValidations"] == 1
        assert body["totals"]["successfulValidations"] == 1
        assert body["totals"]["validationChangePercent"] == 100.0
        assert len(body["dailyValidations"]) == 7
        assert body["dailyValidations"][-1]["success"] == 1
        assert body["dailyCommandUsage"][-1]["commands"] == 1
        assert body["validationsByCountry"] == {}

    def test_ip_usage(self, admin_client, make_license):
        make_license(max_ips=Capacity.bounded(2))
        make_license(max_ips=Capacity.bounded(3))

        response = admin_client.get(reverse("user-ip-usage", kwargs={"discord_id": OWNER_ID}))

        assert response.status_code == 200
        assert response.json() == {"used": 0, "total": 5}

    def test_ip_usage_unlimited(self, admin_client, make_license):
        make_license(max_ips=Capacity.unlimited())

        response = admin_client.get(reverse("user-ip-usage", kwargs={"discord_id": OWNER_ID}))

        assert response.json() == {"used": 0, "total": None}

    def test_log_bot_usage(self, admin_client):
        response = admin_client.post(
            reverse("log-bot-usage"), {"command": "renew", "userId": "42"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["command"] == "renew"
        assert response.json()["userId"] == "42"

        response = admin_client.post(reverse("log-bot-usage"), {"command": "renew"}, format="json")
        assert response.status_code == 400
