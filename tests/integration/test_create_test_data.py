"""
Integration tests for the create_test_data management command.
"""
from io import StringIO

import pytest
from asgiref.sync import async_to_sync
from django.core.management import call_command


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateTestDataCommand:
    """Integration tests for create_test_data."""

    def test_creates_settings_product_and_license(
        self, settings_repository, product_repository, license_repository
    ):
        out = StringIO()

        call_command("create_test_data", "--api-key", "dev-key", "--max-ips", "-1", stdout=out)

        service_settings = settings_repository.load()
        assert service_settings.admin_api_enabled is True
        assert service_settings.api_key == "dev-key"
        products = async_to_sync(product_repository.list_all)()
        assert [p.name for p in products] == ["Test Product"]
        licenses = async_to_sync(license_repository.list_all)()
        assert len(licenses) == 1
        assert licenses[0].max_ips.is_unlimited
        assert "Admin API key: dev-key" in out.getvalue()

    def test_rerun_reuses_product_and_key(self, settings_repository, product_repository):
        call_command("create_test_data", "--skip-license", stdout=StringIO())
        first_key = settings_repository.load().api_key

        call_command("create_test_data", "--skip-license", stdout=StringIO())

        assert settings_repository.load().api_key == first_key
        assert len(async_to_sync(product_repository.list_all)()) == 1
