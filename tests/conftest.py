"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from audit.infrastructure.repositories.record_store_audit_log_repository import (
    RecordStoreAuditLogRepository,
)
from blacklist.infrastructure.repositories.record_store_blacklist_repository import (
    RecordStoreBlacklistRepository,
)
from core.domain.value_objects import Capacity
from core.infrastructure.events import event_bus
from core.infrastructure.record_store import get_record_store
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)
from licenses.domain.license import License
from licenses.infrastructure.repositories.record_store_license_repository import (
    LICENSES_COLLECTION,
    RecordStoreLicenseRepository,
    license_to_record,
)
from products.domain.product import Product
from products.infrastructure.repositories.record_store_product_repository import (
    PRODUCTS_COLLECTION,
    RecordStoreProductRepository,
    product_to_record,
)
from validation.application.handlers.validate_license_handler import ValidateLicenseHandler

OWNER_ID = "100000000000000001"
SUB_USER_ID = "100000000000000002"
STRANGER_ID = "100000000000000003"
ADMIN_API_KEY = "test-admin-key"


@pytest.fixture(autouse=True)
def reset_process_state():
    """Give every test a fresh record store and an empty event bus."""
    get_record_store.cache_clear()
    event_bus.clear()
    yield
    get_record_store.cache_clear()
    event_bus.clear()


@pytest.fixture
def record_store():
    """Fixture for the process-wide record store (in-memory under test settings)."""
    return get_record_store()


@pytest.fixture
def license_repository(record_store):
    """Fixture for LicenseRepository."""
    return RecordStoreLicenseRepository(record_store)


@pytest.fixture
def product_repository(record_store):
    """Fixture for ProductRepository."""
    return RecordStoreProductRepository(record_store)


@pytest.fixture
def blacklist_repository(record_store):
    """Fixture for BlacklistRepository."""
    return RecordStoreBlacklistRepository(record_store)


@pytest.fixture
def audit_log_repository(record_store):
    """Fixture for AuditLogRepository."""
    return RecordStoreAuditLogRepository(record_store)


@pytest.fixture
def settings_repository(record_store):
    """Fixture for the service settings repository."""
    return RecordStoreSettingsRepository(record_store)


@pytest.fixture
def product(record_store):
    """Fixture for a Product without HWID protection, saved in the store."""
    product = Product.create(name="Test Product", product_id="prod-basic")
    record_store.append(PRODUCTS_COLLECTION, product_to_record(product))
    return product


@pytest.fixture
def hwid_product(record_store):
    """Fixture for an HWID protected Product, saved in the store."""
    product = Product.create(name="Protected Product", hwid_protection=True, product_id="prod-hwid")
    record_store.append(PRODUCTS_COLLECTION, product_to_record(product))
    return product


@pytest.fixture
def make_license(record_store, product):
    """
    Fixture returning a factory that saves a License.

    Defaults: owned by OWNER_ID, one IP, one HWID, expiring in 30 days.
    """

    def _make(**overrides):
        values = {
            "product_id": product.id,
            "discord_id": OWNER_ID,
            "max_ips": Capacity.bounded(1),
            "max_hwids": Capacity.bounded(1),
            "expires_at": (datetime.now(timezone.utc) + timedelta(days=30)).replace(microsecond=0),
        }
        values.update(overrides)
        license = License.create(**values)
        record_store.transform(
            LICENSES_COLLECTION, lambda records: records.insert(0, license_to_record(license))
        )
        return license

    return _make


@pytest.fixture
def validation_handler(
    license_repository,
    product_repository,
    blacklist_repository,
    audit_log_repository,
    settings_repository,
):
    """Fixture for the validation engine, without geolocation."""
    return ValidateLicenseHandler(
        license_repository=license_repository,
        product_repository=product_repository,
        blacklist_repository=blacklist_repository,
        audit_log_repository=audit_log_repository,
        settings_repository=settings_repository,
    )


@pytest.fixture
def admin_settings(settings_repository):
    """Fixture enabling the admin API with ADMIN_API_KEY."""

    def _enable(document):
        document["adminApiEnabled"] = True
        document["apiKey"] = ADMIN_API_KEY

    return settings_repository.save(_enable)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_settings):
    """Fixture for a DRF API client carrying the admin API key."""
    api_client.credentials(HTTP_X_API_KEY=ADMIN_API_KEY)
    return api_client
