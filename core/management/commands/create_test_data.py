"""
Django management command to create test data for development and testing.

Creates:
- Service settings with the admin API enabled and an API key
- A test product (optionally HWID protected)
- Optionally, a test license owned by a Discord id
"""

import asyncio
import logging
import secrets
from datetime import datetime, timedelta, timezone

from django.core.management.base import BaseCommand

from core.domain.value_objects import Capacity
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.infrastructure.repositories.record_store_license_repository import (
    RecordStoreLicenseRepository,
)
from products.domain.product import Product
from products.infrastructure.repositories.record_store_product_repository import (
    RecordStoreProductRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to create test data."""

    help = "Create test data (admin API settings, product, license)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--skip-license",
            action="store_true",
            help="Skip creating test license",
        )
        parser.add_argument(
            "--api-key",
            type=str,
            default=None,
            help="Admin API key to store (default: keep existing or generate one)",
        )
        parser.add_argument(
            "--product-name",
            type=str,
            default="Test Product",
            help="Product name (default: Test Product)",
        )
        parser.add_argument(
            "--hwid-protection",
            action="store_true",
            help="Require a hardware id when validating the test product",
        )
        parser.add_argument(
            "--discord-id",
            type=str,
            default="100000000000000001",
            help="Owner of the test license",
        )
        parser.add_argument(
            "--max-ips",
            type=int,
            default=1,
            help="IP capacity of the test license (-1 unlimited, -2 untracked)",
        )

    def handle(self, *args, **options):
        api_key = self.configure_settings(options["api_key"])
        product, license_dto = asyncio.run(self.create_async_data(options))
        self.print_summary(api_key, product, license_dto)

    def configure_settings(self, api_key: str = None) -> str:
        """Enable the admin API and make sure an API key is stored."""

        def _configure(document):
            document["adminApiEnabled"] = True
            if api_key or not document.get("apiKey"):
                document["apiKey"] = api_key or secrets.token_urlsafe(32)

        service_settings = RecordStoreSettingsRepository().save(_configure)
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("Admin API enabled"))
        return service_settings.api_key

    async def create_async_data(self, options):
        product = await self.create_product(options["product_name"], options["hwid_protection"])
        license_dto = None
        if not options["skip_license"]:
            license_dto = await self.create_test_license(
                product, options["discord_id"], options["max_ips"]
            )
        return product, license_dto

    async def create_product(self, name: str, hwid_protection: bool) -> Product:
        """Create a test product unless one with the same name exists."""
        product_repo = RecordStoreProductRepository()
        for existing in await product_repo.list_all():
            if existing.name == name:
                # pylint: disable=no-member
                self.stdout.write(self.style.WARNING(f"Product '{name}' already exists"))
                return existing

        product = await product_repo.add(Product.create(name=name, hwid_protection=hwid_protection))
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created product: {product.name} ({product.id})"))
        return product

    async def create_test_license(self, product: Product, discord_id: str, max_ips: int):
        handler = IssueLicenseHandler(
            license_repository=RecordStoreLicenseRepository(),
            product_repository=RecordStoreProductRepository(),
        )
        license_dto = await handler.handle(
            IssueLicenseCommand(
                product_id=product.id,
                discord_id=discord_id,
                max_ips=Capacity.from_sentinel(max_ips),
                expires_at=datetime.now(timezone.utc) + timedelta(days=365),
            )
        )
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created license for {discord_id}"))
        return license_dto

    def print_summary(self, api_key: str, product: Product, license_dto=None):
        self.stdout.write("\n" + "=" * 60)
        self.stdout.write("TEST DATA SUMMARY")
        self.stdout.write("=" * 60)
        self.stdout.write(f"Admin API key: {api_key}")
        self.stdout.write(f"Product:       {product.name} ({product.id})")
        self.stdout.write(f"HWID required: {product.hwid_protection}")
        if license_dto:
            self.stdout.write(f"License key:   {license_dto.key}")
            self.stdout.write(f"Owner:         {license_dto.discord_id}")
        self.stdout.write("=" * 60)
