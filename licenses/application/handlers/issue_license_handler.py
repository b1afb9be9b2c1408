"""
IssueLicenseHandler.

Handles the issue license command.
"""
import logging

from core.domain.exceptions import ProductNotFoundError
from core.infrastructure.events import event_bus
from core.metrics import licenses_issued_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository

    async def handle(self, command: IssueLicenseCommand) -> LicenseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            LicenseDTO for the new license

        Raises:
            ProductNotFoundError: If the product is unknown
        """
        product = await self.product_repository.find_by_id(command.product_id)
        if not product:
            raise ProductNotFoundError(f"Product {command.product_id} not found")

        license = License.create(
            product_id=product.id,
            discord_id=command.discord_id,
            max_ips=command.max_ips,
            max_hwids=command.max_hwids,
            expires_at=command.expires_at,
            discord_username=command.discord_username,
            email=command.email,
            platform=command.platform or "custom",
            platform_user_id=command.platform_user_id,
            sub_user_discord_ids=command.sub_user_discord_ids,
        )
        license = await self.license_repository.add(license)

        licenses_issued_total.labels(product_id=product.id).inc()
        logger.info(
            "License issued",
            extra={"license_key": license.key, "product_id": product.id},
        )

        await event_bus.publish(
            LicenseIssued(
                license_key=license.key,
                product_id=product.id,
                discord_id=license.discord_id,
            )
        )

        return LicenseDTO.from_entity(license, product.name)
