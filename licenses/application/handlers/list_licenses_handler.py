"""
ListLicensesHandler.

Returns every license with its product name resolved.
"""
from typing import List

from licenses.application.dto.license_dto import LicenseDTO
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository


class ListLicensesHandler:
    """Handler for the license listing query."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository

    async def handle(self) -> List[LicenseDTO]:
        """
        List all licenses, newest first.

        Returns:
            List of LicenseDTO; unknown products are named "N/A"
        """
        names = {p.id: p.name for p in await self.product_repository.list_all()}
        licenses = await self.license_repository.list_all()
        return [LicenseDTO.from_entity(lic, names.get(lic.product_id)) for lic in licenses]
