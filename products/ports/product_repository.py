"""
Product repository port (interface).

This defines the contract for product lookups.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from products.domain.product import Product


class ProductRepository(ABC):
    """
    Abstract repository for Product entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def list_all(self) -> List[Product]:
        """
        Return every known product.

        Returns:
            List of Product entities
        """
        pass

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product id

        Returns:
            Product entity or None if not found
        """
        pass

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """
        Register a product.

        Args:
            product: Product entity

        Returns:
            Added product entity
        """
        pass
