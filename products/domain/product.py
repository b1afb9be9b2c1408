"""
Product domain entity.

Products are managed outside this service; licenses only reference them
and the validation path reads the HWID protection flag.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.

    Represents a product that can be licensed.
    """

    id: str
    name: str
    hwid_protection: bool = False
    price: float = 0.0
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate product entity."""
        if not self.id:
            raise ValueError("Product ID is required")
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Product name cannot be empty")

    @classmethod
    def create(
        cls,
        name: str,
        hwid_protection: bool = False,
        price: float = 0.0,
        image_url: Optional[str] = None,
        product_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> "Product":
        """
        Create a new Product entity.

        Args:
            name: Product display name
            hwid_protection: Whether validation requires a hardware id
            price: Listed price
            image_url: Optional image
            product_id: Optional id (generated if not provided)
            created_at: Optional creation time

        Returns:
            Product entity instance
        """
        return cls(
            id=product_id or str(uuid.uuid4()),
            name=name.strip(),
            hwid_protection=hwid_protection,
            price=price,
            image_url=image_url,
            created_at=created_at,
        )
