"""
Record store implementation of ProductRepository port.
"""
from typing import Any, Dict, List, Optional

from asgiref.sync import sync_to_async

from core.infrastructure.record_store import RecordStore, get_record_store
from core.infrastructure.serialization import parse_instant, to_iso
from products.domain.product import Product
from products.ports.product_repository import ProductRepository

PRODUCTS_COLLECTION = "products"


def product_to_record(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "imageUrl": product.image_url,
        "createdAt": to_iso(product.created_at),
        "hwidProtection": product.hwid_protection,
    }


def product_from_record(record: Dict[str, Any]) -> Product:
    return Product(
        id=record["id"],
        name=record["name"],
        hwid_protection=bool(record.get("hwidProtection", False)),
        price=record.get("price") or 0.0,
        image_url=record.get("imageUrl"),
        created_at=parse_instant(record.get("createdAt")),
    )


class RecordStoreProductRepository(ProductRepository):
    """Record store implementation of ProductRepository."""

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store

    @property
    def store(self) -> RecordStore:
        return self._store or get_record_store()

    def _snapshot(self) -> List[Product]:
        return [product_from_record(r) for r in self.store.read(PRODUCTS_COLLECTION)]

    async def list_all(self) -> List[Product]:
        return await sync_to_async(self._snapshot)()

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        for product in await self.list_all():
            if product.id == product_id:
                return product
        return None

    async def add(self, product: Product) -> Product:
        await sync_to_async(self.store.append)(PRODUCTS_COLLECTION, product_to_record(product))
        return product
