"""Products module repository implementation."""

from typing import Optional
from framework.repository.base import BaseRepository
from .models import Product


class ProductRepository(BaseRepository[Product]):
    """Product repository."""

    def __init__(self, session):
        super().__init__(session, Product)

    async def get_by_name(self, name: str) -> Optional[Product]:
        """Find the first product with the given name."""
        products = await self.find_all(name=name)
        return products[0] if products else None
