"""Unit of work exposing the products repository."""

from framework.repository.unit_of_work import UnitOfWork
from .models import Product
from .repository import ProductRepository


class ProductUnitOfWork(UnitOfWork):
    """UnitOfWork aggregating the products repository over one session."""

    @property
    def products_repository(self) -> ProductRepository:
        return self.get_repository(ProductRepository, Product)
