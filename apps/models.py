"""
Model registration for migrations: import all models that should be migrated by Alembic here.
"""
from apps.products.models import Product

__all__ = ["Product"]
