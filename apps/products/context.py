"""
Product context: connection, schema creation and seed data for one deployment.

ProductContextFactory builds a context either at runtime (from application
settings, sharing the DatabaseManager engine) or at design time (from
command-line arguments, with its own engine).
"""

import argparse
from decimal import Decimal
from typing import Iterable, Optional, Sequence
from sqlalchemy import inspect
from framework.config import Settings, settings
from framework.database.manager import DatabaseManager
from framework.database.sql_driver import SQLDriver
from framework.logging.logger import get_logger
from .models import Product
from .unit_of_work import ProductUnitOfWork

logger = get_logger("product_context")

# Applied once, when the products table is first created
SAMPLE_SEED_PRODUCTS = (
    {"id": 1, "name": "Chai", "unit_price": Decimal("1")},
    {"id": 2, "name": "Chang", "unit_price": Decimal("2")},
    {"id": 3, "name": "Cappuccino", "unit_price": Decimal("3")},
)


class ProductContext:
    """Holds the SQL driver and seed data for the products store."""

    def __init__(self, driver: SQLDriver, seed_data: Iterable[dict] = ()):
        self.driver = driver
        self.seed_data = tuple(seed_data)

    def session(self):
        """Open a new session (use as an async context manager)."""
        return self.driver.session_factory()

    async def create_schema(self) -> bool:
        """Create the products table if missing; returns True when it was created (and seeded)."""
        table = Product.__table__
        async with self.driver.engine.begin() as conn:
            existed = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table(table.name)
            )
            if not existed:
                await conn.run_sync(lambda sync_conn: table.create(sync_conn))

        if existed:
            logger.info(f"Table {table.name} already exists, skipping schema creation")
            return False

        logger.info(f"Created table {table.name}")
        if self.seed_data:
            await self.seed()
        return True

    async def seed(self) -> None:
        async with self.session() as session:
            uow = ProductUnitOfWork(session=session)
            async with uow:
                for row in self.seed_data:
                    uow.products_repository.insert(Product(**row))
        logger.info(f"Seeded {len(self.seed_data)} product(s)")

    async def dispose(self) -> None:
        await self.driver.disconnect()


class ProductContextFactory:
    """Builds ProductContext instances for runtime and design-time use."""

    @staticmethod
    def create(app_settings: Optional[Settings] = None) -> ProductContext:
        """Runtime context over the shared DatabaseManager engine."""
        app_settings = app_settings or settings
        manager = DatabaseManager.get_instance(app_settings)
        seed_data = SAMPLE_SEED_PRODUCTS if app_settings.SEED_SAMPLE_DATA else ()
        return ProductContext(manager.sql, seed_data)

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Create the products schema and apply seed data",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  python -m apps.products.scripts.init_db --deployment sample
  python -m apps.products.scripts.init_db --database-url sqlite+aiosqlite:///products.db
        """
        )
        parser.add_argument(
            "--deployment",
            choices=["demo", "sample"],
            default=None,
            help="Deployment profile (defaults to DEPLOYMENT from the environment)"
        )
        parser.add_argument(
            "--database-url",
            type=str,
            default=None,
            help="SQLAlchemy async URL (defaults to the configured database)"
        )
        parser.add_argument(
            "--echo",
            action="store_true",
            help="Log emitted SQL"
        )
        return parser

    @classmethod
    def create_design_time(cls, args: Sequence[str]) -> ProductContext:
        """Design-time context with its own engine, configured from command-line arguments."""
        options = cls.build_parser().parse_args(list(args))
        overrides = {}
        if options.deployment:
            overrides["DEPLOYMENT"] = options.deployment
        if options.database_url:
            overrides["DB_URL"] = options.database_url
        design_settings = Settings(**overrides)

        driver = SQLDriver(design_settings.DATABASE_URL, echo=options.echo or design_settings.DB_ECHO)
        seed_data = SAMPLE_SEED_PRODUCTS if design_settings.SEED_SAMPLE_DATA else ()
        logger.info(
            f"Design-time context | Deployment: {design_settings.DEPLOYMENT} | "
            f"Seed rows: {len(seed_data)}"
        )
        return ProductContext(driver, seed_data)
