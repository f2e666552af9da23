"""Test config and shared fixtures."""
import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from framework.config import Settings
from framework.database.sql_driver import SQLDriver
from apps.products.api.router import get_db
from apps.products.context import ProductContext, SAMPLE_SEED_PRODUCTS
from apps.products.models import Product


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_settings(deployment: str) -> Settings:
    return Settings(
        DEPLOYMENT=deployment,
        DB_URL=TEST_DATABASE_URL,
        AUTO_CREATE_SCHEMA=False,
        LOG_DIR="logs",
    )


async def _context(seed_data=()) -> ProductContext:
    context = ProductContext(SQLDriver(TEST_DATABASE_URL), seed_data)
    await context.create_schema()
    return context


@pytest.fixture(scope="function")
async def demo_context() -> AsyncGenerator[ProductContext, None]:
    """Empty products store."""
    context = await _context()
    yield context
    await context.dispose()


@pytest.fixture(scope="function")
async def sample_context() -> AsyncGenerator[ProductContext, None]:
    """Products store seeded like a fresh sample deployment."""
    context = await _context(SAMPLE_SEED_PRODUCTS)
    yield context
    await context.dispose()


@pytest.fixture
def session_maker(demo_context: ProductContext) -> sessionmaker:
    """Session factory; open a new session per unit of work."""
    return demo_context.driver.session_factory


@pytest.fixture(scope="function")
async def async_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


async def _client(deployment: str, context: ProductContext) -> AsyncGenerator[AsyncClient, None]:
    from main import create_app

    app = create_app(make_settings(deployment))

    # Each request gets its own session, as in production
    async def _get_db():
        async with context.session() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def client(demo_context: ProductContext) -> AsyncGenerator[AsyncClient, None]:
    """Test client for the demo deployment (/api/products)."""
    async for ac in _client("demo", demo_context):
        yield ac


@pytest.fixture
async def sample_client(sample_context: ProductContext) -> AsyncGenerator[AsyncClient, None]:
    """Test client for the sample deployment (/api/product)."""
    async for ac in _client("sample", sample_context):
        yield ac


@pytest.fixture
async def sample_product(demo_context: ProductContext) -> Product:
    """Create sample product."""
    async with demo_context.session() as session:
        product = Product(name="Widget", unit_price=9.5)
        session.add(product)
        await session.commit()
        await session.refresh(product)
        return product
