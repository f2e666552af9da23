"""
Alembic environment: async engine from framework.config settings.

    alembic upgrade head
    alembic -x deployment=sample upgrade head
"""
import asyncio

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

from framework.config import Settings
import apps.models  # noqa: F401  registers tables on SQLModel.metadata

target_metadata = SQLModel.metadata

x_args = context.get_x_argument(as_dictionary=True)
settings = Settings(**({"DEPLOYMENT": x_args["deployment"]} if "deployment" in x_args else {}))


def run_migrations_offline() -> None:
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(settings.DATABASE_URL)
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
