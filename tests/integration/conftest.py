"""Fixtures for tests against a real PostgreSQL."""

import importlib.util
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from types import ModuleType

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Connection
from testcontainers.postgres import PostgresContainer

from transfer_ledger.application.services import TransferService
from transfer_ledger.infrastructure.database import Database


INITIAL_SCHEMA = Path(__file__).parents[2] / "alembic" / "versions" / "001_initial_schema.py"


def _load_migration(path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(f"migration_{path.stem}", path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


migration = _load_migration(INITIAL_SCHEMA)


def _run_migration(step: Callable[[], None]) -> Callable[[Connection], None]:
    """Run an upgrade/downgrade function with ``op`` bound to the given connection."""

    def run(connection: Connection) -> None:
        context = MigrationContext.configure(connection)
        with Operations.context(context):
            step()

    return run


@pytest.fixture(scope="module")
def postgres_url() -> Generator[str, None, None]:
    """Start PostgreSQL container for tests."""
    container = PostgresContainer("postgres:16-alpine", driver="asyncpg")
    try:
        container.start()
    except Exception as exc:
        pytest.skip(f"PostgreSQL container not available: {exc}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest.fixture
async def database(postgres_url: str) -> AsyncGenerator[Database, None]:
    """Database migrated to the initial schema, dropped again after the test."""
    db = Database(postgres_url, pool_size=20, max_overflow=20)
    async with db.engine.begin() as connection:
        await connection.run_sync(_run_migration(migration.upgrade))
    try:
        yield db
    finally:
        async with db.engine.begin() as connection:
            await connection.run_sync(_run_migration(migration.downgrade))
        await db.close()


@pytest.fixture
def service(database: Database) -> TransferService:
    """TransferService backed by the container database."""
    return TransferService.from_database(database)
