from collections.abc import AsyncIterator

import pytest_asyncio

from campus_bracket.database import create_sync_engine, database
from campus_bracket.schema import metadata
from campus_bracket.sql.capabilities import schema_capabilities


@pytest_asyncio.fixture(scope="session", loop_scope="session", autouse=True)
async def connected_database() -> AsyncIterator[None]:
    engine = create_sync_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    engine.dispose()

    await database.connect()
    yield
    await database.disconnect()


@pytest_asyncio.fixture(loop_scope="session", autouse=True)
async def clean_tables(connected_database: None) -> AsyncIterator[None]:
    yield
    for table in reversed(metadata.sorted_tables):
        await database.execute(query=table.delete())
    schema_capabilities.invalidate()
