from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from sqlalchemy import create_engine

from stageflow.config import config
from stageflow.database import database
from stageflow.schema import metadata


@pytest.fixture(scope="session", autouse=True)
def create_tables() -> Iterator[None]:
    engine = create_engine(config.database_url.replace("+aiosqlite", ""))
    metadata.drop_all(engine)
    metadata.create_all(engine)
    engine.dispose()
    yield


@pytest_asyncio.fixture(scope="session", loop_scope="session", autouse=True)
async def connect_database(create_tables: None) -> AsyncIterator[None]:
    await database.connect()
    yield
    await database.disconnect()


@pytest_asyncio.fixture(loop_scope="session", autouse=True)
async def clean_tables(connect_database: None) -> AsyncIterator[None]:
    yield
    for table in reversed(metadata.sorted_tables):
        await database.execute(table.delete())
