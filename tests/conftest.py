import os
import pytest
import pytest_asyncio
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import create_async_engine


# URL of the database to connect to
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite://')

# URL of the database to connect to: with an async driver
ASYNC_DATABASE_URL = os.getenv('ASYNC_DATABASE_URL', 'sqlite+aiosqlite://')


@pytest.fixture(scope='function')
def engine() -> sa.engine.Engine:
    engine = sa.engine.create_engine(DATABASE_URL)
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


@pytest_asyncio.fixture(scope='function')
async def async_connection():
    engine = create_async_engine(ASYNC_DATABASE_URL)
    try:
        async with engine.connect() as conn:
            yield conn
    finally:
        await engine.dispose()
