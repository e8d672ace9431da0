import pytest
from sqlalchemy import text

from inventory.database.session import build_engine, build_session_factory, create_schema, ping
from inventory.exceptions.failures import FailureKind, KnownFailure

from ..conftest import make_settings


def test_build_engine_requires_url():
    with pytest.raises(KnownFailure) as info:
        build_engine(make_settings(DATABASE_URL=""))

    assert info.value.kind is FailureKind.STORAGE_UNAVAILABLE


@pytest.mark.asyncio
async def test_ping_and_schema(database_url):
    engine = build_engine(make_settings(DATABASE_URL=database_url))
    try:
        await ping(engine)
        await create_schema(engine)

        factory = build_session_factory(engine)
        async with factory() as session:
            result = await session.execute(text("SELECT count(*) FROM categories"))
            assert result.scalar() == 0
    finally:
        await engine.dispose()
