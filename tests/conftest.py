from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from estate_import.adapters.memory import (
    InMemoryEstateStore,
    InMemorySessionCache,
    InMemoryUnitOfWork,
)
from estate_import.adapters.sqlalchemy import create_all_tables, start_mappers
from estate_import.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup
from estate_import.adapters.wealthcounsel import CachedParseSessionStore
from tests.helpers.estate import FakeClock

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def memory_store() -> InMemoryEstateStore:
    return InMemoryEstateStore()


@pytest.fixture
def memory_unit_of_work(
    memory_store: InMemoryEstateStore,
) -> Callable[[], InMemoryUnitOfWork]:
    def factory() -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(memory_store)

    return factory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_cache(clock: FakeClock) -> InMemorySessionCache:
    return InMemorySessionCache(clock=clock)


@pytest.fixture
def session_store(session_cache: InMemorySessionCache) -> CachedParseSessionStore:
    return CachedParseSessionStore(session_cache)
