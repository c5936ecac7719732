from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fx_quotes.db.models import Base

# StaticPool keeps a single in-memory database shared by the worker threads.
engine: Engine = create_engine(
    "sqlite:///:memory:", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
session_factory = sessionmaker(engine)


@pytest.fixture(scope="function")
def test_session_factory() -> Generator[sessionmaker[Session], None, None]:
    Base.metadata.create_all(engine)
    yield session_factory
    Base.metadata.drop_all(engine)
