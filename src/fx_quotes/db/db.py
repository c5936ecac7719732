from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from fx_quotes.db.models import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite:///") and database_url != "sqlite:///:memory:":
        Path(database_url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, echo=echo, connect_args=_connect_args(database_url))


def init_db(database_url: str, echo: bool = False) -> sessionmaker[Session]:
    engine = create_db_engine(database_url, echo=echo)
    Base.metadata.create_all(engine)
    return sessionmaker(engine)


def _connect_args(database_url: str) -> dict[str, object]:
    # Queries run on worker threads via asyncio.to_thread.
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}
