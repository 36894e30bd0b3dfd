from typing import Optional
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from .config import settings
from .db.models import KeyValueEntry  # noqa: F401  registers the table


def build_engine(db_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    # Choose engine options based on database scheme
    db_url = db_url or settings.DATABASE_URL
    engine_kwargs = {}

    if db_url.startswith("sqlite"):
        # SQLite specific connect args
        engine_kwargs.update({
            "connect_args": {"check_same_thread": False}
        })
    else:
        engine_kwargs.update({
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
        })

    return create_engine(db_url, echo=settings.DEBUG if echo is None else echo, **engine_kwargs)


def create_db_and_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
