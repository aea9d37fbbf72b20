"""Database configuration and session management."""

from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from cartplanner.config import get_settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def make_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for ``database_url`` (defaults to the configured URL)."""
    settings = get_settings()
    return create_engine(
        database_url or settings.database_url,
        echo=settings.sql_echo if echo is None else echo,
    )


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to ``engine``."""
    return sessionmaker(engine, expire_on_commit=False)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    """Session factory for the configured database, created on first use."""
    return make_session_factory(make_engine())
