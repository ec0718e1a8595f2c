"""
SQLAlchemy engine, session factory and declarative base.

The engine is built once from application settings. SQLite URLs get
``check_same_thread`` disabled so FastAPI's threadpool can share them.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def build_engine(database_url: str) -> Engine:
    """Build a SQLAlchemy engine for the given URL.

    In-memory SQLite databases use a StaticPool so every session sees the
    same connection (and therefore the same data).
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Registers the ORM models on Base.metadata.
    from app.infrastructure.exchange import models  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("Database schema ensured on %s", engine.url.render_as_string(hide_password=True))
