"""
Engine construction shared by all repositories.

Repositories of services that run in the same process share one engine so
that multi-table operations (cart checkout) can run in a single transaction.
"""

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from .models import Base


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:")


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a synchronous engine and make sure all tables exist.

    Args:
        database_url: SQLAlchemy database URL
        echo: Log emitted SQL

    Returns:
        Configured Engine
    """
    # Strip async drivers for sync engine
    url = database_url.replace("+aiosqlite", "").replace("+asyncpg", "")

    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        # Sync routes run in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    if _is_memory_sqlite(url):
        # One shared connection, otherwise every thread sees its own empty database
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)
    Base.metadata.create_all(engine)

    logger.info(f"Database engine initialized: {url[:50]}...")
    return engine


def ping(engine: Engine) -> None:
    """Run a trivial query; raises SQLAlchemyError when the database is unreachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
