"""Database configuration and setup."""

import os
import logging
import time
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.engine import Engine
from typing import Optional

from ..config import get_database_url

# Query performance logger
query_logger = logging.getLogger("sqlalchemy.query_performance")


def _is_sqlite_url(url: str) -> bool:
    """Check if database URL is for SQLite."""
    return url.startswith("sqlite:")


def _setup_sqlite_pragma(dbapi_connection, connection_record):
    """Set SQLite pragmas for durable, immediate writes."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")  # 5 second timeout for concurrent access
    cursor.close()


def _setup_query_logging(engine: Engine, enable_query_logging: bool = False):
    """Set up query performance logging if enabled."""
    if not enable_query_logging:
        return

    @event.listens_for(engine, "before_cursor_execute")
    def receive_before_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ):
        context._query_start_time = time.time()

    @event.listens_for(engine, "after_cursor_execute")
    def receive_after_cursor_execute(
        conn, cursor, statement, parameters, context, executemany
    ):
        total = time.time() - context._query_start_time

        # Log slow queries (>100ms) as warnings, others as debug
        if total > 0.1:
            query_logger.warning(
                f"Slow query ({total:.3f}s): {statement[:200]}{'...' if len(statement) > 200 else ''}"
            )
        else:
            query_logger.debug(
                f"Query ({total:.3f}s): {statement[:100]}{'...' if len(statement) > 100 else ''}"
            )


def create_database_engine(
    database_url: Optional[str] = None,
    echo: bool = False,
    enable_query_logging: bool = False,
    **engine_kwargs,
) -> Engine:
    """Create database engine with appropriate configuration."""
    if not database_url:
        # FORGE_DATABASE_URL, then the config file, then the user data dir
        database_url = get_database_url()

    # Check for SQL debugging from environment or parameter
    sql_debug = echo or os.getenv("SQL_DEBUG", "false").lower() == "true"

    if _is_sqlite_url(database_url):
        connect_args = engine_kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(
            database_url,
            connect_args=connect_args,
            echo=sql_debug,
            **engine_kwargs,
        )

        event.listen(engine, "connect", _setup_sqlite_pragma)
    else:
        engine = create_engine(database_url, echo=sql_debug, **engine_kwargs)

    _setup_query_logging(engine, enable_query_logging)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
Base = declarative_base()


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Import models so they register with Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
