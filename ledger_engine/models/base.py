"""
Database engine, session factory, and base model.

Nothing here runs at import time. The hosting shell (main.py,
the Alembic env, or a test fixture) builds the engine and the
session factory and hands them to the store.
"""

from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


# --- Engine ---
def build_engine(
    database_url: str,
    lock_timeout: float = 5.0,
    echo: bool = False,
) -> Engine:
    """
    Create the engine for a database URL.

    pool_pre_ping=True tests connections before using them,
    which handles cases where the database restarted or a
    connection went stale.

    lock_timeout bounds how long a write waits on an account lock.
    On PostgreSQL it becomes the session's lock_timeout; on SQLite
    it is the driver's busy timeout.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            pool_pre_ping=True,
            echo=echo,
            connect_args={
                "check_same_thread": False,
                "timeout": lock_timeout,
            },
        )
        _install_sqlite_hooks(engine)
        return engine

    connect_args = {}
    if database_url.startswith("postgresql"):
        connect_args["options"] = f"-c lock_timeout={int(lock_timeout * 1000)}"
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,
        connect_args=connect_args,
    )


def _install_sqlite_hooks(engine: Engine) -> None:
    """
    Let each transaction choose its own BEGIN mode.

    pysqlite normally issues BEGIN itself, lazily, and only before
    writes. Turning that off and emitting BEGIN from the engine's
    begin event lets a write scope ask for BEGIN IMMEDIATE, which
    takes the database write lock before the balance is read.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


# --- Session Factory ---
def build_session_factory(engine: Engine) -> sessionmaker:
    """
    Each call to the factory creates a new session.

    autoflush=False means SQLAlchemy won't send SQL until we
    flush or commit. expire_on_commit=False keeps returned
    objects readable after their session has closed.
    """
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
