# parqueo/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL (SQLite is accepted for local runs and tests).
All models are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from parqueo.config import settings


def _enable_sqlite_savepoints(sqlite_engine):
    """pysqlite opens transactions lazily, which breaks SAVEPOINT; emit BEGIN ourselves."""

    @event.listens_for(sqlite_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(sqlite_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # One shared connection so an in-memory DB survives across sessions
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
        _enable_sqlite_savepoints(sqlite_engine)
        return sqlite_engine
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = _build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from parqueo.models.user import User                       # noqa
    from parqueo.models.parking_lot import ParkingLot          # noqa
    from parqueo.models.parking_space import ParkingSpace      # noqa
    from parqueo.models.vehicle import Vehicle                 # noqa
    from parqueo.models.parking_record import ParkingRecord    # noqa
    from parqueo.models.access_attempt import AccessAttempt    # noqa

    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drops every table. Used by the test suite between cases."""
    Base.metadata.drop_all(bind=engine)
