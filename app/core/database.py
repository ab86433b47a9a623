"""Database connection and session management."""
import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import SQLALCHEMY_DATABASE_URL

# SQLite sessions are handed across FastAPI's worker threads
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for SQLAlchemy models
Base = declarative_base()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def register_sqlite_functions(dbapi_connection, connection_record):
    """Replace SQLite's ASCII-only ``lower()`` with Python's Unicode folding.

    Text filters lower-case the search term in Python, so the column side
    must fold the same way ("Émile" matches "émile").
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def get_db():
    """Yield one session per request and close it once the response is sent.

    Sessions are never shared between requests; only the cache regions are.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
