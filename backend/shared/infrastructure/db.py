"""
Engine and sessions (SQLAlchemy 2.0).

Orders are read under the PostgreSQL default READ COMMITTED isolation:
an order and its lines are committed together, so readers never observe
an order without its lines.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shared.config.settings import DATABASE_URL

MAX_POOL_SIZE = 20


def build_engine(url: str) -> Engine:
    """
    PostgreSQL gets a pre-pinged pool sized from the CPU count. SQLite
    (local runs and tests) takes none of those options.
    """
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    pool_size = min((os.cpu_count() or 4) * 2 + 1, MAX_POOL_SIZE)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=15,
        pool_timeout=30,
        pool_recycle=1800,
        connect_args={"connect_timeout": 10},
    )


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session for FastAPI's Depends."""
    with SessionLocal() as db:
        yield db


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Session for code outside a request (CLI, seeding, startup checks)."""
    with SessionLocal() as db:
        yield db


def safe_commit(db: Session) -> None:
    """Commit, or roll back and re-raise the original error."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
