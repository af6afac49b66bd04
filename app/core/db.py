from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from loguru import logger

from app.core.config import DATABASE_URL, LOG_SQL

# --- Base (single source of truth) ---
Base = declarative_base()


def _log_statement(conn, cursor, statement, parameters, context, executemany):
    logger.debug(f"SQL: {statement} | params={parameters}")


# --- Engine ---
def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    is_sqlite = url.startswith("sqlite")

    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)

    eng = create_engine(url, echo=False, future=True, **kwargs)

    if LOG_SQL:
        event.listen(eng, "before_cursor_execute", _log_statement)

    return eng


engine = make_engine()

# --- Session factory ---
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)


# --- Scripts ---
@contextmanager
def session_scope(factory=SessionLocal):
    """Commit on success, roll back on error; for scripts outside a request."""
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# --- FastAPI dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
