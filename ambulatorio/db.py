from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL, SQL_ECHO


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # LIKE case-sensitive come su PostgreSQL, e vincoli FK attivi
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


def create_db_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO) -> Engine:
    """
    Crea l'engine. Per SQLite:
    - check_same_thread disattivato (FastAPI usa un threadpool)
    - StaticPool per i database in memoria, altrimenti ogni connessione vedrebbe un DB vuoto
    """
    kwargs: dict = {"echo": echo, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_pragmas)
    return engine


def make_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=bind,
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )


engine = create_db_engine()
SessionLocal = make_session_factory(engine)


class Base(DeclarativeBase):
    """Base ORM per tutti i modelli."""
    pass


def init_db(bind: Engine | None = None) -> None:
    """Crea le tabelle se non esistono."""
    # registra tutti i modelli nel metadata
    from . import auth_models, models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def db_session(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """
    Context manager per gestire correttamente la sessione:
    - commit se tutto ok
    - rollback su eccezioni
    - close sempre
    """
    session: Session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
