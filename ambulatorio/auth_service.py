from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .auth_models import Operatore
from .auth_security import hash_password, verify_password
from .db import db_session

logger = logging.getLogger(__name__)


def _normalizza(username: str) -> str:
    return username.strip().lower()


def _per_username(s: Session, username: str) -> Operatore | None:
    return s.scalars(select(Operatore).where(Operatore.username == username)).first()


def crea_operatore(username: str, password: str, session_factory: sessionmaker[Session] | None = None) -> int:
    """Registra un operatore attivo; ValueError se i dati mancano o lo username è preso."""
    username = _normalizza(username)
    if not username or not password:
        raise ValueError("Username e password sono obbligatori.")

    with db_session(session_factory) as s:
        if _per_username(s, username) is not None:
            raise ValueError("Username già registrato.")
        op = Operatore(username=username, password_hash=hash_password(password))
        s.add(op)
        s.flush()
        logger.info("Registrato operatore %s", username)
        return op.id


def autentica(username: str, password: str, session_factory: sessionmaker[Session] | None = None) -> Operatore | None:
    username = _normalizza(username)
    with db_session(session_factory) as s:
        op = _per_username(s, username)
        if op is None or not op.is_active:
            return None
        if verify_password(password, op.password_hash):
            return op
    logger.warning("Password errata per l'operatore %s", username)
    return None


def operatore_attivo(operatore_id: int, session_factory: sessionmaker[Session] | None = None) -> Operatore | None:
    with db_session(session_factory) as s:
        op = s.get(Operatore, operatore_id)
        return op if op is not None and op.is_active else None
