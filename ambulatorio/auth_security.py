"""
Password e token di accesso degli operatori.

Il token è un JWT firmato (HS256 di default) con:
- sub: id dell'operatore, come stringa
- username: solo per visualizzazione lato UI
- iat/exp: emissione e scadenza, in secondi UTC
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALG, JWT_SECRET

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DURATA_TOKEN = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def emetti_token(operatore_id: int, username: str, durata: timedelta = DURATA_TOKEN) -> str:
    emesso = datetime.now(timezone.utc)
    claims = {
        "sub": str(operatore_id),
        "username": username,
        "iat": int(emesso.timestamp()),
        "exp": int((emesso + durata).timestamp()),
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALG)


def operatore_id_dal_token(token: str) -> int | None:
    """Id dell'operatore se il token è integro e non scaduto, altrimenti None."""
    # spazi o virgolette finiti nell'header per errore
    token = token.strip().strip("\"'")
    try:
        sub = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG]).get("sub")
    except JWTError:
        return None
    if not isinstance(sub, str) or not sub.isdigit():
        return None
    return int(sub)
