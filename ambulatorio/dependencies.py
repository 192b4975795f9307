from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, sessionmaker

from .auth_models import Operatore
from .auth_security import operatore_id_dal_token
from .auth_service import operatore_attivo
from .services import Servizi

# OAuth2 Bearer (Authorization: Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_servizi(request: Request) -> Servizi:
    return request.app.state.servizi


def get_session_factory(request: Request) -> sessionmaker[Session]:
    return request.app.state.session_factory


def get_current_operatore(
    token: str = Depends(oauth2_scheme),
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> Operatore:
    operatore_id = operatore_id_dal_token(token)
    if operatore_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token non valido")

    op = operatore_attivo(operatore_id, session_factory)
    if op is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Operatore non valido")
    return op
