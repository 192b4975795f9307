from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session, sessionmaker

from .auth_models import Operatore
from .auth_security import emetti_token
from .auth_service import autentica, crea_operatore
from .config import LOG_JSON, LOG_LEVEL
from .db import SessionLocal, init_db
from .dependencies import get_current_operatore, get_session_factory
from .error_handlers import register_exception_handlers
from .logging_utils import configure_logging, reset_request_id, set_request_id
from .routers import ROUTERS
from .seed import seed_base
from .services import Servizi, build_services

logger = logging.getLogger(__name__)


# Schemi Auth

class RegisterIn(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MeOut(BaseModel):
    id: int
    username: str
    is_active: bool


def create_app(
    session_factory: sessionmaker[Session] | None = None,
    servizi: Servizi | None = None,
    seed: bool = True,
) -> FastAPI:
    """
    Costruisce l'applicazione. In test si passa una session factory su un DB
    in memoria e seed=False.
    """
    factory = session_factory or SessionLocal

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Crea tabelle (inclusi operatori) e seed base (idempotente)
        init_db(factory.kw.get("bind"))
        if seed:
            seed_base(factory)
        logger.info("Ambulatorio API avviata")
        yield

    app = FastAPI(title="Ambulatorio API", version="1.0.0", lifespan=lifespan)
    app.state.session_factory = factory
    app.state.servizi = servizi or build_services(factory)

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # AUTH endpoints

    @app.post("/api/auth/register", response_model=dict)
    def register(
        payload: RegisterIn,
        factory: sessionmaker[Session] = Depends(get_session_factory),
    ) -> dict[str, Any]:
        try:
            operatore_id = crea_operatore(payload.username, payload.password, factory)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return {"ok": True, "operatore_id": operatore_id}

    @app.post("/api/auth/login", response_model=TokenOut)
    def login(
        form: OAuth2PasswordRequestForm = Depends(),
        factory: sessionmaker[Session] = Depends(get_session_factory),
    ) -> TokenOut:
        op = autentica(form.username, form.password, factory)
        if not op:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenziali non valide")

        return TokenOut(access_token=emetti_token(op.id, op.username))

    @app.get("/api/me", response_model=MeOut)
    def me(op: Operatore = Depends(get_current_operatore)) -> MeOut:
        return MeOut(id=op.id, username=op.username, is_active=op.is_active)

    for router in ROUTERS:
        app.include_router(router)

    return app


configure_logging(LOG_LEVEL, json_output=LOG_JSON)
app = create_app()
