"""
Traduzione centralizzata degli errori in risposte HTTP.

Tutti i corpi di errore hanno la forma ResponseErrorDTO
(timestamp, status, error, message, path); la validazione aggiunge `errors`.
"""
from __future__ import annotations

import logging
from datetime import datetime
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .exceptions import AmbulatorioError, EntityNotFoundError, EntityStatusError
from .messages import get_message, parse_accept_language
from .schemas import ResponseErrorDTO, ResponseValidationErrorDTO

logger = logging.getLogger(__name__)

# tipo di errore applicativo -> status HTTP
STATUS_PER_ERRORE: dict[type[AmbulatorioError], int] = {
    EntityNotFoundError: HTTPStatus.NOT_FOUND,
    EntityStatusError: HTTPStatus.CONFLICT,
}


def _locale(request: Request) -> str:
    return parse_accept_language(request.headers.get("accept-language"))


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    status = HTTPStatus(status_code)
    body = ResponseErrorDTO(
        timestamp=datetime.now(),
        status=status.value,
        error=status.phrase,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status.value, content=body.model_dump(mode="json"))


def status_for(exc: AmbulatorioError) -> int:
    for tipo in type(exc).__mro__:
        if tipo in STATUS_PER_ERRORE:
            return STATUS_PER_ERRORE[tipo]
    return HTTPStatus.INTERNAL_SERVER_ERROR


async def handle_ambulatorio_error(request: Request, exc: AmbulatorioError) -> JSONResponse:
    status_code = status_for(exc)
    message = get_message(exc.message_key, _locale(request))
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, int(status_code), exc.message_key)
    return error_response(request, status_code, message)


def _campo(loc: tuple) -> str:
    # ("body", "email") -> "email"; ("query", "nome") -> "nome"
    parti = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parti)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        errors.setdefault(_campo(tuple(err.get("loc", ()))), []).append(err.get("msg", ""))

    status = HTTPStatus.BAD_REQUEST
    body = ResponseValidationErrorDTO(
        timestamp=datetime.now(),
        status=status.value,
        error=status.phrase,
        message=get_message("error.validation.exception", _locale(request)),
        path=request.url.path,
        errors=errors,
    )
    return JSONResponse(status_code=status.value, content=body.model_dump(mode="json"))


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Violazione di integrità su %s: %s", request.url.path, exc.orig)
    message = get_message("error.persistence.integrity.exception", _locale(request))
    return error_response(request, HTTPStatus.INTERNAL_SERVER_ERROR, message)


async def handle_persistence_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Errore di persistenza su %s", request.url.path, exc_info=exc)
    message = get_message("error.persistence.exception", _locale(request))
    return error_response(request, HTTPStatus.INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AmbulatorioError, handle_ambulatorio_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(SQLAlchemyError, handle_persistence_error)
