from __future__ import annotations

from .messages import get_message


class AmbulatorioError(Exception):
    """
    Errore applicativo identificato da una chiave di messaggio.
    Il testo viene risolto nella lingua della richiesta solo al confine HTTP/CLI;
    str(e) restituisce il testo nella lingua di default.
    """

    def __init__(self, message_key: str) -> None:
        self.message_key = message_key
        super().__init__(get_message(message_key))


class EntityNotFoundError(AmbulatorioError):
    """Record inesistente oppure non ACTIVE."""


class EntityStatusError(AmbulatorioError):
    """Transizione di stato non ammessa (già cancellato / già attivo)."""
