"""
Messaggi localizzati risolti per chiave.

Le chiavi sono identificatori stabili (es. "error.medico.notFound.exception"),
indipendenti dalla lingua di visualizzazione.
"""
from __future__ import annotations

from .config import DEFAULT_LOCALE

_ENTITA_IT = {
    "medico": ("Medico", "o"),
    "segretario": ("Segretario", "o"),
    "paziente": ("Paziente", "o"),
    "prenotazione": ("Prenotazione", "a"),
}

_ENTITA_EN = {
    "medico": "Doctor",
    "segretario": "Secretary",
    "paziente": "Patient",
    "prenotazione": "Booking",
}


def _catalogo_it() -> dict[str, str]:
    msgs = {
        "error.validation.exception": "Validazione dei campi fallita",
        "error.persistence.integrity.exception": "Errore nell'istruzione di persistenza sul database",
        "error.persistence.exception": "Errore di accesso al database",
    }
    for chiave, (nome, finale) in _ENTITA_IT.items():
        msgs[f"error.{chiave}.notFound.exception"] = f"{nome} non trovat{finale}"
        msgs[f"error.{chiave}.status.deleted.exception"] = f"{nome} già cancellat{finale}"
        msgs[f"error.{chiave}.status.active.exception"] = f"{nome} già attiv{finale}"
    return msgs


def _catalogo_en() -> dict[str, str]:
    msgs = {
        "error.validation.exception": "Field validation failed",
        "error.persistence.integrity.exception": "Database persistence statement error",
        "error.persistence.exception": "Database access error",
    }
    for chiave, nome in _ENTITA_EN.items():
        msgs[f"error.{chiave}.notFound.exception"] = f"{nome} not found"
        msgs[f"error.{chiave}.status.deleted.exception"] = f"{nome} already deleted"
        msgs[f"error.{chiave}.status.active.exception"] = f"{nome} already active"
    return msgs


CATALOGHI: dict[str, dict[str, str]] = {
    "it": _catalogo_it(),
    "en": _catalogo_en(),
}


def parse_accept_language(header: str | None) -> str:
    """
    Ritorna la prima lingua supportata dell'header Accept-Language
    (rispettando i pesi q=), altrimenti la lingua di default.
    """
    if not header:
        return DEFAULT_LOCALE

    candidati: list[tuple[float, int, str]] = []
    for pos, parte in enumerate(header.split(",")):
        pezzi = parte.strip().split(";")
        tag = pezzi[0].strip().lower()
        if not tag:
            continue
        q = 1.0
        for param in pezzi[1:]:
            param = param.strip()
            if param.startswith("q="):
                try:
                    q = float(param[2:])
                except ValueError:
                    q = 0.0
        candidati.append((-q, pos, tag.split("-")[0]))

    for _, _, lingua in sorted(candidati):
        if lingua in CATALOGHI:
            return lingua
    return DEFAULT_LOCALE


def get_message(key: str, locale: str | None = None) -> str:
    """Testo della chiave nella lingua richiesta; chiave sconosciuta => la chiave stessa."""
    catalogo = CATALOGHI.get((locale or DEFAULT_LOCALE).lower()) or CATALOGHI.get(DEFAULT_LOCALE, {})
    return catalogo.get(key, key)
