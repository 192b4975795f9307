"""
Forme di trasferimento dati.

- *Create : forma di creazione, senza id e senza stato (assegnati dal server)
- *DTO    : forma di lettura e di modifica parziale; id + campi modificabili, tutti opzionali
"""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

CODICE_FISCALE_PATTERN = r"^[A-Za-z0-9]{16}$"


class _Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# Medico

class MedicoCreate(_Schema):
    nome: str = Field(..., min_length=1, max_length=80)
    cognome: str = Field(..., min_length=1, max_length=80)
    telefono: str | None = Field(None, max_length=30)
    email: EmailStr | None = None


class MedicoDTO(_Schema):
    id: int | None = None
    nome: str | None = Field(None, min_length=1, max_length=80)
    cognome: str | None = Field(None, min_length=1, max_length=80)
    telefono: str | None = Field(None, max_length=30)
    email: EmailStr | None = None


# Segretario

class SegretarioCreate(_Schema):
    nome: str = Field(..., min_length=1, max_length=80)
    cognome: str = Field(..., min_length=1, max_length=80)
    telefono: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    medico_id: int | None = None


class SegretarioDTO(_Schema):
    id: int | None = None
    nome: str | None = Field(None, min_length=1, max_length=80)
    cognome: str | None = Field(None, min_length=1, max_length=80)
    telefono: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    medico_id: int | None = None


# Paziente

class PazienteCreate(_Schema):
    nome: str = Field(..., min_length=1, max_length=80)
    cognome: str = Field(..., min_length=1, max_length=80)
    telefono: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    codice_fiscale: str | None = Field(None, pattern=CODICE_FISCALE_PATTERN)
    medico_id: int | None = None


class PazienteDTO(_Schema):
    id: int | None = None
    nome: str | None = Field(None, min_length=1, max_length=80)
    cognome: str | None = Field(None, min_length=1, max_length=80)
    telefono: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    codice_fiscale: str | None = Field(None, pattern=CODICE_FISCALE_PATTERN)
    medico_id: int | None = None


# Prenotazione

def _a_utc_naive(valore: datetime | None) -> datetime | None:
    # il DB salva datetime naive: gli orari con offset vengono portati in UTC
    if valore is not None and valore.tzinfo is not None:
        return valore.astimezone(timezone.utc).replace(tzinfo=None)
    return valore


class PrenotazioneCreate(_Schema):
    data_prenotazione: datetime
    note: str | None = None
    medico_id: int
    paziente_id: int

    normalizza_data = field_validator("data_prenotazione")(_a_utc_naive)


class PrenotazioneDTO(_Schema):
    id: int | None = None
    data_prenotazione: datetime | None = None
    note: str | None = None
    medico_id: int | None = None
    paziente_id: int | None = None

    normalizza_data = field_validator("data_prenotazione")(_a_utc_naive)


# Errori

class ResponseErrorDTO(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str


class ResponseValidationErrorDTO(ResponseErrorDTO):
    errors: dict[str, list[str]]
