"""
Logica di business dell'ambulatorio.

Ogni service:
- riceve repository, mapper e session factory nel costruttore (build_services li assembla una volta)
- apre una transazione per operazione con db_session()
- nasconde i record DELETED in letture, liste e ricerche
- rifiuta le transizioni di stato non ammesse (delete su DELETED, restore su ACTIVE)
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session, sessionmaker

from .db import SessionLocal, db_session
from .exceptions import EntityNotFoundError, EntityStatusError
from .mappers import MedicoMapper, PazienteMapper, PrenotazioneMapper, SegretarioMapper
from .models import Medico, Paziente, StatoRecord
from .repositories import (
    BaseRepository,
    MedicoRepository,
    PazienteRepository,
    PrenotazioneRepository,
    SegretarioRepository,
)
from .schemas import (
    MedicoCreate,
    MedicoDTO,
    PazienteCreate,
    PazienteDTO,
    PrenotazioneCreate,
    PrenotazioneDTO,
    SegretarioCreate,
    SegretarioDTO,
)

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=BaseModel)
D = TypeVar("D", bound=BaseModel)


@contextmanager
def _processo(nome: str) -> Iterator[None]:
    logger.info("Inizio processo %s", nome)
    try:
        yield
    finally:
        logger.info("Fine processo %s", nome)


def _is_active(entity: Any) -> bool:
    return entity is not None and entity.record_status == StatoRecord.ACTIVE


class BaseService(Generic[C, D]):
    """
    Ciclo di vita comune: create, lettura dei soli ACTIVE, modifica parziale,
    cancellazione logica e ripristino (singolo con controllo di stato, massivo senza).
    """

    # chiave usata nei messaggi di errore: error.<entita>.notFound.exception
    entita: str
    campi_modificabili: tuple[str, ...] = ()

    def __init__(self, repository: BaseRepository, mapper: Any, session_factory: sessionmaker[Session] | None = None):
        self.repository = repository
        self.mapper = mapper
        self.session_factory = session_factory or SessionLocal

    # -------- helper --------
    def _session(self):
        return db_session(self.session_factory)

    def not_found(self) -> EntityNotFoundError:
        return EntityNotFoundError(f"error.{self.entita}.notFound.exception")

    def _active_or_404(self, entity: Any) -> Any:
        if not _is_active(entity):
            raise self.not_found()
        return entity

    def _get_active_entity(self, s: Session, entity_id: int) -> Any:
        return self._active_or_404(self.repository.find_by_id(s, entity_id))

    def _to_dtos(self, entities: Iterable[Any]) -> list[D]:
        return [self.mapper.to_dto(e) for e in entities if _is_active(e)]

    def _check_riferimenti(self, s: Session, valori: dict[str, Any]) -> None:
        """Verifica che le entità referenziate esistano e siano ACTIVE (hook per sottoclassi)."""

    # -------- ciclo di vita --------
    def create(self, dto: C) -> D:
        with _processo(f"create {self.entita}"), self._session() as s:
            self._check_riferimenti(s, dto.model_dump())
            entity = self.mapper.to_entity(dto)
            entity.id = None
            entity.record_status = StatoRecord.ACTIVE
            entity = self.repository.save(s, entity)
            logger.info("Creato %s id=%s", self.entita, entity.id)
            return self.mapper.to_dto(entity)

    def get_by_id(self, entity_id: int) -> D:
        with self._session() as s:
            return self.mapper.to_dto(self._get_active_entity(s, entity_id))

    def get_all(self) -> list[D]:
        with self._session() as s:
            return [self.mapper.to_dto(e) for e in self.repository.find_by_record_status(s, StatoRecord.ACTIVE)]

    def get_all_deleted(self) -> list[D]:
        with self._session() as s:
            return [self.mapper.to_dto(e) for e in self.repository.find_by_record_status(s, StatoRecord.DELETED)]

    def update_by_id(self, patch: D, entity_id: int) -> D:
        with _processo(f"update {self.entita}"), self._session() as s:
            entity = self._get_active_entity(s, entity_id)

            valori = {
                campo: getattr(patch, campo)
                for campo in self.campi_modificabili
                if getattr(patch, campo, None) is not None
            }
            self._check_riferimenti(s, valori)
            for campo, valore in valori.items():
                setattr(entity, campo, valore)

            entity = self.repository.save(s, entity)
            return self.mapper.to_dto(entity)

    def delete_by_id(self, entity_id: int) -> None:
        with _processo(f"delete {self.entita}"), self._session() as s:
            entity = self.repository.find_by_id(s, entity_id)
            if entity is None:
                raise self.not_found()
            if entity.record_status == StatoRecord.DELETED:
                raise EntityStatusError(f"error.{self.entita}.status.deleted.exception")
            self.repository.soft_delete_by_id(s, entity_id)

    def delete_all(self) -> int:
        with _processo(f"delete all {self.entita}"), self._session() as s:
            return self.repository.soft_delete(s)

    def restore_by_id(self, entity_id: int) -> None:
        with _processo(f"restore {self.entita}"), self._session() as s:
            entity = self.repository.find_by_id(s, entity_id)
            if entity is None:
                raise self.not_found()
            if entity.record_status == StatoRecord.ACTIVE:
                raise EntityStatusError(f"error.{self.entita}.status.active.exception")
            self.repository.restore_by_id(s, entity_id)

    def restore_all(self) -> int:
        with _processo(f"restore all {self.entita}"), self._session() as s:
            return self.repository.restore(s)


def _check_medico(s: Session, medico_id: int | None) -> None:
    if medico_id is not None and not _is_active(s.get(Medico, medico_id)):
        raise EntityNotFoundError("error.medico.notFound.exception")


def _check_paziente(s: Session, paziente_id: int | None) -> None:
    if paziente_id is not None and not _is_active(s.get(Paziente, paziente_id)):
        raise EntityNotFoundError("error.paziente.notFound.exception")


class MedicoService(BaseService[MedicoCreate, MedicoDTO]):
    entita = "medico"
    campi_modificabili = ("nome", "cognome", "telefono", "email")
    repository: MedicoRepository

    def _lookup(self, finder: Callable[[Session], Medico | None]) -> MedicoDTO:
        with self._session() as s:
            return self.mapper.to_dto(self._active_or_404(finder(s)))

    def get_medico_by_segretario_id(self, segretario_id: int) -> MedicoDTO:
        return self._lookup(lambda s: self.repository.find_medico_by_segretario_id(s, segretario_id))

    def get_medico_by_paziente_id(self, paziente_id: int) -> MedicoDTO:
        return self._lookup(lambda s: self.repository.find_medico_by_paziente_id(s, paziente_id))

    def get_medico_by_prenotazione_id(self, prenotazione_id: int) -> MedicoDTO:
        return self._lookup(lambda s: self.repository.find_medico_by_prenotazione_id(s, prenotazione_id))

    def get_medico_by_email(self, email: str) -> MedicoDTO:
        return self._lookup(lambda s: self.repository.find_by_email(s, email))

    def get_medici_by_nome_and_cognome(self, nome: str, cognome: str) -> list[MedicoDTO]:
        with self._session() as s:
            return self._to_dtos(self.repository.search_by_nome_and_cognome(s, nome, cognome))


class SegretarioService(BaseService[SegretarioCreate, SegretarioDTO]):
    entita = "segretario"
    campi_modificabili = ("nome", "cognome", "telefono", "email", "medico_id")
    repository: SegretarioRepository

    def _check_riferimenti(self, s: Session, valori: dict[str, Any]) -> None:
        _check_medico(s, valori.get("medico_id"))

    def get_segretario_by_email(self, email: str) -> SegretarioDTO:
        with self._session() as s:
            return self.mapper.to_dto(self._active_or_404(self.repository.find_by_email(s, email)))

    def get_segretari_by_medico_id(self, medico_id: int) -> list[SegretarioDTO]:
        with self._session() as s:
            return self._to_dtos(self.repository.find_segretari_by_medico_id(s, medico_id))

    def get_segretari_by_nome_and_cognome(
        self, nome: str, cognome: str, medico_id: int | None = None
    ) -> list[SegretarioDTO]:
        with self._session() as s:
            if medico_id is None:
                trovati = self.repository.search_by_nome_and_cognome(s, nome, cognome)
            else:
                trovati = self.repository.search_by_nome_and_cognome_and_medico_id(s, nome, cognome, medico_id)
            return self._to_dtos(trovati)


class PazienteService(BaseService[PazienteCreate, PazienteDTO]):
    entita = "paziente"
    campi_modificabili = ("nome", "cognome", "telefono", "email", "codice_fiscale", "medico_id")
    repository: PazienteRepository

    def _check_riferimenti(self, s: Session, valori: dict[str, Any]) -> None:
        _check_medico(s, valori.get("medico_id"))

    def _lookup(self, finder: Callable[[Session], Paziente | None]) -> PazienteDTO:
        with self._session() as s:
            return self.mapper.to_dto(self._active_or_404(finder(s)))

    def get_pazienti_by_medico_id(self, medico_id: int) -> list[PazienteDTO]:
        with self._session() as s:
            return self._to_dtos(self.repository.find_pazienti_by_medico_id(s, medico_id))

    def get_pazienti_by_segretario_id(self, segretario_id: int) -> list[PazienteDTO]:
        with self._session() as s:
            return self._to_dtos(self.repository.find_pazienti_by_segretario_id(s, segretario_id))

    def get_paziente_by_prenotazione_id(self, prenotazione_id: int) -> PazienteDTO:
        return self._lookup(lambda s: self.repository.find_paziente_by_prenotazione_id(s, prenotazione_id))

    def get_paziente_by_email(self, email: str) -> PazienteDTO:
        return self._lookup(lambda s: self.repository.find_by_email(s, email))

    def get_paziente_by_codice_fiscale(self, codice_fiscale: str) -> PazienteDTO:
        return self._lookup(lambda s: self.repository.find_paziente_by_codice_fiscale(s, codice_fiscale))

    def get_pazienti_by_nome_and_cognome(
        self,
        nome: str,
        cognome: str,
        medico_id: int | None = None,
        segretario_id: int | None = None,
    ) -> list[PazienteDTO]:
        """Ricerca per sottostringa di nome e cognome, opzionalmente per medico o segretario."""
        if medico_id is not None and segretario_id is not None:
            raise ValueError("Filtro per medico e per segretario non combinabili")
        with self._session() as s:
            if medico_id is not None:
                trovati = self.repository.search_by_nome_and_cognome_and_medico_id(s, nome, cognome, medico_id)
            elif segretario_id is not None:
                trovati = self.repository.search_by_nome_and_cognome_and_segretario_id(
                    s, nome, cognome, segretario_id
                )
            else:
                trovati = self.repository.search_by_nome_and_cognome(s, nome, cognome)
            return self._to_dtos(trovati)


class PrenotazioneService(BaseService[PrenotazioneCreate, PrenotazioneDTO]):
    entita = "prenotazione"
    campi_modificabili = ("data_prenotazione", "note", "medico_id", "paziente_id")
    repository: PrenotazioneRepository

    def _check_riferimenti(self, s: Session, valori: dict[str, Any]) -> None:
        _check_medico(s, valori.get("medico_id"))
        _check_paziente(s, valori.get("paziente_id"))

    def get_prenotazioni_by_medico_id(self, medico_id: int) -> list[PrenotazioneDTO]:
        with self._session() as s:
            return self._to_dtos(self.repository.find_prenotazioni_by_medico_id(s, medico_id))

    def get_prenotazioni_by_paziente_id(self, paziente_id: int) -> list[PrenotazioneDTO]:
        with self._session() as s:
            return self._to_dtos(self.repository.find_prenotazioni_by_paziente_id(s, paziente_id))

    def agenda_giornaliera(self, medico_id: int, giorno: date) -> list[PrenotazioneDTO]:
        """Prenotazioni attive del medico nel giorno indicato, in ordine di orario."""
        with self._session() as s:
            return self._to_dtos(self.repository.find_prenotazioni_by_medico_id_and_giorno(s, medico_id, giorno))


@dataclass(frozen=True)
class Servizi:
    medici: MedicoService
    segretari: SegretarioService
    pazienti: PazienteService
    prenotazioni: PrenotazioneService


def build_services(session_factory: sessionmaker[Session] | None = None) -> Servizi:
    """Assembla i service con le loro dipendenze (una volta all'avvio del processo)."""
    factory = session_factory or SessionLocal
    return Servizi(
        medici=MedicoService(MedicoRepository(), MedicoMapper(), factory),
        segretari=SegretarioService(SegretarioRepository(), SegretarioMapper(), factory),
        pazienti=PazienteService(PazienteRepository(), PazienteMapper(), factory),
        prenotazioni=PrenotazioneService(PrenotazioneRepository(), PrenotazioneMapper(), factory),
    )
