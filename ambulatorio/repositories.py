"""
Accesso ai dati per entità.

I repository non aprono sessioni: ogni metodo riceve la sessione `s` della
transazione corrente, aperta dal service con db_session().
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Generic, TypeVar

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from .models import Medico, Paziente, Prenotazione, Segretario, StatoRecord

E = TypeVar("E", Medico, Segretario, Paziente, Prenotazione)


class BaseRepository(Generic[E]):
    """CRUD e cambi di stato comuni a tutte le entità."""

    model: type[E]

    def find_by_id(self, s: Session, entity_id: int) -> E | None:
        return s.get(self.model, entity_id)

    def find_by_record_status(self, s: Session, stato: StatoRecord) -> list[E]:
        q = select(self.model).where(self.model.record_status == stato).order_by(self.model.id)
        return list(s.scalars(q))

    def save(self, s: Session, entity: E) -> E:
        """Persiste e rilegge l'entità per avere id e default generati dal DB."""
        s.add(entity)
        s.flush()
        s.refresh(entity)
        return entity

    def _set_status(self, s: Session, stato: StatoRecord, entity_id: int | None = None) -> int:
        stmt = update(self.model).values(record_status=stato)
        if entity_id is not None:
            stmt = stmt.where(self.model.id == entity_id)
        return s.execute(stmt).rowcount

    def soft_delete_by_id(self, s: Session, entity_id: int) -> None:
        self._set_status(s, StatoRecord.DELETED, entity_id)

    def soft_delete(self, s: Session) -> int:
        return self._set_status(s, StatoRecord.DELETED)

    def restore_by_id(self, s: Session, entity_id: int) -> None:
        self._set_status(s, StatoRecord.ACTIVE, entity_id)

    def restore(self, s: Session) -> int:
        return self._set_status(s, StatoRecord.ACTIVE)


class PersonaRepository(BaseRepository[E]):
    """Query comuni alle anagrafiche (medici, segretari, pazienti)."""

    def find_by_email(self, s: Session, email: str) -> E | None:
        return s.scalars(select(self.model).where(self.model.email == email)).first()

    def _search_nome_cognome(self, nome: str, cognome: str):
        # LIKE case-sensitive (vedi PRAGMA in db.py); % e _ nell'input sono letterali
        return select(self.model).where(
            self.model.nome.contains(nome, autoescape=True),
            self.model.cognome.contains(cognome, autoescape=True),
        )

    def search_by_nome_and_cognome(self, s: Session, nome: str, cognome: str) -> list[E]:
        q = self._search_nome_cognome(nome, cognome).order_by(self.model.id)
        return list(s.scalars(q))


class MedicoRepository(PersonaRepository[Medico]):
    model = Medico

    def find_medico_by_segretario_id(self, s: Session, segretario_id: int) -> Medico | None:
        q = select(Medico).join(Segretario, Segretario.medico_id == Medico.id).where(Segretario.id == segretario_id)
        return s.scalars(q).first()

    def find_medico_by_paziente_id(self, s: Session, paziente_id: int) -> Medico | None:
        q = select(Medico).join(Paziente, Paziente.medico_id == Medico.id).where(Paziente.id == paziente_id)
        return s.scalars(q).first()

    def find_medico_by_prenotazione_id(self, s: Session, prenotazione_id: int) -> Medico | None:
        q = (
            select(Medico)
            .join(Prenotazione, Prenotazione.medico_id == Medico.id)
            .where(Prenotazione.id == prenotazione_id)
        )
        return s.scalars(q).first()


class SegretarioRepository(PersonaRepository[Segretario]):
    model = Segretario

    def find_segretari_by_medico_id(self, s: Session, medico_id: int) -> list[Segretario]:
        q = select(Segretario).where(Segretario.medico_id == medico_id).order_by(Segretario.id)
        return list(s.scalars(q))

    def search_by_nome_and_cognome_and_medico_id(
        self, s: Session, nome: str, cognome: str, medico_id: int
    ) -> list[Segretario]:
        q = self._search_nome_cognome(nome, cognome).where(Segretario.medico_id == medico_id).order_by(Segretario.id)
        return list(s.scalars(q))


class PazienteRepository(PersonaRepository[Paziente]):
    model = Paziente

    def find_pazienti_by_medico_id(self, s: Session, medico_id: int) -> list[Paziente]:
        q = select(Paziente).where(Paziente.medico_id == medico_id).order_by(Paziente.id)
        return list(s.scalars(q))

    def find_pazienti_by_segretario_id(self, s: Session, segretario_id: int) -> list[Paziente]:
        """Segretario e paziente condividono il medico di riferimento."""
        q = (
            select(Paziente)
            .join(Segretario, Segretario.medico_id == Paziente.medico_id)
            .where(Segretario.id == segretario_id)
            .order_by(Paziente.id)
        )
        return list(s.scalars(q))

    def find_paziente_by_prenotazione_id(self, s: Session, prenotazione_id: int) -> Paziente | None:
        q = (
            select(Paziente)
            .join(Prenotazione, Prenotazione.paziente_id == Paziente.id)
            .where(Prenotazione.id == prenotazione_id)
        )
        return s.scalars(q).first()

    def find_paziente_by_codice_fiscale(self, s: Session, codice_fiscale: str) -> Paziente | None:
        return s.scalars(select(Paziente).where(Paziente.codice_fiscale == codice_fiscale)).first()

    def search_by_nome_and_cognome_and_medico_id(
        self, s: Session, nome: str, cognome: str, medico_id: int
    ) -> list[Paziente]:
        q = self._search_nome_cognome(nome, cognome).where(Paziente.medico_id == medico_id).order_by(Paziente.id)
        return list(s.scalars(q))

    def search_by_nome_and_cognome_and_segretario_id(
        self, s: Session, nome: str, cognome: str, segretario_id: int
    ) -> list[Paziente]:
        q = (
            self._search_nome_cognome(nome, cognome)
            .join(Segretario, Segretario.medico_id == Paziente.medico_id)
            .where(Segretario.id == segretario_id)
            .order_by(Paziente.id)
        )
        return list(s.scalars(q))


class PrenotazioneRepository(BaseRepository[Prenotazione]):
    model = Prenotazione

    def find_prenotazioni_by_medico_id(self, s: Session, medico_id: int) -> list[Prenotazione]:
        q = (
            select(Prenotazione)
            .where(Prenotazione.medico_id == medico_id)
            .order_by(Prenotazione.data_prenotazione.asc(), Prenotazione.id)
        )
        return list(s.scalars(q))

    def find_prenotazioni_by_paziente_id(self, s: Session, paziente_id: int) -> list[Prenotazione]:
        q = (
            select(Prenotazione)
            .where(Prenotazione.paziente_id == paziente_id)
            .order_by(Prenotazione.data_prenotazione.asc(), Prenotazione.id)
        )
        return list(s.scalars(q))

    def find_prenotazioni_by_medico_id_and_giorno(
        self, s: Session, medico_id: int, giorno: date
    ) -> list[Prenotazione]:
        inizio = datetime.combine(giorno, datetime.min.time())
        fine = inizio + timedelta(days=1)
        q = (
            select(Prenotazione)
            .where(
                Prenotazione.medico_id == medico_id,
                Prenotazione.data_prenotazione >= inizio,
                Prenotazione.data_prenotazione < fine,
            )
            .order_by(Prenotazione.data_prenotazione.asc())
        )
        return list(s.scalars(q))
