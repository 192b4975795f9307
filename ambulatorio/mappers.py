"""
Conversioni esplicite campo per campo tra entità ORM e DTO.
Le entità collegate sono ridotte al loro id. Nessuna logica di business.
"""
from __future__ import annotations

from .models import Medico, Paziente, Prenotazione, Segretario
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


class MedicoMapper:
    def to_entity(self, dto: MedicoCreate) -> Medico:
        return Medico(nome=dto.nome, cognome=dto.cognome, telefono=dto.telefono, email=dto.email)

    def to_dto(self, m: Medico) -> MedicoDTO:
        return MedicoDTO(id=m.id, nome=m.nome, cognome=m.cognome, telefono=m.telefono, email=m.email)


class SegretarioMapper:
    def to_entity(self, dto: SegretarioCreate) -> Segretario:
        return Segretario(
            nome=dto.nome,
            cognome=dto.cognome,
            telefono=dto.telefono,
            email=dto.email,
            medico_id=dto.medico_id,
        )

    def to_dto(self, s: Segretario) -> SegretarioDTO:
        return SegretarioDTO(
            id=s.id,
            nome=s.nome,
            cognome=s.cognome,
            telefono=s.telefono,
            email=s.email,
            medico_id=s.medico_id,
        )


class PazienteMapper:
    def to_entity(self, dto: PazienteCreate) -> Paziente:
        return Paziente(
            nome=dto.nome,
            cognome=dto.cognome,
            telefono=dto.telefono,
            email=dto.email,
            codice_fiscale=dto.codice_fiscale,
            medico_id=dto.medico_id,
        )

    def to_dto(self, p: Paziente) -> PazienteDTO:
        return PazienteDTO(
            id=p.id,
            nome=p.nome,
            cognome=p.cognome,
            telefono=p.telefono,
            email=p.email,
            codice_fiscale=p.codice_fiscale,
            medico_id=p.medico_id,
        )


class PrenotazioneMapper:
    def to_entity(self, dto: PrenotazioneCreate) -> Prenotazione:
        return Prenotazione(
            data_prenotazione=dto.data_prenotazione,
            note=dto.note,
            medico_id=dto.medico_id,
            paziente_id=dto.paziente_id,
        )

    def to_dto(self, pr: Prenotazione) -> PrenotazioneDTO:
        return PrenotazioneDTO(
            id=pr.id,
            data_prenotazione=pr.data_prenotazione,
            note=pr.note,
            medico_id=pr.medico_id,
            paziente_id=pr.paziente_id,
        )
