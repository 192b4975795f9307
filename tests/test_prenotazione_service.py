from datetime import date, datetime

import pytest

from ambulatorio.exceptions import EntityNotFoundError, EntityStatusError
from ambulatorio.models import Prenotazione, StatoRecord
from ambulatorio.schemas import MedicoCreate, PrenotazioneCreate, PrenotazioneDTO


def _prenota(servizi, medico_id, paziente_id, quando, note=None):
    return servizi.prenotazioni.create(
        PrenotazioneCreate(data_prenotazione=quando, note=note, medico_id=medico_id, paziente_id=paziente_id)
    )


def test_create(servizi, prenotazione, stato):
    assert stato(Prenotazione, prenotazione.id) == StatoRecord.ACTIVE
    assert prenotazione.data_prenotazione == datetime(2026, 3, 2, 9, 30)


def test_create_richiede_medico_e_paziente_attivi(servizi, medico, paziente):
    with pytest.raises(EntityNotFoundError) as exc:
        _prenota(servizi, 999, paziente.id, datetime(2026, 3, 2, 10))
    assert exc.value.message_key == "error.medico.notFound.exception"

    servizi.pazienti.delete_by_id(paziente.id)
    with pytest.raises(EntityNotFoundError) as exc:
        _prenota(servizi, medico.id, paziente.id, datetime(2026, 3, 2, 10))
    assert exc.value.message_key == "error.paziente.notFound.exception"

    assert servizi.prenotazioni.get_all() == []


def test_ciclo_di_vita(servizi, prenotazione):
    with pytest.raises(EntityStatusError) as exc:
        servizi.prenotazioni.restore_by_id(prenotazione.id)
    assert exc.value.message_key == "error.prenotazione.status.active.exception"

    servizi.prenotazioni.delete_by_id(prenotazione.id)
    with pytest.raises(EntityNotFoundError):
        servizi.prenotazioni.get_by_id(prenotazione.id)

    servizi.prenotazioni.restore_by_id(prenotazione.id)
    assert servizi.prenotazioni.get_by_id(prenotazione.id) == prenotazione


def test_update_sposta_orario(servizi, prenotazione):
    nuova = datetime(2026, 3, 3, 11, 0)

    aggiornata = servizi.prenotazioni.update_by_id(PrenotazioneDTO(data_prenotazione=nuova), prenotazione.id)

    assert aggiornata.data_prenotazione == nuova
    assert aggiornata.note == "Prima visita"
    assert (aggiornata.medico_id, aggiornata.paziente_id) == (prenotazione.medico_id, prenotazione.paziente_id)


def test_prenotazioni_by_medico_e_by_paziente(servizi, medico, paziente, prenotazione):
    altro = servizi.medici.create(MedicoCreate(nome="Laura", cognome="Bianchi"))
    prima = _prenota(servizi, altro.id, paziente.id, datetime(2026, 3, 1, 8, 0))
    cancellata = _prenota(servizi, medico.id, paziente.id, datetime(2026, 3, 5, 8, 0))
    servizi.prenotazioni.delete_by_id(cancellata.id)

    assert servizi.prenotazioni.get_prenotazioni_by_medico_id(medico.id) == [prenotazione]
    assert servizi.prenotazioni.get_prenotazioni_by_paziente_id(paziente.id) == [prima, prenotazione]


def test_agenda_giornaliera(servizi, medico, paziente, prenotazione):
    pomeriggio = _prenota(servizi, medico.id, paziente.id, datetime(2026, 3, 2, 15, 0))
    mattina = _prenota(servizi, medico.id, paziente.id, datetime(2026, 3, 2, 8, 0))
    _prenota(servizi, medico.id, paziente.id, datetime(2026, 3, 3, 0, 0))
    annullata = _prenota(servizi, medico.id, paziente.id, datetime(2026, 3, 2, 12, 0))
    servizi.prenotazioni.delete_by_id(annullata.id)

    agenda = servizi.prenotazioni.agenda_giornaliera(medico.id, date(2026, 3, 2))

    assert [p.id for p in agenda] == [mattina.id, prenotazione.id, pomeriggio.id]
