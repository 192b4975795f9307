import pytest
from sqlalchemy.exc import IntegrityError

from ambulatorio.exceptions import EntityNotFoundError, EntityStatusError
from ambulatorio.models import Medico, StatoRecord
from ambulatorio.schemas import MedicoCreate, MedicoDTO


def test_create_forza_stato_active_e_ignora_id(servizi, stato):
    payload = MedicoCreate.model_validate(
        {"id": 99, "record_status": "DELETED", "nome": "Laura", "cognome": "Bianchi"}
    )
    creato = servizi.medici.create(payload)

    assert creato.id is not None
    assert creato.id != 99
    assert stato(Medico, creato.id) == StatoRecord.ACTIVE
    assert servizi.medici.get_by_id(creato.id) == creato


def test_get_by_id_inesistente(servizi):
    with pytest.raises(EntityNotFoundError) as exc:
        servizi.medici.get_by_id(12345)
    assert exc.value.message_key == "error.medico.notFound.exception"


def test_get_dopo_delete_non_trovato(servizi, medico):
    servizi.medici.delete_by_id(medico.id)

    with pytest.raises(EntityNotFoundError):
        servizi.medici.get_by_id(medico.id)


def test_restore_dopo_delete(servizi, medico, stato):
    servizi.medici.delete_by_id(medico.id)
    assert stato(Medico, medico.id) == StatoRecord.DELETED

    servizi.medici.restore_by_id(medico.id)

    assert stato(Medico, medico.id) == StatoRecord.ACTIVE
    assert servizi.medici.get_by_id(medico.id) == medico


def test_doppia_delete_rifiutata(servizi, medico):
    servizi.medici.delete_by_id(medico.id)

    with pytest.raises(EntityStatusError) as exc:
        servizi.medici.delete_by_id(medico.id)
    assert exc.value.message_key == "error.medico.status.deleted.exception"


def test_restore_di_record_attivo_rifiutato(servizi, medico):
    with pytest.raises(EntityStatusError) as exc:
        servizi.medici.restore_by_id(medico.id)
    assert exc.value.message_key == "error.medico.status.active.exception"


def test_delete_e_restore_di_id_inesistente(servizi):
    with pytest.raises(EntityNotFoundError):
        servizi.medici.delete_by_id(404)
    with pytest.raises(EntityNotFoundError):
        servizi.medici.restore_by_id(404)


def test_update_parziale_lascia_invariati_gli_altri_campi(servizi, medico):
    aggiornato = servizi.medici.update_by_id(MedicoDTO(id=777, telefono="02 9998877"), medico.id)

    assert aggiornato.telefono == "02 9998877"
    letto = servizi.medici.get_by_id(medico.id)
    assert letto.id == medico.id
    assert letto.telefono == "02 9998877"
    assert (letto.nome, letto.cognome, letto.email) == (medico.nome, medico.cognome, medico.email)


def test_update_di_record_cancellato(servizi, medico):
    servizi.medici.delete_by_id(medico.id)

    with pytest.raises(EntityNotFoundError):
        servizi.medici.update_by_id(MedicoDTO(nome="Nuovo"), medico.id)


def test_liste_per_stato(servizi, stato):
    ids = [
        servizi.medici.create(MedicoCreate(nome=f"Nome{i}", cognome=f"Cognome{i}")).id
        for i in range(5)
    ]
    servizi.medici.delete_by_id(ids[0])
    servizi.medici.delete_by_id(ids[1])
    servizi.medici.restore_by_id(ids[1])
    servizi.medici.delete_by_id(ids[4])

    attivi = {m.id for m in servizi.medici.get_all()}
    cancellati = {m.id for m in servizi.medici.get_all_deleted()}

    assert attivi == {ids[1], ids[2], ids[3]}
    assert cancellati == {ids[0], ids[4]}
    assert all(stato(Medico, i) == StatoRecord.ACTIVE for i in attivi)
    assert all(stato(Medico, i) == StatoRecord.DELETED for i in cancellati)


def test_delete_all_e_restore_all_senza_controllo_di_stato(servizi, stato):
    ids = [servizi.medici.create(MedicoCreate(nome="N", cognome=f"C{i}")).id for i in range(3)]
    servizi.medici.delete_by_id(ids[0])

    # il record già cancellato non blocca l'operazione massiva
    assert servizi.medici.delete_all() == 3
    assert servizi.medici.get_all() == []
    assert servizi.medici.delete_all() == 3

    assert servizi.medici.restore_all() == 3
    assert {m.id for m in servizi.medici.get_all()} == set(ids)
    assert all(stato(Medico, i) == StatoRecord.ACTIVE for i in ids)


def test_email_duplicata(servizi, medico):
    with pytest.raises(IntegrityError):
        servizi.medici.create(MedicoCreate(nome="Altro", cognome="Medico", email=medico.email))

    # la transazione fallita non lascia residui
    assert [m.id for m in servizi.medici.get_all()] == [medico.id]


def test_medico_by_paziente_cancellato_non_trovato(servizi, medico, paziente):
    assert servizi.medici.get_medico_by_paziente_id(paziente.id) == medico

    servizi.medici.delete_by_id(medico.id)

    # il paziente resta attivo, ma il medico risolto no
    assert servizi.pazienti.get_by_id(paziente.id) == paziente
    with pytest.raises(EntityNotFoundError):
        servizi.medici.get_medico_by_paziente_id(paziente.id)


def test_medico_by_segretario_e_by_prenotazione(servizi, medico, segretario, prenotazione):
    assert servizi.medici.get_medico_by_segretario_id(segretario.id) == medico
    assert servizi.medici.get_medico_by_prenotazione_id(prenotazione.id) == medico

    with pytest.raises(EntityNotFoundError):
        servizi.medici.get_medico_by_segretario_id(999)
    with pytest.raises(EntityNotFoundError):
        servizi.medici.get_medico_by_prenotazione_id(999)


def test_medico_by_email(servizi, medico):
    assert servizi.medici.get_medico_by_email("m.rossi@studio.it") == medico

    with pytest.raises(EntityNotFoundError):
        servizi.medici.get_medico_by_email("M.ROSSI@studio.it")

    servizi.medici.delete_by_id(medico.id)
    with pytest.raises(EntityNotFoundError):
        servizi.medici.get_medico_by_email("m.rossi@studio.it")


def test_ricerca_per_nome_e_cognome(servizi):
    maria_rossi = servizi.medici.create(MedicoCreate(nome="Maria", cognome="Rossi"))
    mariangela = servizi.medici.create(MedicoCreate(nome="Mariangela", cognome="Rossini"))
    servizi.medici.create(MedicoCreate(nome="maria", cognome="rossi"))
    servizi.medici.create(MedicoCreate(nome="Maria", cognome="Bianchi"))
    cancellata = servizi.medici.create(MedicoCreate(nome="Maria", cognome="Rossi"))
    servizi.medici.delete_by_id(cancellata.id)

    trovati = servizi.medici.get_medici_by_nome_and_cognome("Maria", "Rossi")

    assert {m.id for m in trovati} == {maria_rossi.id, mariangela.id}


def test_ricerca_tratta_i_jolly_come_letterali(servizi):
    servizi.medici.create(MedicoCreate(nome="Maria", cognome="Rossi"))

    assert servizi.medici.get_medici_by_nome_and_cognome("%", "_") == []
