"""
Fixture condivise: DB SQLite in memoria per ogni test, service assemblati
con build_services e app FastAPI costruita con create_app.
"""
import os

# prima di importare ambulatorio: l'engine di default non deve toccare file su disco
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEFAULT_LOCALE", "it")

from datetime import datetime
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from ambulatorio.api_main import create_app
from ambulatorio.db import create_db_engine, db_session, init_db, make_session_factory
from ambulatorio.models import StatoRecord
from ambulatorio.schemas import MedicoCreate, PazienteCreate, PrenotazioneCreate, SegretarioCreate
from ambulatorio.services import Servizi, build_services


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture
def servizi(session_factory) -> Servizi:
    return build_services(session_factory)


@pytest.fixture
def stato(session_factory):
    """Legge direttamente dal DB lo stato di un record."""

    def _stato(model, entity_id: int) -> StatoRecord:
        with db_session(session_factory) as s:
            return s.get(model, entity_id).record_status

    return _stato


@pytest.fixture
def medico(servizi):
    return servizi.medici.create(
        MedicoCreate(nome="Mario", cognome="Rossi", telefono="333 1112233", email="m.rossi@studio.it")
    )


@pytest.fixture
def segretario(servizi, medico):
    return servizi.segretari.create(
        SegretarioCreate(nome="Anna", cognome="Neri", email="a.neri@studio.it", medico_id=medico.id)
    )


@pytest.fixture
def paziente(servizi, medico):
    return servizi.pazienti.create(
        PazienteCreate(
            nome="Giulia",
            cognome="Verdi",
            email="giulia.verdi@email.it",
            codice_fiscale="VRDGLI85C55F205X",
            medico_id=medico.id,
        )
    )


@pytest.fixture
def prenotazione(servizi, medico, paziente):
    return servizi.prenotazioni.create(
        PrenotazioneCreate(
            data_prenotazione=datetime(2026, 3, 2, 9, 30),
            note="Prima visita",
            medico_id=medico.id,
            paziente_id=paziente.id,
        )
    )


@pytest.fixture
def app(session_factory, servizi):
    return create_app(session_factory=session_factory, servizi=servizi, seed=False)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    r = client.post("/api/auth/register", json={"username": "segreteria", "password": "s3greta!"})
    assert r.status_code == 200, r.text
    r = client.post("/api/auth/login", data={"username": "segreteria", "password": "s3greta!"})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
