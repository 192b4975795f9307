from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .db import db_session
from .models import Medico, Paziente, Prenotazione, Segretario


def seed_base(session_factory: sessionmaker[Session] | None = None) -> None:
    """
    Popola dati minimi (idempotente, chiave = email):
    - medici
    - segretari e pazienti collegati ai medici
    - una prenotazione per paziente, se non ne ha
    """
    with db_session(session_factory) as s:
        # Medici
        medici = [
            ("Mario", "Rossi", "333 1112233", "m.rossi@ambulatorio.it"),
            ("Laura", "Bianchi", "333 4445566", "l.bianchi@ambulatorio.it"),
        ]
        for nome, cognome, telefono, email in medici:
            if s.execute(select(Medico).where(Medico.email == email)).scalar_one_or_none() is None:
                s.add(Medico(nome=nome, cognome=cognome, telefono=telefono, email=email))
        s.flush()

        rossi = s.execute(select(Medico).where(Medico.email == "m.rossi@ambulatorio.it")).scalar_one()
        bianchi = s.execute(select(Medico).where(Medico.email == "l.bianchi@ambulatorio.it")).scalar_one()

        # Segretari
        segretari = [
            ("Anna", "Neri", "a.neri@ambulatorio.it", rossi.id),
            ("Paolo", "Conti", "p.conti@ambulatorio.it", bianchi.id),
        ]
        for nome, cognome, email, medico_id in segretari:
            if s.execute(select(Segretario).where(Segretario.email == email)).scalar_one_or_none() is None:
                s.add(Segretario(nome=nome, cognome=cognome, email=email, medico_id=medico_id))

        # Pazienti
        pazienti = [
            ("Maria", "Rossini", "maria.rossini@email.it", "RSSMRA80A41H501U", rossi.id),
            ("Giulia", "Verdi", "giulia.verdi@email.it", "VRDGLI85C55F205X", rossi.id),
            ("Luca", "Gallo", "luca.gallo@email.it", "GLLLCU90D10L219K", bianchi.id),
        ]
        for nome, cognome, email, cf, medico_id in pazienti:
            if s.execute(select(Paziente).where(Paziente.email == email)).scalar_one_or_none() is None:
                s.add(Paziente(nome=nome, cognome=cognome, email=email, codice_fiscale=cf, medico_id=medico_id))
        s.flush()

        # Prenotazioni (una per paziente, domani dalle 9 a intervalli di 30 minuti)
        domani = datetime.combine(datetime.now().date() + timedelta(days=1), datetime.min.time())
        for i, p in enumerate(s.scalars(select(Paziente).order_by(Paziente.id))):
            if p.medico_id is None:
                continue
            ha_prenotazioni = s.execute(
                select(Prenotazione.id).where(Prenotazione.paziente_id == p.id).limit(1)
            ).first()
            if ha_prenotazioni is None:
                s.add(
                    Prenotazione(
                        data_prenotazione=domani + timedelta(hours=9, minutes=30 * i),
                        note="Prima visita",
                        medico_id=p.medico_id,
                        paziente_id=p.id,
                    )
                )
