"""
Backend amministrativo Ambulatorio.

Struttura:
- config.py          : impostazioni da variabili d'ambiente / .env
- logging_utils.py   : configurazione logging (testo o JSON) e id richiesta
- db.py              : engine, sessioni SQLAlchemy e db_session()
- models.py          : modelli ORM (medici, segretari, pazienti, prenotazioni) e StatoRecord
- repositories.py    : query per entità (stato, chiavi esterne, email, ricerca per nome)
- schemas.py         : DTO pydantic di creazione e lettura/modifica
- mappers.py         : conversioni entità <-> DTO
- services.py        : ciclo di vita (create, modifica parziale, cancellazione logica, ripristino) e ricerche
- messages.py        : messaggi di errore localizzati per chiave
- error_handlers.py  : traduzione errori -> risposte HTTP
- api_main.py        : applicazione FastAPI (auth JWT + route)
- seed.py            : dati iniziali
- cli.py             : CLI amministrativa
- api_client.py      : client HTTP usato dalla console Streamlit
"""
