"""
Route HTTP delle quattro anagrafiche.

Le route di ricerca sono registrate prima di quelle del ciclo di vita,
così "/deleted", "/search", ... non vengono catturate da "/{entity_id}".
"""
from datetime import date
from typing import Any, Callable

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, EmailStr

from .dependencies import get_current_operatore, get_servizi
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
from .services import (
    BaseService,
    MedicoService,
    PazienteService,
    PrenotazioneService,
    SegretarioService,
)

PROTETTO = [Depends(get_current_operatore)]


def _service_dependency(attr: str) -> Callable[[Request], Any]:
    def dependency(request: Request) -> BaseService:
        return getattr(get_servizi(request), attr)

    return dependency


def crea_router_ciclo_vita(
    collezione: str,
    attr: str,
    create_model: type[BaseModel],
    dto_model: type[BaseModel],
) -> APIRouter:
    """Route CRUD + cancellazione logica/ripristino per una collezione."""
    router = APIRouter(prefix=f"/api/{collezione}", tags=[collezione], dependencies=PROTETTO)
    service = _service_dependency(attr)

    @router.post("", response_model=dto_model, status_code=status.HTTP_201_CREATED)
    def create(payload: create_model, svc: BaseService = Depends(service)):
        return svc.create(payload)

    @router.get("", response_model=list[dto_model])
    def get_all(svc: BaseService = Depends(service)):
        return svc.get_all()

    @router.get("/deleted", response_model=list[dto_model])
    def get_all_deleted(svc: BaseService = Depends(service)):
        return svc.get_all_deleted()

    @router.delete("")
    def delete_all(svc: BaseService = Depends(service)) -> dict[str, Any]:
        return {"ok": True, "aggiornati": svc.delete_all()}

    @router.post("/restore")
    def restore_all(svc: BaseService = Depends(service)) -> dict[str, Any]:
        return {"ok": True, "aggiornati": svc.restore_all()}

    @router.get("/{entity_id}", response_model=dto_model)
    def get_by_id(entity_id: int, svc: BaseService = Depends(service)):
        return svc.get_by_id(entity_id)

    @router.put("/{entity_id}", response_model=dto_model)
    def update_by_id(entity_id: int, payload: dto_model, svc: BaseService = Depends(service)):
        return svc.update_by_id(payload, entity_id)

    @router.delete("/{entity_id}")
    def delete_by_id(entity_id: int, svc: BaseService = Depends(service)) -> dict[str, Any]:
        svc.delete_by_id(entity_id)
        return {"ok": True}

    @router.post("/{entity_id}/restore")
    def restore_by_id(entity_id: int, svc: BaseService = Depends(service)) -> dict[str, Any]:
        svc.restore_by_id(entity_id)
        return {"ok": True}

    return router


# =========================
# Ricerche: medici
# =========================
medici_router = APIRouter(prefix="/api/medici", tags=["medici"], dependencies=PROTETTO)
_medici = _service_dependency("medici")


@medici_router.get("/by-segretario/{segretario_id}", response_model=MedicoDTO)
def medico_by_segretario(segretario_id: int, svc: MedicoService = Depends(_medici)):
    return svc.get_medico_by_segretario_id(segretario_id)


@medici_router.get("/by-paziente/{paziente_id}", response_model=MedicoDTO)
def medico_by_paziente(paziente_id: int, svc: MedicoService = Depends(_medici)):
    return svc.get_medico_by_paziente_id(paziente_id)


@medici_router.get("/by-prenotazione/{prenotazione_id}", response_model=MedicoDTO)
def medico_by_prenotazione(prenotazione_id: int, svc: MedicoService = Depends(_medici)):
    return svc.get_medico_by_prenotazione_id(prenotazione_id)


@medici_router.get("/by-email", response_model=MedicoDTO)
def medico_by_email(email: EmailStr = Query(...), svc: MedicoService = Depends(_medici)):
    return svc.get_medico_by_email(email)


@medici_router.get("/search", response_model=list[MedicoDTO])
def search_medici(
    nome: str = Query(..., min_length=1),
    cognome: str = Query(..., min_length=1),
    svc: MedicoService = Depends(_medici),
):
    return svc.get_medici_by_nome_and_cognome(nome, cognome)


# =========================
# Ricerche: segretari
# =========================
segretari_router = APIRouter(prefix="/api/segretari", tags=["segretari"], dependencies=PROTETTO)
_segretari = _service_dependency("segretari")


@segretari_router.get("/by-medico/{medico_id}", response_model=list[SegretarioDTO])
def segretari_by_medico(medico_id: int, svc: SegretarioService = Depends(_segretari)):
    return svc.get_segretari_by_medico_id(medico_id)


@segretari_router.get("/by-email", response_model=SegretarioDTO)
def segretario_by_email(email: EmailStr = Query(...), svc: SegretarioService = Depends(_segretari)):
    return svc.get_segretario_by_email(email)


@segretari_router.get("/search", response_model=list[SegretarioDTO])
def search_segretari(
    nome: str = Query(..., min_length=1),
    cognome: str = Query(..., min_length=1),
    medico_id: int | None = None,
    svc: SegretarioService = Depends(_segretari),
):
    return svc.get_segretari_by_nome_and_cognome(nome, cognome, medico_id=medico_id)


# =========================
# Ricerche: pazienti
# =========================
pazienti_router = APIRouter(prefix="/api/pazienti", tags=["pazienti"], dependencies=PROTETTO)
_pazienti = _service_dependency("pazienti")


@pazienti_router.get("/by-medico/{medico_id}", response_model=list[PazienteDTO])
def pazienti_by_medico(medico_id: int, svc: PazienteService = Depends(_pazienti)):
    return svc.get_pazienti_by_medico_id(medico_id)


@pazienti_router.get("/by-segretario/{segretario_id}", response_model=list[PazienteDTO])
def pazienti_by_segretario(segretario_id: int, svc: PazienteService = Depends(_pazienti)):
    return svc.get_pazienti_by_segretario_id(segretario_id)


@pazienti_router.get("/by-prenotazione/{prenotazione_id}", response_model=PazienteDTO)
def paziente_by_prenotazione(prenotazione_id: int, svc: PazienteService = Depends(_pazienti)):
    return svc.get_paziente_by_prenotazione_id(prenotazione_id)


@pazienti_router.get("/by-email", response_model=PazienteDTO)
def paziente_by_email(email: EmailStr = Query(...), svc: PazienteService = Depends(_pazienti)):
    return svc.get_paziente_by_email(email)


@pazienti_router.get("/by-codice-fiscale/{codice_fiscale}", response_model=PazienteDTO)
def paziente_by_codice_fiscale(codice_fiscale: str, svc: PazienteService = Depends(_pazienti)):
    return svc.get_paziente_by_codice_fiscale(codice_fiscale)


@pazienti_router.get("/search", response_model=list[PazienteDTO])
def search_pazienti(
    nome: str = Query(..., min_length=1),
    cognome: str = Query(..., min_length=1),
    medico_id: int | None = None,
    segretario_id: int | None = None,
    svc: PazienteService = Depends(_pazienti),
):
    if medico_id is not None and segretario_id is not None:
        raise RequestValidationError([{
            "loc": ("query", "segretario_id"),
            "msg": "Usare medico_id oppure segretario_id, non entrambi",
            "type": "value_error",
        }])
    return svc.get_pazienti_by_nome_and_cognome(nome, cognome, medico_id=medico_id, segretario_id=segretario_id)


# =========================
# Ricerche: prenotazioni
# =========================
prenotazioni_router = APIRouter(prefix="/api/prenotazioni", tags=["prenotazioni"], dependencies=PROTETTO)
_prenotazioni = _service_dependency("prenotazioni")


@prenotazioni_router.get("/by-medico/{medico_id}", response_model=list[PrenotazioneDTO])
def prenotazioni_by_medico(medico_id: int, svc: PrenotazioneService = Depends(_prenotazioni)):
    return svc.get_prenotazioni_by_medico_id(medico_id)


@prenotazioni_router.get("/by-paziente/{paziente_id}", response_model=list[PrenotazioneDTO])
def prenotazioni_by_paziente(paziente_id: int, svc: PrenotazioneService = Depends(_prenotazioni)):
    return svc.get_prenotazioni_by_paziente_id(paziente_id)


@prenotazioni_router.get("/agenda", response_model=list[PrenotazioneDTO])
def agenda(
    medico_id: int = Query(...),
    giorno: date = Query(...),
    svc: PrenotazioneService = Depends(_prenotazioni),
):
    return svc.agenda_giornaliera(medico_id, giorno)


# ordine di registrazione: ricerche prima del ciclo di vita
ROUTERS: list[APIRouter] = [
    medici_router,
    segretari_router,
    pazienti_router,
    prenotazioni_router,
    crea_router_ciclo_vita("medici", "medici", MedicoCreate, MedicoDTO),
    crea_router_ciclo_vita("segretari", "segretari", SegretarioCreate, SegretarioDTO),
    crea_router_ciclo_vita("pazienti", "pazienti", PazienteCreate, PazienteDTO),
    crea_router_ciclo_vita("prenotazioni", "prenotazioni", PrenotazioneCreate, PrenotazioneDTO),
]
