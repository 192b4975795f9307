from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .config import LOG_JSON, LOG_LEVEL
from .db import init_db
from .exceptions import AmbulatorioError
from .logging_utils import configure_logging
from .messages import get_message
from .schemas import PazienteCreate
from .seed import seed_base
from .services import BaseService, Servizi, build_services

COLLEZIONI = ("medici", "segretari", "pazienti", "prenotazioni")


def _service(servizi: Servizi, entity: str) -> BaseService:
    return getattr(servizi, entity)


def _riga(dto) -> str:
    d = dto.model_dump()
    if "data_prenotazione" in d:
        return (
            f"{d['id']} | {d['data_prenotazione']:%d/%m/%Y %H:%M} | "
            f"medico {d['medico_id']} | paziente {d['paziente_id']} | {d['note'] or '-'}"
        )
    return f"{d['id']} | {d['cognome']} {d['nome']} | {d.get('email') or '-'} | {d.get('telefono') or '-'}"


def cmd_init(args: argparse.Namespace, servizi: Servizi) -> None:
    seed_base(servizi.medici.session_factory)
    print("DB inizializzato e seed completato.")


def cmd_list(args: argparse.Namespace, servizi: Servizi) -> None:
    svc = _service(servizi, args.entity)
    righe = svc.get_all_deleted() if args.deleted else svc.get_all()
    if not righe:
        print("Nessun record.")
    for dto in righe:
        print(_riga(dto))


def cmd_delete(args: argparse.Namespace, servizi: Servizi) -> None:
    _service(servizi, args.entity).delete_by_id(args.id)
    print(f"Cancellato: {args.entity} {args.id}")


def cmd_restore(args: argparse.Namespace, servizi: Servizi) -> None:
    _service(servizi, args.entity).restore_by_id(args.id)
    print(f"Ripristinato: {args.entity} {args.id}")


def cmd_delete_all(args: argparse.Namespace, servizi: Servizi) -> None:
    n = _service(servizi, args.entity).delete_all()
    print(f"Cancellati: {n}")


def cmd_restore_all(args: argparse.Namespace, servizi: Servizi) -> None:
    n = _service(servizi, args.entity).restore_all()
    print(f"Ripristinati: {n}")


def cmd_add_patient(args: argparse.Namespace, servizi: Servizi) -> None:
    dto = PazienteCreate(
        nome=args.nome,
        cognome=args.cognome,
        email=args.email,
        telefono=args.telefono,
        codice_fiscale=args.codice_fiscale,
        medico_id=args.medico_id,
    )
    p = servizi.pazienti.create(dto)
    print(f"Paziente creato: {p.id}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ambulatorio", description="CLI amministrativa Ambulatorio")
    sub = p.add_subparsers(required=True)

    p_init = sub.add_parser("init", help="Crea DB e carica seed")
    p_init.set_defaults(func=cmd_init)

    p_list = sub.add_parser("list", help="Lista entità attive (o cancellate con --deleted)")
    p_list.add_argument("entity", choices=COLLEZIONI)
    p_list.add_argument("--deleted", action="store_true")
    p_list.set_defaults(func=cmd_list)

    for nome, func, aiuto in (
        ("delete", cmd_delete, "Cancellazione logica per id"),
        ("restore", cmd_restore, "Ripristino per id"),
    ):
        sp = sub.add_parser(nome, help=aiuto)
        sp.add_argument("entity", choices=COLLEZIONI)
        sp.add_argument("id", type=int)
        sp.set_defaults(func=func)

    for nome, func, aiuto in (
        ("delete-all", cmd_delete_all, "Cancellazione logica di tutti i record"),
        ("restore-all", cmd_restore_all, "Ripristino di tutti i record"),
    ):
        sp = sub.add_parser(nome, help=aiuto)
        sp.add_argument("entity", choices=COLLEZIONI)
        sp.set_defaults(func=func)

    p_addp = sub.add_parser("add-patient", help="Crea paziente")
    p_addp.add_argument("--nome", required=True)
    p_addp.add_argument("--cognome", required=True)
    p_addp.add_argument("--email", default=None)
    p_addp.add_argument("--telefono", default=None)
    p_addp.add_argument("--codice-fiscale", default=None)
    p_addp.add_argument("--medico-id", type=int, default=None)
    p_addp.set_defaults(func=cmd_add_patient)

    return p


def main(argv: list[str] | None = None, servizi: Servizi | None = None) -> int:
    configure_logging(LOG_LEVEL, json_output=LOG_JSON)
    parser = build_parser()
    args = parser.parse_args(argv)

    servizi = servizi or build_services()
    init_db(servizi.medici.session_factory.kw.get("bind"))  # garantisce tabelle
    try:
        args.func(args, servizi)
    except AmbulatorioError as e:
        print(f"Errore: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        for err in e.errors():
            campo = ".".join(str(x) for x in err["loc"])
            print(f"Errore: {campo}: {err['msg']}", file=sys.stderr)
        return 1
    except IntegrityError:
        print(f"Errore: {get_message('error.persistence.integrity.exception')}", file=sys.stderr)
        return 1
    except SQLAlchemyError:
        print(f"Errore: {get_message('error.persistence.exception')}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
