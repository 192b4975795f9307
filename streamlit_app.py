from __future__ import annotations

from datetime import date

import requests
import streamlit as st

from ambulatorio.api_client import COLLEZIONI, ApiClient, jwt_is_expired, jwt_username
from ambulatorio.config import API_BASE

st.set_page_config(page_title="Ambulatorio", layout="wide")


def client() -> ApiClient:
    return ApiClient(API_BASE, token=st.session_state.get("token"))


def is_logged_in() -> bool:
    token = st.session_state.get("token")
    return bool(token) and isinstance(token, str) and len(token) > 0


def do_logout() -> None:
    st.session_state.pop("token", None)
    st.session_state.pop("auth_error", None)
    st.rerun()


def mostra_errore(e: Exception) -> None:
    if isinstance(e, PermissionError):
        st.session_state["auth_error"] = str(e)
        st.error("Sessione non valida. Premi Logout e rifai login.")
    elif isinstance(e, requests.HTTPError):
        st.error(ApiClient.error_message(e))
    else:
        st.error(str(e))


def descrivi(collezione: str, r: dict) -> str:
    if collezione == "prenotazioni":
        return f"[{r['id']}] {r['data_prenotazione']} | medico {r['medico_id']} | paziente {r['paziente_id']} | {r.get('note') or '-'}"
    return f"[{r['id']}] {r['cognome']} {r['nome']} | {r.get('email') or '-'} | {r.get('telefono') or '-'}"


# Sidebar login

with st.sidebar:
    st.header("Accesso")

    if not is_logged_in():
        u = st.text_input("Username", key="login_user")
        p = st.text_input("Password", type="password", key="login_pass")

        if st.button("Login", key="login_btn"):
            try:
                st.session_state["token"] = ApiClient(API_BASE).login(u.strip().lower(), p)
                st.session_state.pop("auth_error", None)
                st.success("Login effettuato.")
                st.rerun()
            except requests.HTTPError:
                st.error("Credenziali non valide.")
            except requests.RequestException as e:
                st.error(str(e))
    else:
        token = st.session_state["token"]
        st.write(f"Operatore: **{jwt_username(token)}**")

        if st.session_state.get("auth_error"):
            st.error(st.session_state["auth_error"])

        if st.button("Logout", key="logout_btn"):
            do_logout()

    st.divider()
    st.caption(f"API: {API_BASE}")


# UI

st.title("Ambulatorio - Console amministrativa")

if not is_logged_in():
    st.warning("Sezione riservata. Effettua il login dalla sidebar.")
    st.stop()

if jwt_is_expired(st.session_state["token"]):
    st.error("Sessione scaduta. Effettua Logout dalla sidebar e rifai login.")
    st.stop()

tab_anag, tab_agenda, tab_nuovo = st.tabs(["Anagrafiche", "Agenda medico", "Nuovo paziente"])


# TAB 1 - Anagrafiche: attivi / cancellati, cancellazione logica e ripristino

with tab_anag:
    collezione = st.selectbox("Entità", options=list(COLLEZIONI), key="anag_coll")
    cancellati = st.toggle("Mostra cancellati", key="anag_deleted")

    try:
        righe = client().list(collezione, deleted=cancellati)
    except Exception as e:
        mostra_errore(e)
        righe = []

    if not righe:
        st.info("Nessun record.")

    for r in righe:
        c1, c2 = st.columns([5, 1])
        c1.write(descrivi(collezione, r))
        etichetta = "Ripristina" if cancellati else "Cancella"
        if c2.button(etichetta, key=f"{collezione}_{r['id']}_{etichetta}"):
            try:
                if cancellati:
                    client().restore(collezione, r["id"])
                else:
                    client().delete(collezione, r["id"])
            except Exception as e:
                mostra_errore(e)
            else:
                st.rerun()

    if righe and not cancellati:
        with st.expander("Modifica record"):
            scelto = st.selectbox(
                "Record",
                options=righe,
                format_func=lambda r: descrivi(collezione, r),
                key=f"mod_{collezione}",
            )
            if collezione == "prenotazioni":
                campi = {"note": st.text_input("Note", value=scelto.get("note") or "", key="mod_note")}
            else:
                campi = {
                    "telefono": st.text_input("Telefono", value=scelto.get("telefono") or "", key="mod_tel"),
                    "email": st.text_input("Email", value=scelto.get("email") or "", key="mod_email"),
                }
            if st.button("Salva modifiche", key="mod_submit"):
                # i campi vuoti restano invariati
                patch = {k: v.strip() for k, v in campi.items() if v.strip()}
                try:
                    client().update(collezione, scelto["id"], patch)
                except Exception as e:
                    mostra_errore(e)
                else:
                    st.rerun()


# TAB 2 - Agenda giornaliera

with tab_agenda:
    try:
        medici = client().list("medici")
    except Exception as e:
        mostra_errore(e)
        medici = []

    if medici:
        medico = st.selectbox(
            "Medico",
            options=medici,
            format_func=lambda m: f"{m['cognome']} {m['nome']}",
            key="agenda_medico",
        )
        giorno = st.date_input("Giorno", value=date.today(), key="agenda_giorno")

        try:
            items = client().agenda(medico["id"], giorno.isoformat())
            if not items:
                st.info("Nessuna prenotazione per questo giorno.")
            for a in items:
                st.write(f"- **{a['data_prenotazione'][11:16]}** | paziente {a['paziente_id']} | {a.get('note') or '-'}")
        except Exception as e:
            mostra_errore(e)


# TAB 3 - Nuovo paziente

with tab_nuovo:
    c1, c2 = st.columns(2)
    nome = c1.text_input("Nome", key="paz_nome")
    cognome = c2.text_input("Cognome", key="paz_cognome")
    email = st.text_input("Email (opzionale)", key="paz_email")
    tel = st.text_input("Telefono (opzionale)", key="paz_tel")
    cf = st.text_input("Codice fiscale (opzionale)", key="paz_cf")

    if st.button("Crea paziente", key="paz_submit"):
        if not nome.strip() or not cognome.strip():
            st.error("Nome e cognome sono obbligatori.")
        else:
            payload = {
                "nome": nome.strip(),
                "cognome": cognome.strip(),
                "email": email.strip() or None,
                "telefono": tel.strip() or None,
                "codice_fiscale": cf.strip().upper() or None,
            }
            try:
                res = client().create("pazienti", payload)
                st.success(f"Paziente creato: {res['id']}")
            except Exception as e:
                mostra_errore(e)
