from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from typing import Any

import requests

from .config import API_BASE

COLLEZIONI = ("medici", "segretari", "pazienti", "prenotazioni")


# JWT helpers (solo per UI, senza verifica firma)

def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def jwt_payload(token: str) -> dict:
    parts = token.split(".")
    if len(parts) != 3:
        return {}
    try:
        payload = json.loads(_b64url_decode(parts[1]).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def jwt_is_expired(token: str, leeway: int = 5) -> bool:
    exp = jwt_payload(token).get("exp")
    try:
        exp_int = int(exp)
    except (TypeError, ValueError):
        return False

    now = int(datetime.now(tz=timezone.utc).timestamp())
    return now >= (exp_int - leeway)


def jwt_username(token: str) -> str:
    p = jwt_payload(token)
    return str(p.get("username") or p.get("sub") or "operatore")


class ApiClient:
    """
    Client HTTP dell'API Ambulatorio.
    - 401 => PermissionError (token non valido/scaduto)
    - altri errori => requests.HTTPError
    """

    def __init__(self, base_url: str = API_BASE, token: str | None = None, timeout: float = 10,
                 session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.http = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept-Language": "it"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        r = self.http.request(
            method, f"{self.base_url}{path}", headers=self._headers(), timeout=self.timeout, **kwargs
        )
        if r.status_code == 401:
            raise PermissionError("401 Unauthorized (token non valido/scaduto oppure backend riavviato).")
        r.raise_for_status()
        return r.json() if r.content else None

    @staticmethod
    def error_message(exc: requests.HTTPError) -> str:
        """Messaggio localizzato del backend, se il corpo è un ResponseErrorDTO."""
        try:
            return exc.response.json()["message"]
        except (AttributeError, ValueError, KeyError, TypeError):
            return str(exc)

    def login(self, username: str, password: str) -> str:
        # OAuth2PasswordRequestForm => x-www-form-urlencoded
        r = self.http.post(
            f"{self.base_url}/api/auth/login",
            data={"username": username, "password": password},
            timeout=self.timeout,
        )
        r.raise_for_status()
        self.token = r.json()["access_token"]
        return self.token

    # Ciclo di vita

    def list(self, collezione: str, deleted: bool = False) -> list[dict]:
        suffix = "/deleted" if deleted else ""
        return self._request("GET", f"/api/{collezione}{suffix}")

    def get(self, collezione: str, entity_id: int) -> dict:
        return self._request("GET", f"/api/{collezione}/{entity_id}")

    def create(self, collezione: str, payload: dict) -> dict:
        return self._request("POST", f"/api/{collezione}", json=payload)

    def update(self, collezione: str, entity_id: int, patch: dict) -> dict:
        return self._request("PUT", f"/api/{collezione}/{entity_id}", json=patch)

    def delete(self, collezione: str, entity_id: int) -> dict:
        return self._request("DELETE", f"/api/{collezione}/{entity_id}")

    def restore(self, collezione: str, entity_id: int) -> dict:
        return self._request("POST", f"/api/{collezione}/{entity_id}/restore")

    def agenda(self, medico_id: int, giorno: str) -> list[dict]:
        return self._request("GET", "/api/prenotazioni/agenda", params={"medico_id": medico_id, "giorno": giorno})
