import base64
import json

import pytest
import requests

from ambulatorio.api_client import ApiClient, jwt_is_expired, jwt_payload, jwt_username


def _risposta(status_code: int, body=None) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = "http://test/api"
    r._content = json.dumps(body).encode() if body is not None else b""
    return r


class SessioneFinta:
    def __init__(self, *risposte):
        self.risposte = list(risposte)
        self.chiamate = []

    def request(self, method, url, **kwargs):
        self.chiamate.append((method, url, kwargs))
        return self.risposte.pop(0)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


def _token(payload: dict) -> str:
    corpo = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    return f"header.{corpo}.firma"


def test_jwt_helpers():
    token = _token({"sub": "1", "username": "segreteria", "exp": 1})
    assert jwt_payload(token)["sub"] == "1"
    assert jwt_username(token) == "segreteria"
    assert jwt_is_expired(token)
    assert not jwt_is_expired(_token({"sub": "1"}))
    assert jwt_payload("non.un-token") == {}
    assert jwt_payload("a.!!!.c") == {}


def test_login_salva_il_token():
    http = SessioneFinta(_risposta(200, {"access_token": "tok", "token_type": "bearer"}))
    api = ApiClient("http://test/", session=http)

    assert api.login("segreteria", "pwd") == "tok"
    method, url, kwargs = http.chiamate[0]
    assert (method, url) == ("POST", "http://test/api/auth/login")
    assert kwargs["data"] == {"username": "segreteria", "password": "pwd"}
    assert api.token == "tok"


def test_chiamate_con_bearer():
    http = SessioneFinta(_risposta(200, [{"id": 1}]), _risposta(200, {"ok": True}))
    api = ApiClient("http://test", token="tok", session=http)

    assert api.list("medici", deleted=True) == [{"id": 1}]
    assert api.restore("medici", 1) == {"ok": True}

    (m1, u1, k1), (m2, u2, _) = http.chiamate
    assert (m1, u1) == ("GET", "http://test/api/medici/deleted")
    assert k1["headers"]["Authorization"] == "Bearer tok"
    assert (m2, u2) == ("POST", "http://test/api/medici/1/restore")


def test_errori():
    http = SessioneFinta(
        _risposta(401, {"detail": "Token non valido"}),
        _risposta(409, {"status": 409, "message": "Medico già cancellato"}),
    )
    api = ApiClient("http://test", token="tok", session=http)

    with pytest.raises(PermissionError):
        api.get("medici", 1)

    with pytest.raises(requests.HTTPError) as exc:
        api.delete("medici", 1)
    assert ApiClient.error_message(exc.value) == "Medico già cancellato"


def test_update_invia_la_patch():
    http = SessioneFinta(_risposta(200, {"id": 4, "telefono": "02 999"}))
    api = ApiClient("http://test", token="tok", session=http)

    assert api.update("pazienti", 4, {"telefono": "02 999"}) == {"id": 4, "telefono": "02 999"}

    method, url, kwargs = http.chiamate[0]
    assert (method, url) == ("PUT", "http://test/api/pazienti/4")
    assert kwargs["json"] == {"telefono": "02 999"}
