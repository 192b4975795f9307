from datetime import timedelta

from ambulatorio.api_client import jwt_username
from ambulatorio.auth_security import emetti_token, hash_password, operatore_id_dal_token, verify_password


def test_password_hash():
    h = hash_password("s3greta!")
    assert h != "s3greta!"
    assert verify_password("s3greta!", h)
    assert not verify_password("altra", h)


def test_token_valido_e_scaduto():
    token = emetti_token(7, "segreteria")
    assert operatore_id_dal_token(token) == 7
    assert operatore_id_dal_token(f' "{token}" ') == 7
    assert jwt_username(token) == "segreteria"

    scaduto = emetti_token(7, "segreteria", durata=timedelta(minutes=-5))
    assert operatore_id_dal_token(scaduto) is None
    assert operatore_id_dal_token(token + "x") is None


def test_me_con_token_scaduto(client, auth_headers):
    scaduto = emetti_token(1, "segreteria", durata=timedelta(minutes=-5))
    r = client.get("/api/me", headers={"Authorization": f"Bearer {scaduto}"})
    assert r.status_code == 401
