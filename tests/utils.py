from datetime import timedelta

from januzzi.entitlement import utcnow


def login(client, username="maria", password="segredo123"):
    return client.post("/login", json={"username": username, "password": password})


def auth_headers(client, username="maria", password="segredo123"):
    resp = login(client, username, password)
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def voltar_no_tempo(store, uid, dias):
    """Desloca a janela de acesso da conta ``dias`` para o passado."""
    store.db.expire_all()
    conta = store.get_user_account(uid)
    delta = timedelta(days=dias)
    campos = {}
    if conta.access_started_at is not None:
        campos["access_started_at"] = conta.access_started_at - delta
    if conta.access_expiration_date is not None:
        campos["access_expiration_date"] = conta.access_expiration_date - delta
    campos["created_at"] = (conta.created_at or utcnow()) - delta
    store.update_user_account(uid, campos)
    store.db.expire_all()
