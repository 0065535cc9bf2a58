import pytest

from januzzi.finance import CATEGORIAS_PADRAO
from tests.utils import auth_headers


@pytest.fixture
def headers(client, usuario):
    return auth_headers(client)


def _transacao(client, headers, **kw):
    corpo = {
        "description": "Compra",
        "amount": 10,
        "category": "Alimentação",
        "type": "expense",
        "date": "2026-03-10T12:00:00Z",
    }
    corpo.update(kw)
    return client.post("/transacoes", headers=headers, json=corpo)


class TestTransacoes:

    def test_documento_novo_vem_com_categorias_padrao(self, client, headers):
        resp = client.get("/dados", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"transactions": [], "categories": CATEGORIAS_PADRAO}

    def test_criar_e_ordenar_por_data(self, client, headers):
        _transacao(client, headers, description="antiga", date="2026-01-01T10:00:00Z")
        resp = _transacao(client, headers, description="nova", date="2026-02-01T10:00:00Z")
        assert resp.status_code == 201
        assert [t["description"] for t in resp.json()["transactions"]] == ["nova", "antiga"]

    def test_valor_precisa_ser_positivo(self, client, headers):
        assert _transacao(client, headers, amount=0).status_code == 422
        assert _transacao(client, headers, type="transfer").status_code == 422

    def test_deletar(self, client, headers):
        criada = _transacao(client, headers).json()["transactions"][0]
        resp = client.delete(f"/transacoes/{criada['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["transactions"] == []
        assert client.delete(f"/transacoes/{criada['id']}", headers=headers).status_code == 404

    def test_dados_de_um_usuario_nao_aparecem_para_outro(self, client, headers):
        _transacao(client, headers)
        client.post("/signup", json={"username": "ana", "password": "segredo123"})
        resp = client.get("/dados", headers=auth_headers(client, "ana"))
        assert resp.json()["transactions"] == []


class TestCategorias:

    def test_criar_mantem_as_padrao(self, client, headers):
        resp = client.post("/categorias", headers=headers, json={"name": "Pets", "color": "#123ABC"})
        assert resp.status_code == 201
        nomes = [c["name"] for c in resp.json()["categories"]]
        assert nomes[-1] == "Pets"
        assert len(nomes) == len(CATEGORIAS_PADRAO) + 1

    def test_nome_repetido(self, client, headers):
        resp = client.post("/categorias", headers=headers, json={"name": " lazer "})
        assert resp.status_code == 400

    def test_cor_invalida(self, client, headers):
        resp = client.post("/categorias", headers=headers, json={"name": "Pets", "color": "azul"})
        assert resp.status_code == 422

    def test_deletar(self, client, headers):
        resp = client.delete("/categorias/lazer", headers=headers)
        assert resp.status_code == 200
        assert "lazer" not in [c["id"] for c in resp.json()["categories"]]
        assert client.delete("/categorias/nao-existe", headers=headers).status_code == 404


class TestResumo:

    def test_saldo_do_mes_no_fuso_local(self, client, headers):
        _transacao(client, headers, amount=1000, type="income", date="2026-03-05T12:00:00Z")
        _transacao(client, headers, amount=200, type="expense", date="2026-03-20T12:00:00Z")
        _transacao(client, headers, amount=300, type="investment", date="2026-03-21T12:00:00Z")
        # 31/03 às 22h em São Paulo ainda é março
        _transacao(client, headers, amount=50, type="expense", date="2026-04-01T01:00:00Z")
        # 01/03 às 00h UTC ainda é fevereiro em São Paulo
        _transacao(client, headers, amount=999, type="income", date="2026-03-01T00:00:00Z")

        resp = client.get("/resumo", headers=headers, params={"filtro": "month", "data": "2026-03-15"})

        assert resp.status_code == 200
        corpo = resp.json()
        assert corpo["receitas"] == 1000
        assert corpo["despesas"] == 250
        assert corpo["investimentos"] == 300
        assert corpo["saldo"] == 450

    def test_filtro_por_dia(self, client, headers):
        _transacao(client, headers, amount=30, date="2026-03-10T12:00:00Z")
        _transacao(client, headers, amount=70, date="2026-03-11T12:00:00Z")
        resp = client.get("/resumo", headers=headers, params={"filtro": "day", "data": "2026-03-10"})
        assert resp.json()["despesas"] == 30

    def test_filtro_desconhecido(self, client, headers):
        assert client.get("/resumo", headers=headers, params={"filtro": "week"}).status_code == 422


class TestEmpresas:

    def test_criar_listar_e_deletar(self, client, headers):
        resp = client.post("/empresas", headers=headers, json={"name": "Padaria", "cnpj": "11.222.333/0001-81"})
        assert resp.status_code == 201
        empresa = resp.json()
        assert empresa["cnpj"] == "11222333000181"
        assert empresa["cnpjFormatado"] == "11.222.333/0001-81"

        lista = client.get("/empresas", headers=headers).json()
        assert [e["id"] for e in lista] == [empresa["id"]]

        assert client.delete(f"/empresas/{empresa['id']}", headers=headers).status_code == 200
        assert client.get("/empresas", headers=headers).json() == []

    def test_cnpj_invalido(self, client, headers):
        resp = client.post("/empresas", headers=headers, json={"name": "Padaria", "cnpj": "11.222.333/0001-82"})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "CNPJ inválido"

    def test_cnpj_repetido_no_mesmo_usuario(self, client, headers):
        client.post("/empresas", headers=headers, json={"name": "Padaria", "cnpj": "11222333000181"})
        resp = client.post("/empresas", headers=headers, json={"name": "Outra", "cnpj": "11222333000181"})
        assert resp.status_code == 409
        assert resp.json()["detail"] == "CNPJ já cadastrado"

    def test_empresa_de_outro_usuario(self, client, headers):
        empresa = client.post("/empresas", headers=headers, json={"name": "Padaria", "cnpj": "11222333000181"}).json()
        client.post("/signup", json={"username": "ana", "password": "segredo123"})
        outro = auth_headers(client, "ana")
        assert client.delete(f"/empresas/{empresa['id']}", headers=outro).status_code == 404
        assert client.get(f"/empresas/{empresa['id']}/transacoes", headers=outro).status_code == 404

    def test_transacoes_da_empresa(self, client, headers):
        empresa = client.post("/empresas", headers=headers, json={"name": "Padaria", "cnpj": "11222333000181"}).json()
        _transacao(client, headers, amount=500, type="income", companyId=empresa["id"])
        _transacao(client, headers, amount=80, companyId=empresa["id"])
        _transacao(client, headers, amount=40)

        resp = client.get(
            f"/empresas/{empresa['id']}/transacoes",
            headers=headers,
            params={"filtro": "month", "data": "2026-03-10"},
        )

        corpo = resp.json()
        assert len(corpo["transactions"]) == 2
        assert corpo["saldo"] == 420
