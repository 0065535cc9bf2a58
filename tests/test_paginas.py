from januzzi.cache import CHAVE_USUARIO, CacheLocal


class TestPaginas:

    def test_home(self, client):
        assert client.get("/").json()["msg"].startswith("API Januzzi Finance")

    def test_login_mostra_aviso_de_expiracao(self, client):
        resp = client.get("/login", params={"expired": "true"})
        assert resp.status_code == 200
        assert "Seu acesso expirou" in resp.text
        assert "Seu acesso expirou" not in client.get("/login").text

    def test_paineis(self, client):
        assert "Painel" in client.get("/dashboard").text
        assert "Gerenciamento de Usuários" in client.get("/admin").text


class TestManutencao:

    def test_desligada(self, client):
        assert client.get("/dashboard").status_code == 200

    def test_toda_rota_vai_para_manutencao(self, client, monkeypatch):
        monkeypatch.setenv("MAINTENANCE_MODE", "1")
        for caminho in ("/", "/login", "/dashboard", "/admin", "/me"):
            resp = client.get(caminho)
            assert resp.status_code == 503
            assert "Sistema em manutenção" in resp.text

    def test_post_tambem_e_desviado(self, client, monkeypatch):
        monkeypatch.setenv("MAINTENANCE_MODE", "true")
        resp = client.post("/login", json={"username": "maria", "password": "segredo123"})
        assert resp.status_code == 405


class TestCacheLocal:

    def test_em_memoria(self):
        cache = CacheLocal()
        cache.gravar(CHAVE_USUARIO, {"uid": "1"})
        assert cache.ler(CHAVE_USUARIO) == {"uid": "1"}
        cache.limpar()
        assert cache.ler(CHAVE_USUARIO) is None

    def test_em_disco_isolado_por_namespace(self, tmp_path):
        a = CacheLocal(str(tmp_path), namespace="a")
        b = CacheLocal(str(tmp_path), namespace="b")
        a.gravar(CHAVE_USUARIO, {"uid": "a"})
        assert b.ler(CHAVE_USUARIO) is None
        assert CacheLocal(str(tmp_path), namespace="a").ler(CHAVE_USUARIO) == {"uid": "a"}

    def test_arquivo_corrompido_vale_como_ausente(self, tmp_path):
        cache = CacheLocal(str(tmp_path))
        (tmp_path / f"januzzi.{CHAVE_USUARIO}.json").write_text("{quebrado")
        assert cache.ler(CHAVE_USUARIO) is None
        assert not (tmp_path / f"januzzi.{CHAVE_USUARIO}.json").exists()
