"""
Cache local da sessão (equivalente ao localStorage do navegador).

Guarda a conta e os dados do usuário sob chaves fixas para o primeiro
carregamento não depender do banco. Não é fonte de verdade: é regravado a
cada atualização autoritativa e limpo no logout.
"""

import json
import os
from typing import Optional

CHAVE_USUARIO = "user"
CHAVE_DADOS = "userData"


class CacheLocal:
    def __init__(self, diretorio: Optional[str] = None, namespace: str = "januzzi"):
        self.diretorio = diretorio
        self.namespace = namespace
        self._memoria = {}
        if diretorio:
            os.makedirs(diretorio, exist_ok=True)

    def _caminho(self, chave):
        return os.path.join(self.diretorio, f"{self.namespace}.{chave}.json")

    def gravar(self, chave: str, valor):
        if not self.diretorio:
            self._memoria[chave] = json.loads(json.dumps(valor, default=str))
            return
        with open(self._caminho(chave), "w", encoding="utf-8") as f:
            json.dump(valor, f, default=str, ensure_ascii=False)

    def ler(self, chave: str):
        if not self.diretorio:
            return self._memoria.get(chave)
        try:
            with open(self._caminho(chave), encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError:
            # Arquivo corrompido vale como ausente
            self.remover(chave)
            return None

    def remover(self, chave: str):
        if not self.diretorio:
            self._memoria.pop(chave, None)
            return
        try:
            os.remove(self._caminho(chave))
        except FileNotFoundError:
            pass

    def limpar(self):
        self.remover(CHAVE_USUARIO)
        self.remover(CHAVE_DADOS)
