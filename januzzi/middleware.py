from januzzi import config

PAGINA_MANUTENCAO = "/manutencao"


class MaintenanceMiddleware:
    """
    Com MAINTENANCE_MODE ligado, toda requisição HTTP é reescrita para
    /manutencao. A flag é lida a cada requisição.
    """

    def __init__(self, app, ativo=config.maintenance_mode):
        self.app = app
        self.ativo = ativo

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"] != PAGINA_MANUTENCAO and self.ativo():
            scope = dict(scope, path=PAGINA_MANUTENCAO, raw_path=PAGINA_MANUTENCAO.encode(), query_string=b"")
        await self.app(scope, receive, send)
