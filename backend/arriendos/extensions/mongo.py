import mongoengine


class MongoConnection:
    """Conexión de mongoengine con ciclo de vida explícito.

    Se abre en ``init_app`` (solo cuando DATABASE_TYPE=mongodb) y se cierra
    con ``close`` al apagar el proceso.
    """

    alias = "default"

    def __init__(self):
        self.connected = False

    def init_app(self, app, **connect_kwargs):
        uri = app.config["MONGO_DB_URI"]
        database = app.config["MONGO_DB_DATABASE"]
        options = dict(app.config.get("MONGO_CONNECT_OPTIONS") or {})
        options.update(connect_kwargs)

        mongoengine.connect(db=database, host=uri, alias=self.alias, **options)
        self.connected = True
        app.extensions["mongo"] = self
        app.logger.info("[mongo] conectado a %s/%s", uri, database)

    def close(self):
        if self.connected:
            mongoengine.disconnect(alias=self.alias)
            self.connected = False


mongo = MongoConnection()
