import logging
import time

import pymysql
pymysql.install_as_MySQLdb()
from flask import Flask, g, request
from flask_cors import CORS

from .config import DevConfig
from .extensions import db, migrate, jwt, ma, bcrypt, mongo
from .repositories import build_repositories
from .utils.errors import register_error_handlers, register_jwt_handlers
from .api import (
    auth_routes,
    user_routes,
    client_routes,
    product_routes,
    rent_routes,
    backup_routes,
    file_routes,
)


def _register_request_timing(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started", None)
        if started is not None:
            elapsed_ms = (time.perf_counter() - started) * 1000
            app.logger.info(
                "%s %s -> %s (%.1f ms)", request.method, request.path, response.status_code, elapsed_ms
            )
        return response


def create_app(config_class=DevConfig, **mongo_kwargs) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)

    verbose = app.config.get("DEBUG") or app.config.get("VERBOSE_LOGGING")
    app.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # CORS para el frontend
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)
    bcrypt.init_app(app)
    if app.config["DATABASE_TYPE"] == "mongodb":
        mongo.init_app(app, **mongo_kwargs)

    build_repositories(app)

    # Registrar blueprints
    app.register_blueprint(auth_routes.bp, url_prefix="/api")
    app.register_blueprint(user_routes.bp, url_prefix="/api/users")
    app.register_blueprint(client_routes.bp, url_prefix="/api/clients")
    app.register_blueprint(product_routes.bp, url_prefix="/api/products")
    app.register_blueprint(rent_routes.bp, url_prefix="/api/rents")
    app.register_blueprint(backup_routes.bp, url_prefix="/api/backup")
    app.register_blueprint(file_routes.bp, url_prefix="/api/files")

    # Manejadores de errores
    register_error_handlers(app)
    register_jwt_handlers(jwt)

    if app.config.get("VERBOSE_LOGGING"):
        _register_request_timing(app)

    @app.get("/api/health")
    def health_check():
        return {"status": "ok", "service": "arriendos-backend", "database": app.config["DATABASE_TYPE"]}

    from .cli import register_cli
    register_cli(app)

    if app.config.get("SCHEDULER_ENABLED"):
        from .scheduler import start_scheduler
        start_scheduler(app)

    return app
