# backend/barflow/__init__.py
from __future__ import annotations

from flask import Flask, request
from sqlalchemy.exc import SQLAlchemyError

from .config import Config
from .extensions import db


# Reachable while the store is unavailable
DEGRADED_MODE_ENDPOINTS = {"system.health", "system.retry_init"}


def init_store(app: Flask) -> bool:
    """
    Open the store for this app. On failure the app keeps running in
    degraded mode until POST /api/system/retry-init succeeds.
    """
    from .services import schema_service

    with app.app_context():
        try:
            summary = schema_service.open_store()
        except SQLAlchemyError as exc:
            db.session.rollback()
            app.logger.exception("Store initialization failed")
            app.config["STORE_READY"] = False
            app.config["STORE_INIT_ERROR"] = str(exc)
            return False

    app.config["STORE_READY"] = True
    app.config["STORE_INIT_ERROR"] = None
    app.logger.info("Store ready: %s", summary)
    return True


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # Initialize extensions
    db.init_app(app)

    # Import models so metadata is complete before create_all()
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.products import products_bp
    from .routes.categories import categories_bp
    from .routes.stock import stock_bp
    from .routes.tables import tables_bp
    from .routes.orders import orders_bp
    from .routes.payments import payments_bp
    from .routes.clients import clients_bp
    from .routes.settings import settings_bp
    from .routes.staff import staff_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(stock_bp)
    app.register_blueprint(tables_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(staff_bp)
    app.register_blueprint(reports_bp)

    app.config.setdefault("STORE_READY", False)
    app.config.setdefault("STORE_INIT_ERROR", None)
    if app.config.get("INIT_STORE_ON_START", True):
        init_store(app)

    @app.before_request
    def require_store():
        if app.config.get("STORE_READY"):
            return None
        if not request.path.startswith("/api") or request.endpoint in DEGRADED_MODE_ENDPOINTS:
            return None
        return {
            "error": "Store unavailable",
            "detail": app.config.get("STORE_INIT_ERROR"),
            "retry": True,
        }, 503

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
