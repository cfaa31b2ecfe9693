# propdesk/__init__.py
from __future__ import annotations

import logging
import os
from typing import Any, Optional

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

from .errors import register_error_handlers
from .extensions import cors, db, jwt, migrate
from .identity import InMemoryIdentityProvider, SqlIdentityProvider
from .reporting.expenses import build_expense_model
from .routes import register_blueprints
from .store import InMemoryDocumentStore, SqlDocumentStore

CONFIG_CLASSES = {
    "development": "propdesk.config.DevelopmentConfig",
    "testing": "propdesk.config.TestingConfig",
    "production": "propdesk.config.ProductionConfig",
}


def _get_allowed_origins(app: Flask) -> list[str]:
    """Allowed CORS origins: local dev servers plus CORS_ALLOWED_ORIGINS."""
    default = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    extra = app.config.get("CORS_ALLOWED_ORIGINS") or ""
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _configure_logging(app: Flask) -> None:
    """JSON lines to stdout."""
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(getattr(h, "_propdesk", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler._propdesk = True  # type: ignore[attr-defined]
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins(app)}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        expose_headers=["Content-Type", "Content-Disposition"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the hosting proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _init_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)


def _init_collaborators(app: Flask) -> None:
    """Build the document store and identity provider the services use."""
    backend = app.config.get("STORE_BACKEND", "sql")
    if backend == "memory":
        store, identity = InMemoryDocumentStore(), InMemoryIdentityProvider()
    elif backend == "sql":
        store, identity = SqlDocumentStore(), SqlIdentityProvider()
        if app.config.get("AUTO_CREATE_TABLES", True):
            with app.app_context():
                db.create_all()
    else:
        raise ValueError(f"Unknown STORE_BACKEND: {backend}")

    app.extensions["propdesk"] = {
        "store": store,
        "identity": identity,
        "expense_model": build_expense_model(app.config),
    }
    app.logger.info("Using %s store backend", backend)


def create_app(config_object: Optional[Any] = None, **overrides) -> Flask:
    app = Flask(__name__)

    if config_object is None:
        env = os.getenv("FLASK_ENV", "production").lower()
        config_object = os.getenv("CONFIG_CLASS") or CONFIG_CLASSES.get(env, CONFIG_CLASSES["production"])
    if isinstance(config_object, str):
        config_object = import_string(config_object)
    app.config.from_object(config_object)
    app.config.update(overrides)

    validate = getattr(config_object, "validate", None)
    if callable(validate):
        validate()

    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)
    _init_extensions(app)
    _init_collaborators(app)
    register_blueprints(app)
    register_error_handlers(app)

    app.logger.info("App initialized (env=%s)", app.config.get("FLASK_ENV"))
    return app


__all__ = ["create_app"]
