"""Application factory and app-wide configuration."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from bdinvest.app.api.routes import STORE_KEY, REPOSITORY_KEY, api_bp
from bdinvest.config import DefaultConfig, TaxSettings
from bdinvest.domain.portfolio import PortfolioStore
from bdinvest.domain.storage import SnapshotRepository
from bdinvest.log import configure_logging


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance.

    Settings are layered: DefaultConfig, then `config`, then BDINVEST_* env vars.
    """
    app = Flask(__name__)
    app.config.from_object(DefaultConfig)
    if config:
        app.config.from_mapping(config)
    app.config.from_prefixed_env("BDINVEST")

    logger = configure_logging(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.config["TAX_SETTINGS"] = TaxSettings.from_mapping(app.config)

    store = PortfolioStore()
    repository = None
    if app.config["DB_PATH"]:
        repository = SnapshotRepository(app.config["DB_PATH"])
        repository.init()
        snapshot = repository.load_latest()
        if snapshot is not None:
            store.restore(snapshot)
            logger.info("restored portfolio snapshot from %s", app.config["DB_PATH"])

    app.extensions[STORE_KEY] = store
    app.extensions[REPOSITORY_KEY] = repository

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
