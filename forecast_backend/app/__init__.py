"""Application factory and app-wide configuration."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from forecast_backend.app.api.routes import api_bp
from forecast_backend.app.config import Config


def configure_logging(app: Flask) -> None:
    """Route module loggers through one root handler at the configured level."""
    level = str(app.config["LOG_LEVEL"]).upper()
    logging.basicConfig(level=level, format=app.config["LOG_FORMAT"])
    logging.getLogger("forecast_backend").setLevel(level)


def create_app(config: Optional[object] = None) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__)
    app.config.from_object(config or Config)
    app.config.from_prefixed_env("FORECAST")

    configure_logging(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    app.logger.info("forecast API ready (max %s scenarios)", app.config["MAX_SCENARIOS"])
    return app
