"""
auditlog/__init__.py
Flask application factory with Flasgger OpenAPI support
"""

import logging

from flask import Flask
from flask_cors import CORS
from flasgger import Flasgger


def create_app(config_name: str = "production", engine=None) -> Flask:
    """
    Application factory pattern

    Creates and configures Flask app with:
    - CORS support
    - Flasgger for OpenAPI/Swagger
    - JWT identity middleware (events are attributed to the caller's account)
    - HTTP API blueprint for remote producers

    Args:
        config_name: "production", "development" or "testing"
        engine: HistoryEngine to log to (defaults to the global engine,
            initialized on first use)
    """
    app = Flask(__name__)

    # Enable CORS for all API routes
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    app.config["JSON_SORT_KEYS"] = False
    app.config["TESTING"] = config_name == "testing"

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if engine is None:
        from auditlog.history import get_history, init_history

        try:
            engine = get_history()
        except RuntimeError:
            engine = init_history()
    app.extensions["auditlog"] = engine

    # Identify the account behind each request
    from auditlog.web import init_jwt, setup_identity_middleware

    init_jwt(app)
    setup_identity_middleware(app)

    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": "apispec",
                "route": "/apispec.json",
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/api/docs",
        "uiversion": 3,
        "info": {
            "title": "Audit Log API",
            "version": "1.0.0",
            "description": (
                "Event history for remote producers. "
                "Send a Bearer token to attribute events to an account."
            ),
        },
        "schemes": ["http", "https"],
        "securityDefinitions": {
            "Bearer": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "Enter your token as: Bearer YOUR_TOKEN",
            }
        },
    }

    Flasgger(app, config=swagger_config)

    # Register API blueprints
    from auditlog.api.routes import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    return app
