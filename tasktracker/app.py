"""Flask application factory for the task tracker.

This module creates and configures the Flask application, wiring together
the services:

- ConfigService: Configuration loading
- PersistenceGateway: Durable key-value storage (file or memory)
- AuthService: Local accounts and the logged-in user
- SessionManager: One TaskSession (task store + reducer) per user

Usage:
    from tasktracker.app import create_app
    app = create_app()
    app.run(port=5050)
"""

import logging
from datetime import datetime

from flask import Flask, jsonify

from tasktracker.models import AppConfig
from tasktracker.routes import register_blueprints
from tasktracker.services import (
    AuthService,
    Clock,
    PersistenceGateway,
    SessionManager,
    create_gateway,
    get_config_service,
)

logger = logging.getLogger(__name__)


def create_app(
    config_path: str = "config.yaml",
    gateway: PersistenceGateway | None = None,
    clock: Clock | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_path: Path to the configuration file.
        gateway: Storage to use instead of the one named in the config.
        clock: Time source for ids and timestamps. Defaults to local time.

    Returns:
        Configured Flask application.
    """
    config_service = get_config_service(config_path)
    config = config_service.get_config()

    app = Flask(__name__)
    app.config["TESTING"] = False

    app.extensions["config"] = config
    app.extensions["config_service"] = config_service

    _init_services(app, config, gateway, clock or datetime.now)

    register_blueprints(app)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    return app


def _init_services(
    app: Flask,
    config: AppConfig,
    gateway: PersistenceGateway | None,
    clock: Clock,
) -> None:
    """Initialize all services and wire them together.

    Args:
        app: Flask application.
        config: Application configuration.
        gateway: Optional storage override.
        clock: Time source shared by every service.
    """
    if gateway is None:
        gateway = create_gateway(config.storage_backend, config.data_dir)
    app.extensions["gateway"] = gateway

    app.extensions["auth_service"] = AuthService(gateway=gateway, clock=clock)
    app.extensions["session_manager"] = SessionManager(gateway=gateway, clock=clock)

    logger.info("Services initialized")


def main():
    """Run the Flask application."""
    config = get_config_service().get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app()

    logger.info(f"Starting task tracker on port {config.port}")
    app.run(host="127.0.0.1", port=config.port, debug=config.debug, threaded=True)


if __name__ == "__main__":
    main()
