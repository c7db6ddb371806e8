"""Flask routes for the task tracker."""

from tasktracker.routes.auth import auth_bp
from tasktracker.routes.config import config_bp
from tasktracker.routes.tasks import tasks_bp
from tasktracker.routes.transfer import transfer_bp

__all__ = [
    "auth_bp",
    "config_bp",
    "tasks_bp",
    "transfer_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app.

    Args:
        app: The Flask application instance.
    """
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(config_bp, url_prefix="/api")
    app.register_blueprint(tasks_bp, url_prefix="/api")
    app.register_blueprint(transfer_bp, url_prefix="/api")
