"""Request helpers shared by the route blueprints."""

from flask import current_app, jsonify

from tasktracker.models.user import User
from tasktracker.services.auth_service import AuthService
from tasktracker.services.task_session import SessionManager, TaskSession


def get_auth_service() -> AuthService:
    """Get the auth service from app extensions."""
    return current_app.extensions["auth_service"]


def get_session_manager() -> SessionManager:
    """Get the session manager from app extensions."""
    return current_app.extensions["session_manager"]


def current_session() -> tuple[User | None, TaskSession | None]:
    """Resolve the logged-in user and their task session.

    Returns:
        ``(None, None)`` when nobody is logged in.
    """
    user = get_auth_service().current_user()
    if user is None:
        return None, None
    return user, get_session_manager().session_for(user.id)


def not_logged_in():
    """Standard 401 response."""
    return jsonify({"error": "Not logged in"}), 401
