"""Auth routes.

Provides REST API endpoints for the local account registry:
- POST /api/auth/register - create an account and log in
- POST /api/auth/login - log in
- POST /api/auth/logout - log out
- GET /api/auth/me - the logged-in user
"""

import logging

from flask import Blueprint, jsonify, request

from tasktracker.routes.session import get_auth_service, get_session_manager

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _credentials() -> tuple[str, str, str | None]:
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    return (
        str(data.get("username") or ""),
        str(data.get("password") or ""),
        str(email) if email else None,
    )


@auth_bp.route("/auth/register", methods=["POST"])
def register():
    """Register a new user and log them in.

    Request body:
        {"username": "alice", "password": "secret", "email": "a@example.com"}

    Returns:
        The new user (201), or 400 with a message.
    """
    username, password, email = _credentials()
    result = get_auth_service().register(username, password, email)
    if not result.success:
        return jsonify({"success": False, "message": result.message}), 400
    return jsonify({"success": True, "user": result.user.public_dict()}), 201


@auth_bp.route("/auth/login", methods=["POST"])
def login():
    """Log in with username and password.

    Returns:
        The user, or 401 with a message.
    """
    username, password, _ = _credentials()
    result = get_auth_service().login(username, password)
    if not result.success:
        return jsonify({"success": False, "message": result.message}), 401
    return jsonify({"success": True, "user": result.user.public_dict()})


@auth_bp.route("/auth/logout", methods=["POST"])
def logout():
    """Log out the current user."""
    auth_service = get_auth_service()
    user = auth_service.current_user()
    auth_service.logout()
    if user is not None:
        get_session_manager().close(user.id)
        logger.info(f"User {user.username} logged out")
    return jsonify({"success": True})


@auth_bp.route("/auth/me", methods=["GET"])
def me():
    """Get the logged-in user (``null`` when logged out)."""
    user = get_auth_service().current_user()
    return jsonify({"user": user.public_dict() if user else None})
