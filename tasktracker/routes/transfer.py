"""Import/export routes.

- GET /api/export - download the whole task store as JSON
- POST /api/import - replace the whole task store from an uploaded document
"""

import logging

from flask import Blueprint, Response, jsonify, request

from tasktracker.routes.session import current_session, not_logged_in

logger = logging.getLogger(__name__)

transfer_bp = Blueprint("transfer", __name__)


@transfer_bp.route("/export", methods=["GET"])
def export_tasks():
    """Download the task store.

    Returns:
        The export document as an attachment named
        ``todos_<username>_<date>.json``.
    """
    user, session = current_session()
    if session is None:
        return not_logged_in()

    filename = session.export_filename(user.username)
    return Response(
        session.export_snapshot(),
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@transfer_bp.route("/import", methods=["POST"])
def import_tasks():
    """Replace the task store with an uploaded export document.

    Accepts either a multipart upload in the ``file`` field or the
    document as the raw request body.

    Returns:
        Task and history counts, or 400 with an error message. On error the
        existing tasks are unchanged.
    """
    user, session = current_session()
    if session is None:
        return not_logged_in()

    upload = request.files.get("file")
    content = upload.read() if upload is not None else request.get_data()

    result = session.import_snapshot(content)
    if not result.success:
        logger.info(f"Import rejected for user {user.id}: {result.error}")
        return jsonify({"success": False, "error": result.error}), 400

    return jsonify(
        {
            "success": True,
            "tasks": len(result.state.tasks),
            "history": len(result.state.history),
        }
    )
