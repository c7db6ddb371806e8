"""Task routes.

Provides REST API endpoints for the logged-in user's tasks:
- List tasks with filter, search and sort
- Add, edit, delete, complete and star tasks
- Clear completed tasks
- Stats and recent history
"""

import logging
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tasktracker.models.task import Priority, Task, TaskUpdate
from tasktracker.routes.session import current_session, not_logged_in
from tasktracker.services.query_engine import FilterMode, SortMode
from tasktracker.services.task_session import TASK_NOT_FOUND_MESSAGE

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)


class NewTaskRequest(BaseModel):
    """Body of POST /api/tasks."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    category: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: date | None = Field(default=None, alias="dueDate")
    notes: str | None = None


def _task_json(task: Task) -> dict:
    return task.model_dump(mode="json", by_alias=True)


def _validation_error(e: ValidationError):
    first = e.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "body"
    return jsonify({"error": f"Invalid request: {location}: {first['msg']}"}), 400


@tasks_bp.route("/tasks", methods=["GET"])
def list_tasks():
    """List tasks for the logged-in user.

    Query params:
        filter: all | active | completed | starred (default: all)
        search: Substring matched against text and category
        sort: date | priority | name | dueDate (default: date)

    Returns:
        JSON object with ``tasks`` and ``count``.
    """
    user, session = current_session()
    if session is None:
        return not_logged_in()

    try:
        filter_mode = FilterMode(request.args.get("filter", FilterMode.ALL.value))
        sort_mode = SortMode(request.args.get("sort", SortMode.DATE.value))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    tasks = session.view(filter_mode, request.args.get("search", ""), sort_mode)
    logger.debug(
        f"[API] GET /tasks user={user.id} filter={filter_mode.value} "
        f"sort={sort_mode.value} -> {len(tasks)} tasks"
    )
    return jsonify({"tasks": [_task_json(t) for t in tasks], "count": len(tasks)})


@tasks_bp.route("/tasks", methods=["POST"])
def add_task():
    """Add a task.

    Request body:
        {
            "text": "Buy milk",
            "category": "Errands",
            "priority": "high",
            "dueDate": "2024-05-01"
        }

    Returns:
        The created task (201), or 400 if the text is blank.
    """
    _, session = current_session()
    if session is None:
        return not_logged_in()

    try:
        body = NewTaskRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    result = session.add_task(
        text=body.text,
        category=body.category,
        priority=body.priority,
        due_date=body.due_date,
        notes=body.notes,
    )
    if not result.success:
        return jsonify({"error": result.error}), 400
    return jsonify(_task_json(result.task)), 201


@tasks_bp.route("/tasks/<int:task_id>", methods=["PATCH"])
def update_task(task_id: int):
    """Edit some fields of a task.

    Only the fields present in the body are changed.

    Returns:
        The updated task, 400 for invalid fields, 404 for an unknown id.
    """
    _, session = current_session()
    if session is None:
        return not_logged_in()

    try:
        fields = TaskUpdate.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    result = session.update_task(task_id, fields)
    if not result.success:
        status = 404 if result.error == TASK_NOT_FOUND_MESSAGE else 400
        return jsonify({"error": result.error}), status
    return jsonify(_task_json(result.task))


@tasks_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
def delete_task(task_id: int):
    """Delete a task.

    Returns:
        ``{"deleted": bool}``. Deleting an unknown id is not an error.
    """
    _, session = current_session()
    if session is None:
        return not_logged_in()

    return jsonify({"deleted": session.delete_task(task_id)})


@tasks_bp.route("/tasks/<int:task_id>/toggle", methods=["POST"])
def toggle_task(task_id: int):
    """Flip a task's completed flag."""
    _, session = current_session()
    if session is None:
        return not_logged_in()

    task = session.toggle_complete(task_id)
    if task is None:
        return jsonify({"error": TASK_NOT_FOUND_MESSAGE}), 404
    return jsonify(_task_json(task))


@tasks_bp.route("/tasks/<int:task_id>/star", methods=["POST"])
def star_task(task_id: int):
    """Flip a task's starred flag."""
    _, session = current_session()
    if session is None:
        return not_logged_in()

    task = session.toggle_star(task_id)
    if task is None:
        return jsonify({"error": TASK_NOT_FOUND_MESSAGE}), 404
    return jsonify(_task_json(task))


@tasks_bp.route("/tasks/clear-completed", methods=["POST"])
def clear_completed():
    """Delete every completed task."""
    _, session = current_session()
    if session is None:
        return not_logged_in()

    return jsonify({"removed": session.clear_completed()})


@tasks_bp.route("/stats", methods=["GET"])
def get_stats():
    """Aggregate counters for the logged-in user's tasks."""
    _, session = current_session()
    if session is None:
        return not_logged_in()

    return jsonify(session.stats().model_dump())


@tasks_bp.route("/history", methods=["GET"])
def get_history():
    """Most recent audit entries, newest first.

    Query params:
        limit: Number of entries (default and cap come from config)

    Returns:
        JSON object with ``entries`` and ``total`` (full history length).
    """
    _, session = current_session()
    if session is None:
        return not_logged_in()

    history_config = current_app.extensions["config"].history
    limit = request.args.get("limit", history_config.default_limit, type=int)
    limit = max(1, min(limit, history_config.max_limit))

    entries = session.recent_history(limit)
    return jsonify(
        {
            "entries": [
                e.model_dump(mode="json", by_alias=True, exclude_none=True) for e in entries
            ],
            "total": len(session.state.history),
        }
    )
