"""Import/export codec for whole task stores.

The export document is pretty-printed JSON with two top-level keys,
``tasks`` and ``history``. There is no version field.

Parsing never raises for bad input. ``parse_snapshot`` returns an
``ImportResult`` that either carries the parsed store or an error message
for the caller to show.
"""

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from tasktracker.models.store import TaskStore

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid file format"


@dataclass
class ImportResult:
    """Outcome of parsing an import document."""

    success: bool
    state: TaskStore | None = None
    error: str | None = None


def export_snapshot(state: TaskStore) -> str:
    """Serialize a store to the export document."""
    data = state.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def parse_snapshot(text: str | bytes) -> ImportResult:
    """Parse an export document into a store.

    The document must be a JSON object with a ``tasks`` list (older exports
    name it ``todos``) and an optional ``history`` list. Every task and
    history entry must validate and task ids must be unique. Anything else
    is rejected as a whole; nothing is partially applied.

    Args:
        text: Raw document contents.

    Returns:
        ImportResult with ``state`` set on success, ``error`` otherwise.
    """
    try:
        raw = json.loads(text)
    except (ValueError, TypeError) as e:
        logger.warning(f"Rejected import: not valid JSON ({e})")
        return ImportResult(success=False, error=INVALID_FORMAT_MESSAGE)

    if not isinstance(raw, dict):
        logger.warning("Rejected import: top-level value is not an object")
        return ImportResult(success=False, error=INVALID_FORMAT_MESSAGE)

    if "tasks" not in raw and "todos" in raw:
        raw = {**raw, "tasks": raw["todos"]}
    if "tasks" not in raw:
        logger.warning("Rejected import: no tasks list")
        return ImportResult(success=False, error=f"{INVALID_FORMAT_MESSAGE}: missing 'tasks'")

    try:
        state = TaskStore.model_validate({"tasks": raw["tasks"], "history": raw.get("history", [])})
    except ValidationError as e:
        logger.warning(f"Rejected import: {e.error_count()} validation errors")
        return ImportResult(
            success=False,
            error=f"{INVALID_FORMAT_MESSAGE}: {_first_error(e)}",
        )

    ids = [t.id for t in state.tasks]
    if len(ids) != len(set(ids)):
        logger.warning("Rejected import: duplicate task ids")
        return ImportResult(success=False, error=f"{INVALID_FORMAT_MESSAGE}: duplicate task ids")

    return ImportResult(success=True, state=state)


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"
