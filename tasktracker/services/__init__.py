"""Services for the task tracker."""

from tasktracker.services.auth_service import AuthResult, AuthService
from tasktracker.services.codec import ImportResult, export_snapshot, parse_snapshot
from tasktracker.services.config_service import (
    ConfigService,
    get_config_service,
    reset_config_service,
)
from tasktracker.services.history import recent_history
from tasktracker.services.persistence import (
    FileGateway,
    InMemoryGateway,
    PersistenceGateway,
    create_gateway,
    task_store_key,
)
from tasktracker.services.query_engine import FilterMode, SortMode, view
from tasktracker.services.reducer import Clock, TaskReducer
from tasktracker.services.stats_aggregator import compute_stats
from tasktracker.services.task_session import SessionManager, TaskResult, TaskSession

__all__ = [
    "AuthResult",
    "AuthService",
    "Clock",
    "ConfigService",
    "FileGateway",
    "FilterMode",
    "ImportResult",
    "InMemoryGateway",
    "PersistenceGateway",
    "SessionManager",
    "SortMode",
    "TaskReducer",
    "TaskResult",
    "TaskSession",
    "compute_stats",
    "create_gateway",
    "export_snapshot",
    "get_config_service",
    "parse_snapshot",
    "recent_history",
    "reset_config_service",
    "task_store_key",
    "view",
]
