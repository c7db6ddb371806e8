"""Config routes.

Provides REST API endpoints for configuration management:
- GET /api/config - Get current configuration
- POST /api/config - Update configuration
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from tasktracker.models.config import AppConfig
from tasktracker.services.config_service import ConfigService

config_bp = Blueprint("config", __name__)

logger = logging.getLogger(__name__)


def _get_config_service() -> ConfigService:
    """Get the config service from app extensions."""
    return current_app.extensions.get("config_service")


def _get_config() -> AppConfig:
    """Get the current config from app extensions."""
    return current_app.extensions.get("config")


def _merge(current: dict, changes: dict) -> dict:
    """Overlay ``changes`` on ``current``, descending into nested sections.

    Keys that are not part of the configuration are dropped.
    """
    merged = dict(current)
    for key, value in changes.items():
        if key not in merged:
            logger.debug(f"Ignoring unknown config key: {key}")
            continue
        if isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@config_bp.route("/config", methods=["GET"])
def get_config():
    """Get the current configuration.

    Returns:
        JSON object with all configuration values.
    """
    config = _get_config()
    if not config:
        return jsonify({"error": "Config not loaded"}), 500

    return jsonify(config.model_dump(mode="json"))


@config_bp.route("/config", methods=["POST"])
def update_config():
    """Update the configuration.

    Only provided fields are updated; others remain unchanged, including
    the unmentioned keys of a nested section such as ``history``. Storage
    settings (``data_dir``, ``storage_backend``) and ``port`` take effect
    on the next start; history limits apply immediately.

    Request body:
        {
            "history": {"default_limit": 20, "max_limit": 200},
            "log_level": "DEBUG",
            ...
        }

    Returns:
        JSON object with the updated configuration.
    """
    config_service = _get_config_service()
    if not config_service:
        return jsonify({"error": "Config service not available"}), 500

    data = request.get_json(silent=True) or {}

    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    updated_data = _merge(config_service.get_config().model_dump(mode="json"), data)

    try:
        new_config = AppConfig(**updated_data)
    except ValidationError as e:
        logger.warning(f"Config validation error: {e}")
        return jsonify({"error": f"Invalid configuration: {e}"}), 400

    if not config_service.save(new_config):
        return jsonify({"error": "Failed to save configuration"}), 500

    config_service.set_config(new_config)
    current_app.extensions["config"] = new_config

    logger.info(f"Configuration updated (storage={new_config.storage_backend})")

    return jsonify(new_config.model_dump(mode="json"))
