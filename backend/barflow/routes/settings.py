# Overview: Flask API routes for settings operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import settings_service
from ..services.settings_service import SettingsError

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
def list_settings():
    return {"settings": settings_service.list_settings()}


@settings_bp.get("/<key>")
def get_setting(key: str):
    value = settings_service.get_setting(key, default=None)
    if value is None:
        return {"error": f"Setting {key} not found"}, 404
    return {"key": key, "value": value}


@settings_bp.put("/<key>")
def put_setting(key: str):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or "value" not in payload:
        return {"error": "value is required"}, 400
    value = payload["value"]
    if value is not None and not isinstance(value, (str, int, float, bool)):
        return {"error": "value must be a scalar"}, 400

    try:
        setting = settings_service.save_setting(key, value)
    except SettingsError as e:
        return {"error": str(e)}, 400
    return setting.to_dict()
